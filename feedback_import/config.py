from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "FI_", "env_file": ".env", "env_file_encoding": "utf-8"}

    db_path: str = Field(default="feedback_import.db")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    cors_origins: str = Field(default="http://localhost:3000")
    default_board_id: str = Field(default="default")

    # Import pipeline
    import_batch_size: int = Field(default=10, ge=1)
    import_batch_delay_seconds: float = Field(default=0.1, ge=0.0)
    import_preview_rows: int = Field(default=5, ge=1)
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    advisory_max_rows: int = Field(default=1000, gt=0)
    max_seeded_votes: int = Field(default=1000, ge=0)
    import_session_ttl_seconds: float = Field(default=3600.0, gt=0)
    import_max_sessions: int = Field(default=200, ge=1)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
