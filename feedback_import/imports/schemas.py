from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from feedback_import.imports.models import ImportStep, TargetField
from feedback_import.posts.models import PostStatus
from feedback_import.posts.schemas import PostCreate


class PostPayload(BaseModel):
    """One normalized CSV row, ready to be sent to the create-post collaborator."""

    board_id: str
    status: PostStatus = PostStatus.open
    title: str = ""
    description: str | None = None
    author_name: str | None = None
    author_email: str | None = None
    created_at: str | None = None
    votes: int = 0

    def to_create(self) -> PostCreate:
        return PostCreate(**self.model_dump(exclude={"votes"}))


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImportRowError(_CamelModel):
    row: int
    field: str = "general"
    message: str


class CreatedPost(_CamelModel):
    id: str
    title: str


class ImportResult(_CamelModel):
    total_rows: int
    success_count: int = 0
    error_count: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
    created_posts: list[CreatedPost] = Field(default_factory=list)


class ColumnMappingEntry(BaseModel):
    column: str
    field: TargetField
    sample: str = ""


class ColumnMappingUpdate(BaseModel):
    column: str
    field: TargetField


class MappingUpdateRequest(BaseModel):
    mappings: list[ColumnMappingUpdate] = Field(min_length=1)


class PreviewRow(BaseModel):
    row_number: int
    values: dict[str, str | int | None]


class PreviewResponse(BaseModel):
    session_id: str
    total_rows: int
    rows: list[PreviewRow]


class ImportSessionResponse(BaseModel):
    id: str
    step: ImportStep
    board_id: str
    filename: str | None
    headers: list[str]
    mappings: list[ColumnMappingEntry]
    total_rows: int
    progress: int
    result: ImportResult | None = None
