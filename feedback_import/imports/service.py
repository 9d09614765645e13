import time

import structlog

from feedback_import.config import settings
from feedback_import.exceptions import NotFoundError, ValidationError
from feedback_import.imports.batch import BatchImporter, PostCreator
from feedback_import.imports.csv_parser import decode_content
from feedback_import.imports.models import ImportStep
from feedback_import.imports.report import render_error_report
from feedback_import.imports.schemas import (
    ColumnMappingEntry,
    ColumnMappingUpdate,
    ImportResult,
    ImportSessionResponse,
    PreviewResponse,
)
from feedback_import.imports.session import ImportSession

logger = structlog.get_logger()

ALLOWED_EXTENSIONS = (".csv", ".txt")


class ImportSessionStore:
    """In-memory registry of import sessions; nothing survives a restart.

    Sessions idle longer than ``ttl_seconds`` are evicted, and once more than
    ``max_sessions`` are held the least recently used ones go first, finished
    sessions before unfinished ones. A session that is importing is never
    evicted.
    """

    def __init__(self, max_sessions: int | None = None, ttl_seconds: float | None = None) -> None:
        self._sessions: dict[str, ImportSession] = {}
        self._max_sessions = (
            settings.import_max_sessions if max_sessions is None else max_sessions
        )
        self._ttl_seconds = (
            settings.import_session_ttl_seconds if ttl_seconds is None else ttl_seconds
        )

    def add(self, session: ImportSession) -> None:
        session.touch()
        self._sessions[session.id] = session
        self._evict(keep=session.id)

    def get(self, session_id: str) -> ImportSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch()
        return session

    def remove(self, session_id: str) -> ImportSession | None:
        return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def _evict(self, keep: str) -> None:
        before = len(self._sessions)
        cutoff = time.monotonic() - self._ttl_seconds
        evictable = [
            s
            for s in self._sessions.values()
            if s.id != keep and s.step != ImportStep.importing
        ]

        for session in evictable:
            if session.touched_at < cutoff:
                del self._sessions[session.id]

        overflow = len(self._sessions) - self._max_sessions
        if overflow > 0:
            candidates = sorted(
                (s for s in evictable if s.id in self._sessions),
                key=lambda s: (not s.is_finished, s.touched_at),
            )
            for session in candidates[:overflow]:
                del self._sessions[session.id]

        evicted = before - len(self._sessions)
        if evicted:
            logger.info("import_sessions_evicted", count=evicted, remaining=len(self._sessions))


session_store = ImportSessionStore()


class ImportService:
    def __init__(
        self,
        creator: PostCreator,
        store: ImportSessionStore | None = None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
    ) -> None:
        self._creator = creator
        self._store = session_store if store is None else store
        self._batch_size = settings.import_batch_size if batch_size is None else batch_size
        self._batch_delay = (
            settings.import_batch_delay_seconds if batch_delay is None else batch_delay
        )

    def create_session(
        self, file_content: bytes, filename: str, board_id: str | None = None
    ) -> ImportSession:
        """Start a new session and load the uploaded file into it."""
        session = ImportSession(board_id=board_id or settings.default_board_id)
        self._load(session, file_content, filename)
        self._store.add(session)
        return session

    def upload(self, session_id: str, file_content: bytes, filename: str) -> ImportSession:
        session = self.get(session_id)
        self._load(session, file_content, filename)
        return session

    def get(self, session_id: str) -> ImportSession:
        session = self._store.get(session_id)
        if session is None:
            raise NotFoundError("Import session", session_id)
        return session

    def update_mappings(
        self, session_id: str, updates: list[ColumnMappingUpdate]
    ) -> ImportSession:
        session = self.get(session_id)
        for update in updates:
            session.update_mapping(update.column, update.field)
        logger.info(
            "import_mapping_updated",
            session_id=session_id,
            mapping={e.column: str(e.field) for e in session.mappings},
        )
        return session

    def preview(self, session_id: str) -> PreviewResponse:
        session = self.get(session_id)
        rows = session.continue_to_preview(settings.import_preview_rows)
        return PreviewResponse(session_id=session.id, total_rows=session.total_rows, rows=rows)

    def back_to_mapping(self, session_id: str) -> ImportSession:
        session = self.get(session_id)
        session.back_to_mapping()
        return session

    async def run(self, session_id: str) -> ImportResult:
        session = self.get(session_id)
        importer = BatchImporter(
            self._creator,
            batch_size=self._batch_size,
            batch_delay=self._batch_delay,
        )
        return await session.run(importer)

    def error_report(self, session_id: str) -> str:
        session = self.get(session_id)
        if session.result is None or not session.result.errors:
            raise NotFoundError("Error report", session_id)
        return render_error_report(session.result.errors)

    def reset(self, session_id: str) -> ImportSession:
        session = self.get(session_id)
        session.reset()
        return session

    def discard(self, session_id: str) -> None:
        if self._store.remove(session_id) is None:
            raise NotFoundError("Import session", session_id)
        logger.info("import_session_discarded", session_id=session_id)

    def to_response(self, session: ImportSession) -> ImportSessionResponse:
        first_row = session.document.rows[0] if session.document.rows else {}
        return ImportSessionResponse(
            id=session.id,
            step=session.step,
            board_id=session.board_id,
            filename=session.filename,
            headers=session.document.headers,
            mappings=[
                ColumnMappingEntry(
                    column=e.column,
                    field=e.field,
                    sample=first_row.get(e.column, ""),
                )
                for e in session.mappings
            ],
            total_rows=session.total_rows,
            progress=session.progress,
            result=session.result,
        )

    def _load(self, session: ImportSession, file_content: bytes, filename: str) -> None:
        self._validate_file(file_content, filename)
        text = decode_content(file_content)
        session.load(text, filename)

        if session.total_rows > settings.advisory_max_rows:
            logger.warning(
                "import_rows_over_advisory_limit",
                session_id=session.id,
                rows=session.total_rows,
                limit=settings.advisory_max_rows,
            )

    def _validate_file(self, file_content: bytes, filename: str) -> None:
        if not filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise ValidationError("File must be a .csv or .txt file")
        if len(file_content) > settings.max_upload_bytes:
            limit_mb = settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"File is too large (maximum {limit_mb}MB)")
