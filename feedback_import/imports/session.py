import time
from uuid import uuid4

import structlog

from feedback_import.exceptions import ConflictError, ValidationError
from feedback_import.imports.batch import BatchImporter
from feedback_import.imports.classifier import infer_mappings
from feedback_import.imports.csv_parser import parse_csv
from feedback_import.imports.models import ColumnMapping, CSVDocument, ImportStep, TargetField
from feedback_import.imports.normalizer import build_payload
from feedback_import.imports.schemas import ImportResult, PreviewRow

logger = structlog.get_logger()

DEFAULT_PREVIEW_ROWS = 5


class ImportSession:
    """One upload-to-result walk through the import wizard.

    Steps move upload -> mapping -> preview -> importing -> complete, with
    preview -> mapping allowed and reset() returning to upload from anywhere.
    """

    def __init__(self, board_id: str, session_id: str | None = None) -> None:
        self.id = session_id or str(uuid4())
        self.board_id = board_id
        self.filename: str | None = None
        self.step = ImportStep.upload
        self.document = CSVDocument()
        self.mappings: list[ColumnMapping] = []
        self.progress = 0
        self.result: ImportResult | None = None
        self.touched_at = time.monotonic()
        # Bumped by reset(); a run only writes back while its generation is current
        self._generation = 0

    @property
    def total_rows(self) -> int:
        if self.result is not None:
            return self.result.total_rows
        return len(self.document.rows)

    @property
    def is_finished(self) -> bool:
        return self.step == ImportStep.complete

    def touch(self) -> None:
        self.touched_at = time.monotonic()

    def load(self, text: str, filename: str | None = None) -> None:
        self._require_step(ImportStep.upload, "upload a file")

        document = parse_csv(text)
        if document.is_empty:
            raise ValidationError("CSV must have at least a header row and one data row")

        self.document = document
        self.filename = filename
        self.mappings = infer_mappings(document.headers)
        self.step = ImportStep.mapping

        logger.info(
            "import_file_loaded",
            session_id=self.id,
            filename=filename,
            columns=len(document.headers),
            rows=len(document.rows),
        )

    def update_mapping(self, column: str, field: TargetField) -> None:
        # Manual choices are not deduplicated; two columns may share a field.
        self._require_step(ImportStep.mapping, "change column mappings")

        matched = False
        for entry in self.mappings:
            if entry.column == column:
                entry.field = field
                matched = True
        if not matched:
            raise ValidationError(f"Unknown column '{column}'")

    def continue_to_preview(self, limit: int = DEFAULT_PREVIEW_ROWS) -> list[PreviewRow]:
        self._require_step(ImportStep.mapping, "preview")
        if not any(entry.field == TargetField.title for entry in self.mappings):
            raise ValidationError(
                "Title field is required. Please map at least one column to Title."
            )

        self.step = ImportStep.preview
        return self.preview_rows(limit)

    def preview_rows(self, limit: int = DEFAULT_PREVIEW_ROWS) -> list[PreviewRow]:
        mapped_fields = [e.field for e in self.mappings if e.field != TargetField.skip]
        rows: list[PreviewRow] = []
        for index, record in enumerate(self.document.rows[:limit], start=1):
            payload = build_payload(self.mappings, record, self.board_id, require_title=False)
            values = payload.model_dump(mode="json")
            rows.append(
                PreviewRow(
                    row_number=index,
                    values={str(f): values[str(f)] for f in mapped_fields},
                )
            )
        return rows

    def back_to_mapping(self) -> None:
        self._require_step(ImportStep.preview, "go back to mapping")
        self.step = ImportStep.mapping

    async def run(self, importer: BatchImporter) -> ImportResult:
        self._require_step(ImportStep.preview, "start the import")

        self.step = ImportStep.importing
        self.progress = 0
        generation = self._generation
        # Snapshot so the mapping cannot change under a running import
        mappings = [ColumnMapping(column=e.column, field=e.field) for e in self.mappings]

        def on_progress(percent: int) -> None:
            if generation == self._generation:
                self.progress = percent

        try:
            result = await importer.run(
                self.document.rows,
                mappings,
                self.board_id,
                on_progress=on_progress,
            )
        except Exception:
            if generation == self._generation:
                self.step = ImportStep.preview
                self.progress = 0
            raise

        if generation != self._generation:
            logger.info("import_result_discarded", session_id=self.id)
            return result

        self.result = result
        self.step = ImportStep.complete
        # Rows are not needed once the result exists; headers stay for display
        self.document = CSVDocument(headers=self.document.headers)
        return result

    def reset(self) -> None:
        self._generation += 1
        self.step = ImportStep.upload
        self.filename = None
        self.document = CSVDocument()
        self.mappings = []
        self.progress = 0
        self.result = None
        logger.info("import_session_reset", session_id=self.id)

    def _require_step(self, expected: ImportStep, action: str) -> None:
        if self.step != expected:
            raise ConflictError(
                f"Cannot {action} while the import is in the '{self.step}' step"
            )
