from dataclasses import dataclass, field
from enum import StrEnum


class TargetField(StrEnum):
    title = "title"
    description = "description"
    status = "status"
    author_name = "author_name"
    author_email = "author_email"
    votes = "votes"
    created_at = "created_at"
    skip = "skip"


class ImportStep(StrEnum):
    upload = "upload"
    mapping = "mapping"
    preview = "preview"
    importing = "importing"
    complete = "complete"


@dataclass
class CSVDocument:
    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers or not self.rows


@dataclass
class ColumnMapping:
    column: str
    field: TargetField = TargetField.skip
