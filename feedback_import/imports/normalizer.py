import re

from feedback_import.exceptions import RowValidationError
from feedback_import.imports.models import ColumnMapping, TargetField
from feedback_import.imports.schemas import PostPayload
from feedback_import.posts.models import PostStatus

MIN_VOTES = 0
MAX_VOTES = 1000

VALID_STATUSES = {s.value for s in PostStatus}

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    return value.strip()


def normalize_status(value: str) -> PostStatus:
    """Lowercase the status, defaulting to 'open' for anything unrecognized."""
    normalized = value.strip().lower()
    if normalized in VALID_STATUSES:
        return PostStatus(normalized)
    return PostStatus.open


def normalize_votes(value: str, max_votes: int = MAX_VOTES) -> int:
    """Parse the leading integer of the value (like parseInt) and clamp it to [0, max_votes]."""
    match = _LEADING_INT.match(value)
    votes = int(match.group(1)) if match else 0
    return min(max(votes, MIN_VOTES), max_votes)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_name(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def _optional(value: str) -> str | None:
    return value if value else None


def build_payload(
    mapping: list[ColumnMapping],
    record: dict[str, str],
    board_id: str,
    *,
    require_title: bool = True,
) -> PostPayload:
    """Coerce one CSV record into a post payload using the confirmed column mapping.

    Columns are applied in mapping order, so when several columns share a
    field the last one wins. Raises RowValidationError when a title column
    is blank and ``require_title`` is set.
    """
    values: dict = {"board_id": board_id, "status": PostStatus.open}

    for entry in mapping:
        if entry.field == TargetField.skip:
            continue

        raw = record.get(entry.column, "")

        if entry.field == TargetField.title:
            title = normalize_text(raw)
            if require_title and not title:
                raise RowValidationError("Title is required")
            values["title"] = title
        elif entry.field == TargetField.status:
            values["status"] = normalize_status(raw)
        elif entry.field == TargetField.votes:
            values["votes"] = normalize_votes(raw)
        elif entry.field == TargetField.author_email:
            values["author_email"] = _optional(normalize_email(raw))
        elif entry.field == TargetField.author_name:
            values["author_name"] = _optional(normalize_name(raw))
        else:
            # description and created_at; created_at is stored as given, no date parsing
            values[str(entry.field)] = _optional(normalize_text(raw))

    return PostPayload(**values)
