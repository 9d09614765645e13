"""Header-to-field inference for uploaded CSV columns.

Rules are checked in a fixed order and the first field to claim a header
locks that field for every later header. A more specific header that comes
after a generic one ("Title" then "Post Title") is therefore left as skip.
"""

import re

import structlog

from feedback_import.imports.models import ColumnMapping, TargetField

logger = structlog.get_logger()

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")

_PERSON_QUALIFIERS = {"author", "submitter", "requester", "customer", "user"}


def _normalize(header: str) -> str:
    return header.strip().lower()


def _tokens(header: str) -> set[str]:
    return {token for token in _TOKEN_SPLIT.split(_normalize(header)) if token}


def _collapse(header: str) -> str:
    return _NON_ALNUM.sub("", _normalize(header))


def _is_title(tokens: set[str], collapsed: str, normalized: str) -> bool:
    return "title" in tokens or collapsed in {"posttitle", "feedbacktitle", "requesttitle"}


def _is_description(tokens: set[str], collapsed: str, normalized: str) -> bool:
    return bool(tokens & {"description", "details", "summary"}) or collapsed in {
        "feedback",
        "requestdescription",
    }


def _is_status(tokens: set[str], collapsed: str, normalized: str) -> bool:
    return bool(tokens & {"status", "state"}) or collapsed == "workflowstatus"


def _is_votes(tokens: set[str], collapsed: str, normalized: str) -> bool:
    return collapsed in {"votes", "votecount"} or bool(tokens & {"upvotes", "score"})


def _is_created_at(tokens: set[str], collapsed: str, normalized: str) -> bool:
    if collapsed in {"createdat", "createddate", "submissiondate", "submitteddate", "submittedon"}:
        return True
    if "date" in tokens and tokens & {"created", "submitted", "reported", "captured"}:
        return True
    return "timestamp" in tokens


def _is_author_email(tokens: set[str], collapsed: str, normalized: str) -> bool:
    if collapsed in {"authoremail", "submitteremail", "requesteremail"} or normalized == "email":
        return True
    return "email" in tokens and bool(tokens & _PERSON_QUALIFIERS)


def _is_author_name(tokens: set[str], collapsed: str, normalized: str) -> bool:
    if normalized == "name" or collapsed in {"authorname", "submittername", "requestername"}:
        return True
    return "name" in tokens and bool(tokens & (_PERSON_QUALIFIERS | {"person"}))


_RULES = [
    (TargetField.title, _is_title),
    (TargetField.description, _is_description),
    (TargetField.status, _is_status),
    (TargetField.votes, _is_votes),
    (TargetField.created_at, _is_created_at),
    (TargetField.author_email, _is_author_email),
    (TargetField.author_name, _is_author_name),
]


def infer_field(header: str, used_fields: set[TargetField]) -> TargetField:
    """Guess the target field for one header, claiming it in ``used_fields``."""
    tokens = _tokens(header)
    collapsed = _collapse(header)
    normalized = _normalize(header)

    for target, matches in _RULES:
        if target in used_fields:
            continue
        if matches(tokens, collapsed, normalized):
            used_fields.add(target)
            return target

    return TargetField.skip


def infer_mappings(headers: list[str]) -> list[ColumnMapping]:
    used_fields: set[TargetField] = set()
    mappings = [
        ColumnMapping(column=header, field=infer_field(header, used_fields)) for header in headers
    ]
    logger.info(
        "columns_inferred",
        mapping={m.column: str(m.field) for m in mappings},
    )
    return mappings
