"""Permissive CSV scanner for uploaded feedback files.

Malformed quoting is never an error: the scanner keeps consuming characters,
so a stray quote can swallow separators until the next quote.
"""

import structlog

from feedback_import.imports.models import CSVDocument

logger = structlog.get_logger()

BOM = "\ufeff"


def decode_content(file_content: bytes) -> str:
    """Decode bytes to string with encoding fallback."""
    try:
        return file_content.decode("utf-8")
    except UnicodeDecodeError:
        logger.info("csv_decode_fallback", encoding="latin-1")
        return file_content.decode("latin-1")


def _split_records(text: str) -> list[list[str]]:
    records: list[list[str]] = []
    current_value: list[str] = []
    current_row: list[str] = []
    in_quotes = False

    def push_value() -> None:
        current_row.append("".join(current_value))
        current_value.clear()

    def push_row() -> None:
        nonlocal current_row
        if any(cell.strip() for cell in current_row):
            records.append(current_row)
        current_row = []

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == '"':
            if in_quotes and next_char == '"':
                current_value.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            push_value()
        elif char in "\r\n" and not in_quotes:
            if char == "\r" and next_char == "\n":
                i += 1
            push_value()
            push_row()
        else:
            current_value.append(char)
        i += 1

    if current_value or current_row:
        push_value()
        push_row()

    return records


def parse_csv(text: str) -> CSVDocument:
    """Split raw CSV text into trimmed headers and header-keyed records.

    Rows whose cells are all blank are dropped. Short rows are padded with
    empty strings so every record carries every header.
    """
    records = _split_records(text)
    if not records:
        return CSVDocument()

    headers = [cell.strip() for cell in records[0]]
    if headers and headers[0].startswith(BOM):
        headers[0] = headers[0].removeprefix(BOM).strip()

    rows: list[dict[str, str]] = []
    for record in records[1:]:
        row = {
            header: (record[index] if index < len(record) else "").strip()
            for index, header in enumerate(headers)
        }
        if any(row.values()):
            rows.append(row)

    logger.debug("csv_parsed", headers=len(headers), rows=len(rows))
    return CSVDocument(headers=headers, rows=rows)
