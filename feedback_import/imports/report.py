import csv
import io

from feedback_import.imports.schemas import ImportRowError

ERROR_REPORT_HEADER = ["Row", "Field", "Error"]
ERROR_REPORT_FILENAME = "import-errors.csv"


def render_error_report(errors: list[ImportRowError]) -> str:
    """Render row errors as CSV: row number bare, field and message quoted."""
    buffer = io.StringIO()
    buffer.write(",".join(ERROR_REPORT_HEADER) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for error in errors:
        writer.writerow([error.row, error.field, error.message])

    return buffer.getvalue()
