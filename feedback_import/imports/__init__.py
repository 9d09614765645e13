from feedback_import.imports.batch import BatchImporter, PostCreator
from feedback_import.imports.classifier import infer_field, infer_mappings
from feedback_import.imports.csv_parser import decode_content, parse_csv
from feedback_import.imports.normalizer import build_payload
from feedback_import.imports.report import render_error_report
from feedback_import.imports.session import ImportSession

__all__ = [
    "BatchImporter",
    "ImportSession",
    "PostCreator",
    "build_payload",
    "decode_content",
    "infer_field",
    "infer_mappings",
    "parse_csv",
    "render_error_report",
]
