class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class ImportFailedError(AppError):
    def __init__(self, message: str = "Import failed. Please try again."):
        super().__init__(message, code="IMPORT_FAILED")


class RowValidationError(ValidationError):
    """A single CSV row was rejected; recorded in the import result, never surfaced over HTTP."""
