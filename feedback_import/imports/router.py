from fastapi import APIRouter, Form, UploadFile
from fastapi.responses import Response

from feedback_import.config import settings
from feedback_import.dependencies import ImportServiceDep
from feedback_import.imports.report import ERROR_REPORT_FILENAME
from feedback_import.imports.schemas import (
    ImportResult,
    ImportSessionResponse,
    MappingUpdateRequest,
    PreviewResponse,
)

router = APIRouter()


async def read_upload(file: UploadFile) -> bytes:
    """Read at most one byte past the upload limit so oversize files fail validation."""
    return await file.read(settings.max_upload_bytes + 1)


@router.post("/", status_code=201, response_model=ImportSessionResponse)
async def create_import(
    file: UploadFile,
    service: ImportServiceDep,
    board_id: str | None = Form(default=None),
) -> ImportSessionResponse:
    content = await read_upload(file)
    session = service.create_session(content, file.filename or "upload.csv", board_id)
    return service.to_response(session)


@router.get("/{session_id}", response_model=ImportSessionResponse)
async def get_import(session_id: str, service: ImportServiceDep) -> ImportSessionResponse:
    return service.to_response(service.get(session_id))


@router.post("/{session_id}/upload", response_model=ImportSessionResponse)
async def upload_file(
    session_id: str,
    file: UploadFile,
    service: ImportServiceDep,
) -> ImportSessionResponse:
    content = await read_upload(file)
    session = service.upload(session_id, content, file.filename or "upload.csv")
    return service.to_response(session)


@router.put("/{session_id}/mapping", response_model=ImportSessionResponse)
async def update_mapping(
    session_id: str,
    data: MappingUpdateRequest,
    service: ImportServiceDep,
) -> ImportSessionResponse:
    return service.to_response(service.update_mappings(session_id, data.mappings))


@router.post("/{session_id}/preview", response_model=PreviewResponse)
async def preview_import(session_id: str, service: ImportServiceDep) -> PreviewResponse:
    return service.preview(session_id)


@router.post("/{session_id}/back", response_model=ImportSessionResponse)
async def back_to_mapping(session_id: str, service: ImportServiceDep) -> ImportSessionResponse:
    return service.to_response(service.back_to_mapping(session_id))


@router.post("/{session_id}/run", response_model=ImportResult)
async def run_import(session_id: str, service: ImportServiceDep) -> ImportResult:
    return await service.run(session_id)


@router.get("/{session_id}/errors.csv")
async def download_error_report(session_id: str, service: ImportServiceDep) -> Response:
    return Response(
        content=service.error_report(session_id),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{ERROR_REPORT_FILENAME}"'},
    )


@router.post("/{session_id}/reset", response_model=ImportSessionResponse)
async def reset_import(session_id: str, service: ImportServiceDep) -> ImportSessionResponse:
    return service.to_response(service.reset(session_id))


@router.delete("/{session_id}", status_code=204)
async def discard_import(session_id: str, service: ImportServiceDep) -> None:
    service.discard(session_id)
