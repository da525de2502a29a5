"""Document upload, listing, download and deletion."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Path, UploadFile, status
from fastapi.responses import FileResponse

from employee_mgmt.api.dependencies import (
    AdminIdentity,
    AppSettings,
    CurrentIdentity,
    DbSession,
    EmployeeIdentity,
    RoleGatedRoute,
    Storage,
)
from employee_mgmt.api.schemas import (
    DocumentEnvelope,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    MessageResponse,
)
from employee_mgmt.errors import ValidationError
from employee_mgmt.models import Document
from employee_mgmt.services.document_service import PDF_CONTENT_TYPE, DocumentRow, DocumentService

router = APIRouter(prefix="/documents", tags=["documents"], route_class=RoleGatedRoute)

CHUNK_SIZE = 64 * 1024


def _document(document: Document, first_name: str | None = None, last_name: str | None = None) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        employee_id=document.employee_id,
        document_type=document.document_type,
        file_path=document.file_path,
        original_name=document.original_name,
        uploaded_at=document.uploaded_at,
        first_name=first_name,
        last_name=last_name,
    )


def _rows(rows: list[DocumentRow]) -> list[DocumentResponse]:
    return [_document(row.document, row.first_name, row.last_name) for row in rows]


async def _read_capped(upload: UploadFile, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes so oversize files are detected without buffering them."""
    chunks = []
    received = 0
    while received <= limit:
        chunk = await upload.read(min(CHUNK_SIZE, limit + 1 - received))
        if not chunk:
            break
        chunks.append(chunk)
        received += len(chunk)
    return b"".join(chunks)


@router.post(
    "/upload",
    response_model=DocumentEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def upload_document(
    db: DbSession,
    settings: AppSettings,
    storage: Storage,
    identity: EmployeeIdentity,
    document: Annotated[UploadFile | None, File()] = None,
    document_type: Annotated[str | None, Form(alias="documentType")] = None,
) -> DocumentEnvelope:
    """Store a PDF for the calling employee."""
    if document is None:
        raise ValidationError("No file uploaded")
    try:
        content = await _read_capped(document, settings.max_upload_bytes)
    finally:
        await document.close()

    service = DocumentService(db, storage, settings.max_upload_bytes)
    stored = await service.upload(
        identity,
        content,
        document.content_type,
        original_name=document.filename,
        document_type=document_type,
    )
    try:
        await db.commit()
    except Exception:
        storage.remove(stored.file_path)
        raise
    return DocumentEnvelope(message="Document uploaded successfully", document=_document(stored))


@router.get("", response_model=DocumentListResponse)
async def list_documents(db: DbSession, settings: AppSettings, storage: Storage, identity: AdminIdentity) -> DocumentListResponse:
    rows = await DocumentService(db, storage, settings.max_upload_bytes).list_all()
    return DocumentListResponse(documents=_rows(rows))


@router.get(
    "/employee",
    response_model=DocumentListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def my_documents(
    db: DbSession,
    settings: AppSettings,
    storage: Storage,
    identity: EmployeeIdentity,
) -> DocumentListResponse:
    rows = await DocumentService(db, storage, settings.max_upload_bytes).list_for_account(identity.id)
    return DocumentListResponse(documents=_rows(rows))


@router.get(
    "/download/{document_id}",
    response_class=FileResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def download_document(
    db: DbSession,
    settings: AppSettings,
    storage: Storage,
    identity: CurrentIdentity,
    document_id: Annotated[int, Path()],
) -> FileResponse:
    """Stream the stored PDF to its owner or an admin."""
    service = DocumentService(db, storage, settings.max_upload_bytes)
    document, path = await service.open_for_download(document_id, identity)
    return FileResponse(
        path,
        media_type=PDF_CONTENT_TYPE,
        filename=document.original_name or document.file_path,
    )


@router.delete(
    "/{document_id}",
    response_model=MessageResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_document(
    db: DbSession,
    settings: AppSettings,
    storage: Storage,
    identity: CurrentIdentity,
    document_id: Annotated[int, Path()],
) -> MessageResponse:
    stored = await DocumentService(db, storage, settings.max_upload_bytes).delete(document_id, identity)
    await db.commit()
    storage.remove(stored)
    return MessageResponse(message="Document deleted successfully")
