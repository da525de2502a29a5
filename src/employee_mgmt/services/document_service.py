"""Document store: PDF blobs on disk plus metadata rows."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.errors import AuthorizationError, InternalError, NotFoundError, ValidationError
from employee_mgmt.models import Document, Employee, User
from employee_mgmt.security import Identity
from employee_mgmt.services.employee_service import require_profile

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DOCUMENT_TYPES = ("contract", "certificate", "report", "other")
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class DocumentStorage:
    """Flat directory of uploaded blobs keyed by generated file names."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        # Stored names are generated here; never accept separators from callers
        return self.root / Path(name).name

    def save(self, content: bytes, suffix: str = ".pdf") -> str:
        name = f"{uuid.uuid4().hex}{suffix}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.path_for(name).write_bytes(content)
        except OSError as exc:
            logger.error("Could not write blob %s under %s: %s", name, self.root, exc)
            raise InternalError("Failed to store uploaded file") from exc
        return name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def remove(self, name: str) -> bool:
        """Delete a blob. Returns False when it was already gone."""
        try:
            self.path_for(name).unlink()
        except FileNotFoundError:
            logger.warning("Blob %s missing from %s", name, self.root)
            return False
        return True


def validate_upload(content_type: str | None, size: int, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
    if content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Only PDF files are allowed")
    if size == 0:
        raise ValidationError("No file uploaded")
    if size > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")


@dataclass
class DocumentRow:
    document: Document
    first_name: str | None = None
    last_name: str | None = None


class DocumentService:
    """Upload, list, fetch and delete employee documents."""

    def __init__(self, session: AsyncSession, storage: DocumentStorage, max_bytes: int = DEFAULT_MAX_BYTES):
        self.session = session
        self.storage = storage
        self.max_bytes = max_bytes

    async def upload(
        self,
        requester: Identity,
        content: bytes,
        content_type: str | None,
        original_name: str | None = None,
        document_type: str | None = None,
    ) -> Document:
        """Validate, resolve the owner, then write blob and metadata.

        Nothing touches disk or the database before validation passes.
        """
        validate_upload(content_type, len(content), self.max_bytes)
        document_type = document_type or "other"
        if document_type not in DOCUMENT_TYPES:
            raise ValidationError("Invalid document type")
        employee = await require_profile(self.session, requester.id)

        suffix = Path(original_name or "").suffix.lower() or ".pdf"
        stored = self.storage.save(content, suffix)
        document = Document(
            employee_id=employee.id,
            document_type=document_type,
            file_path=stored,
            original_name=original_name,
        )
        self.session.add(document)
        try:
            await self.session.flush()
            await self.session.refresh(document)
        except Exception:
            self.storage.remove(stored)
            raise
        logger.info("Employee %s uploaded %s document %s", employee.id, document_type, stored)
        return document

    async def list_all(self) -> list[DocumentRow]:
        result = await self.session.execute(
            select(Document, User.first_name, User.last_name)
            .join(Employee, Document.employee_id == Employee.id)
            .join(User, Employee.user_id == User.id)
            .order_by(Document.uploaded_at.desc(), Document.id.desc())
        )
        return [DocumentRow(doc, first, last) for doc, first, last in result.all()]

    async def list_for_account(self, user_id: int) -> list[DocumentRow]:
        employee = await require_profile(self.session, user_id)
        result = await self.session.execute(
            select(Document)
            .where(Document.employee_id == employee.id)
            .order_by(Document.uploaded_at.desc(), Document.id.desc())
        )
        return [DocumentRow(doc) for doc in result.scalars().all()]

    async def get_authorized(self, document_id: int, requester: Identity) -> Document:
        """Document the requester may act on: admins any, employees their own."""
        document = await self.session.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not requester.is_admin:
            result = await self.session.execute(
                select(Employee.id).where(Employee.user_id == requester.id)
            )
            if result.scalar_one_or_none() != document.employee_id:
                raise AuthorizationError("Access denied")
        return document

    async def open_for_download(self, document_id: int, requester: Identity) -> tuple[Document, Path]:
        document = await self.get_authorized(document_id, requester)
        if not self.storage.exists(document.file_path):
            raise NotFoundError("File not found on server")
        return document, self.storage.path_for(document.file_path)

    async def delete(self, document_id: int, requester: Identity) -> str:
        """Remove the metadata row and return the stored blob name.

        The caller unlinks the blob once the deletion is committed.
        """
        document = await self.get_authorized(document_id, requester)
        stored = document.file_path
        await self.session.delete(document)
        await self.session.flush()
        logger.info("Document %s deleted by account %s", document_id, requester.id)
        return stored
