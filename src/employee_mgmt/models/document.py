"""Uploaded document metadata model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_mgmt.models.base import Base

if TYPE_CHECKING:
    from employee_mgmt.models.account import Employee


class Document(Base):
    """Metadata row for a PDF stored in the upload directory."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    document_type: Mapped[str] = mapped_column(String(20), nullable=False, default="other")
    file_path: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    original_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "document_type IN ('contract', 'certificate', 'report', 'other')",
            name="documents_type_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="documents")
