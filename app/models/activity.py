"""Sibling subsystem tables read by the attention signals."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import AuditMixin, Base, TenantScopedMixin
from app.models.enums import DocumentStatus, SignatureStatus


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Message(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_tenant_user_read", "tenant_id", "user_id", "is_read"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_from_client: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Document(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "documents"
    __table_args__ = (Index("idx_documents_tenant_user_status", "tenant_id", "user_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, values_callable=_enum_values, name="document_status"),
        default=DocumentStatus.PENDING,
        nullable=False,
    )


class SignatureRequest(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "signature_requests"
    __table_args__ = (Index("idx_signature_requests_tenant_user_status", "tenant_id", "user_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    document_type: Mapped[str] = mapped_column(String(60), nullable=False)
    status: Mapped[SignatureStatus] = mapped_column(
        Enum(SignatureStatus, values_callable=_enum_values, name="signature_status"),
        default=SignatureStatus.PENDING,
        nullable=False,
    )
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
