"""Tax return model module."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base, TenantScopedMixin
from app.models.enums import ReturnPrepStatus, ReturnType


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class TaxReturn(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "tax_returns"
    __table_args__ = (Index("idx_tax_returns_tenant_status", "tenant_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    return_type: Mapped[ReturnType] = mapped_column(
        Enum(ReturnType, values_callable=_enum_values, name="return_type"),
        default=ReturnType.PERSONAL,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    # Null means the return has no recorded stage yet.
    status: Mapped[ReturnPrepStatus | None] = mapped_column(
        Enum(ReturnPrepStatus, values_callable=_enum_values, name="return_prep_status"),
    )

    user = relationship("User", back_populates="returns")
