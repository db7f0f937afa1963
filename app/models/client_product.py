"""Client product model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base, TenantScopedMixin


class ClientProduct(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "client_products"
    __table_args__ = (Index("idx_client_products_tenant_product", "tenant_id", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    current_stage_id: Mapped[int | None] = mapped_column(ForeignKey("product_stages.id", ondelete="SET NULL"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    user = relationship("User", back_populates="client_products")
    product = relationship("Product")
    current_stage = relationship("ProductStage")
