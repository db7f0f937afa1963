"""Product and product stage model module."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base, TenantScopedMixin

DEFAULT_STAGE_COLOR = "#6b7280"


class Product(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "products"
    __table_args__ = (Index("idx_products_tenant_active", "tenant_id", "is_active"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str] = mapped_column(String(60), default="Package", nullable=False)
    display_location: Mapped[str] = mapped_column(String(40), default="sidebar", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    stages = relationship(
        "ProductStage",
        back_populates="product",
        order_by="ProductStage.sort_order",
        cascade="all, delete-orphan",
    )


class ProductStage(Base, AuditMixin):
    __tablename__ = "product_stages"
    __table_args__ = (
        UniqueConstraint("product_id", "slug", name="uq_product_stages_slug"),
        UniqueConstraint("product_id", "sort_order", name="uq_product_stages_sort_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    color: Mapped[str] = mapped_column(String(7), default=DEFAULT_STAGE_COLOR, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
    show_upload_button: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    product = relationship("Product", back_populates="stages")
