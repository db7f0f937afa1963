"""Product catalogue with per-product stage lists, and client product assignment."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import DEFAULT_STAGE_COLOR, ClientProduct, Product, ProductStage, User
from app.pipeline.registry import LEGACY_STAGES, Stage, list_stages, slugify_stage_name
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageSpec:
    """Requested stage definition; position in the list becomes ``sort_order``."""

    name: str
    slug: str | None = None
    color: str | None = None
    show_upload_button: bool = False


def to_stage(row: ProductStage) -> Stage:
    return Stage(id=row.id, name=row.name, slug=row.slug, color=row.color, sort_order=row.sort_order)


def _normalized_specs(specs: Sequence[StageSpec]) -> list[StageSpec]:
    normalized: list[StageSpec] = []
    seen: set[str] = set()
    for spec in specs:
        name = spec.name.strip()
        if not name:
            raise ValidationError("Stage name is required.")
        slug = (spec.slug or "").strip() or slugify_stage_name(name)
        if slug in seen:
            raise ValidationError(f"Duplicate stage slug: {slug}")
        seen.add(slug)
        normalized.append(
            StageSpec(
                name=name,
                slug=slug,
                color=spec.color or DEFAULT_STAGE_COLOR,
                show_upload_button=spec.show_upload_button,
            )
        )
    return normalized


class ProductService(BaseService):
    """Tenant-scoped product, stage and client product operations."""

    def list_products(self, active_only: bool = False) -> list[Product]:
        query = self.db.query(Product).filter(Product.tenant_id == self.tenant_id)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.order_by(Product.sort_order, Product.id).all()

    def get_product(self, product_id: int) -> Product:
        product = (
            self.db.query(Product)
            .filter(Product.tenant_id == self.tenant_id, Product.id == product_id)
            .first()
        )
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    def list_stages(self, product_id: int | None = None) -> list[Stage]:
        """Ordered stages of a product, or the fixed legacy pipeline when no product is given."""
        if product_id is None:
            return list(LEGACY_STAGES)
        rows = (
            self.db.query(ProductStage)
            .filter(ProductStage.product_id == self.get_product(product_id).id)
            .order_by(ProductStage.id)
            .all()
        )
        return list_stages(to_stage(row) for row in rows)

    def create_product(
        self,
        name: str,
        stages: Sequence[StageSpec] = (),
        description: str | None = None,
        icon: str | None = None,
        display_location: str | None = None,
        is_active: bool = True,
        sort_order: int = 0,
    ) -> Product:
        if not name.strip():
            raise ValidationError("Product name is required.")
        product = Product(
            tenant_id=self.tenant_id,
            name=name.strip(),
            description=description,
            icon=icon or "Package",
            display_location=display_location or "sidebar",
            is_active=is_active,
            sort_order=sort_order,
        )
        for position, spec in enumerate(_normalized_specs(stages)):
            product.stages.append(
                ProductStage(
                    name=spec.name,
                    slug=spec.slug,
                    color=spec.color,
                    sort_order=position,
                    show_upload_button=spec.show_upload_button,
                )
            )
        self.db.add(product)
        self.commit()
        self.db.refresh(product)
        logger.info(
            "product.created",
            extra={"event": "product.created", "tenant_id": self.tenant_id, "product_id": product.id},
        )
        return product

    def update_product(
        self,
        product_id: int,
        stages: Sequence[StageSpec] | None = None,
        **fields,
    ) -> Product:
        """Update product fields and, when given, reconcile its stages by slug.

        Stages whose slug survives keep their id, so client pointers stay valid
        across renames and reorders. Client products pointing at a removed stage
        are reset to no stage.
        """
        product = self.get_product(product_id)
        for key in ("name", "description", "icon", "display_location", "is_active", "sort_order"):
            value = fields.get(key)
            if value is not None:
                setattr(product, key, value)

        if stages is not None:
            specs = _normalized_specs(stages)
            with self.guarded_write():
                self._reconcile_stages(product, specs)

        self.commit()
        self.db.refresh(product)
        return product

    def _reconcile_stages(self, product: Product, specs: list[StageSpec]) -> None:
        existing = {row.slug: row for row in product.stages}
        wanted = {spec.slug for spec in specs}
        removed_ids = [row.id for slug, row in existing.items() if slug not in wanted]

        if removed_ids:
            (
                self.db.query(ClientProduct)
                .filter(ClientProduct.current_stage_id.in_(removed_ids))
                .update({ClientProduct.current_stage_id: None}, synchronize_session=False)
            )
            for slug, row in list(existing.items()):
                if slug not in wanted:
                    product.stages.remove(row)
                    del existing[slug]

        # Park surviving rows on negative positions so the unique sort_order
        # constraint holds while they are renumbered.
        for offset, row in enumerate(existing.values(), start=1):
            row.sort_order = -offset
        self.db.flush()

        for position, spec in enumerate(specs):
            row = existing.get(spec.slug)
            if row is None:
                product.stages.append(
                    ProductStage(
                        name=spec.name,
                        slug=spec.slug,
                        color=spec.color,
                        sort_order=position,
                        show_upload_button=spec.show_upload_button,
                    )
                )
            else:
                row.name = spec.name
                row.color = spec.color
                row.sort_order = position
                row.show_upload_button = spec.show_upload_button

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        in_use = self.db.query(ClientProduct.id).filter(ClientProduct.product_id == product.id).first()
        if in_use:
            raise ConflictError("Product is assigned to clients; deactivate it instead.")
        self.db.delete(product)
        self.commit()

    def assign_product(self, user_id: int, product_id: int, name: str | None = None) -> ClientProduct:
        """Link a client to a product instance starting at the product's first stage."""
        client = (
            self.db.query(User)
            .filter(User.tenant_id == self.tenant_id, User.id == user_id, User.is_admin.is_(False))
            .first()
        )
        if client is None:
            raise NotFoundError(f"Client not found: {user_id}")
        product = self.get_product(product_id)
        if not product.is_active:
            raise NotFoundError(f"Product not found: {product_id}")

        stages = self.list_stages(product.id)
        client_product = ClientProduct(
            tenant_id=self.tenant_id,
            user_id=client.id,
            product_id=product.id,
            current_stage_id=stages[0].id if stages else None,
            name=(name or "").strip() or product.name,
        )
        self.db.add(client_product)
        self.commit()
        self.db.refresh(client_product)
        logger.info(
            "client_product.assigned",
            extra={
                "event": "client_product.assigned",
                "tenant_id": self.tenant_id,
                "client_id": client.id,
                "product_id": product.id,
            },
        )
        return client_product
