"""Transition API for the return preparation pipeline.

Two pipelines share the same rules:

* the legacy pipeline, a fixed nine-stage status on each tax return, and
* per-product pipelines, where a client product points at one of its
  product's stages.

Admins may move a record to any stage of its pipeline, forwards or backwards.
Each applied move is a single scalar update plus one audit row; concurrent
moves are last-write-wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from app.core.exceptions import NotFoundError
from app.core.logging import LogContext, build_log_event
from app.models import (
    ClientProduct,
    PipelineEntity,
    ProductStage,
    ReturnPrepStatus,
    ReturnType,
    StageTransition,
    TaxReturn,
    User,
)
from app.models.base import utcnow
from app.pipeline.board import BoardCard, BoardSnapshot
from app.pipeline.progress import (
    TimelineEntry,
    is_complete,
    next_stage,
    progress_percent,
    refund_tracker_visible,
    stage_label,
    stage_timeline,
)
from app.pipeline.registry import LEGACY_STAGES, Stage, StageId, find_stage
from app.pipeline.state_machine import StageStateMachine
from app.services.base_service import BaseService
from app.services.product_service import to_stage

logger = logging.getLogger(__name__)

LEGACY_MACHINE = StageStateMachine(LEGACY_STAGES)


@dataclass(frozen=True)
class PipelineState:
    entity_type: str
    entity_id: int
    stage_id: StageId | None
    effective_stage_id: StageId | None
    updated_at: datetime


@dataclass(frozen=True)
class ProgressView:
    stage_id: StageId | None
    label: str
    percent: int
    complete: bool
    timeline: list[TimelineEntry]
    refund_tracker_visible: bool = False


def _status_value(status: ReturnPrepStatus | str | None) -> str | None:
    if status is None:
        return None
    return status.value if isinstance(status, ReturnPrepStatus) else str(status)


class PipelineService(BaseService):
    """Read and update the current-stage pointer of returns and client products."""

    # -- lookups -----------------------------------------------------------

    def get_return(self, return_id: int) -> TaxReturn:
        tax_return = (
            self.db.query(TaxReturn)
            .filter(TaxReturn.tenant_id == self.tenant_id, TaxReturn.id == return_id)
            .first()
        )
        if tax_return is None:
            raise NotFoundError(f"Return not found: {return_id}")
        return tax_return

    def get_client_product(self, client_product_id: int) -> ClientProduct:
        client_product = (
            self.db.query(ClientProduct)
            .filter(ClientProduct.tenant_id == self.tenant_id, ClientProduct.id == client_product_id)
            .first()
        )
        if client_product is None:
            raise NotFoundError(f"Client product not found: {client_product_id}")
        return client_product

    def product_stages(self, product_id: int) -> list[Stage]:
        rows = (
            self.db.query(ProductStage)
            .filter(ProductStage.product_id == product_id)
            .order_by(ProductStage.sort_order, ProductStage.id)
            .all()
        )
        return [to_stage(row) for row in rows]

    # -- state -------------------------------------------------------------

    def get_return_state(self, return_id: int) -> PipelineState:
        tax_return = self.get_return(return_id)
        stage_id = _status_value(tax_return.status)
        return PipelineState(
            entity_type=PipelineEntity.RETURN.value,
            entity_id=tax_return.id,
            stage_id=stage_id,
            effective_stage_id=stage_id or ReturnPrepStatus.NOT_STARTED.value,
            updated_at=tax_return.updated_at,
        )

    def get_product_state(self, client_product_id: int) -> PipelineState:
        client_product = self.get_client_product(client_product_id)
        return PipelineState(
            entity_type=PipelineEntity.CLIENT_PRODUCT.value,
            entity_id=client_product.id,
            stage_id=client_product.current_stage_id,
            effective_stage_id=client_product.current_stage_id,
            updated_at=client_product.updated_at,
        )

    def set_return_state(
        self,
        return_id: int,
        new_status: ReturnPrepStatus | str,
        acting_admin_id: int | None,
    ) -> TaxReturn:
        tax_return = self.get_return(return_id)
        target = LEGACY_MACHINE.assert_valid_target(_status_value(new_status))
        current = _status_value(tax_return.status)
        if current == target.id:
            self._log_noop(PipelineEntity.RETURN, tax_return.id, target.id)
            return tax_return

        self._apply_transition(
            model=TaxReturn,
            record=tax_return,
            values={TaxReturn.status: ReturnPrepStatus(target.id)},
            entity=PipelineEntity.RETURN,
            from_stage=current,
            to_stage=target.slug,
            actor_id=acting_admin_id,
        )
        return tax_return

    def set_product_state(
        self,
        client_product_id: int,
        new_stage_id: int | None,
        acting_admin_id: int | None,
    ) -> ClientProduct:
        client_product = self.get_client_product(client_product_id)
        stages = self.product_stages(client_product.product_id)
        target = StageStateMachine(stages).assert_valid_target(new_stage_id)
        if client_product.current_stage_id == target.id:
            self._log_noop(PipelineEntity.CLIENT_PRODUCT, client_product.id, target.id)
            return client_product

        current = find_stage(stages, client_product.current_stage_id)
        self._apply_transition(
            model=ClientProduct,
            record=client_product,
            values={ClientProduct.current_stage_id: target.id},
            entity=PipelineEntity.CLIENT_PRODUCT,
            from_stage=current.slug if current else None,
            to_stage=target.slug,
            actor_id=acting_admin_id,
        )
        return client_product

    def advance_return(self, return_id: int, acting_admin_id: int | None) -> TaxReturn:
        """Move a return one stage forward; a return at the last stage stays put."""
        tax_return = self.get_return(return_id)
        effective = _status_value(tax_return.status) or ReturnPrepStatus.NOT_STARTED.value
        following = next_stage(LEGACY_STAGES, effective)
        if following is None:
            self._log_noop(PipelineEntity.RETURN, tax_return.id, effective)
            return tax_return
        return self.set_return_state(tax_return.id, following.id, acting_admin_id)

    def _apply_transition(
        self,
        model,
        record,
        values: dict,
        entity: PipelineEntity,
        from_stage: str | None,
        to_stage: str,
        actor_id: int | None,
    ) -> None:
        now = utcnow()
        with self.guarded_write():
            updated = (
                self.db.query(model)
                .filter(model.tenant_id == self.tenant_id, model.id == record.id)
                .update({**values, model.updated_at: now}, synchronize_session=False)
            )
        if not updated:
            self.rollback()
            raise NotFoundError(f"{entity.value} not found: {record.id}")
        self.db.add(
            StageTransition(
                tenant_id=self.tenant_id,
                entity_type=entity.value,
                entity_id=record.id,
                from_stage=from_stage,
                to_stage=to_stage,
                actor_id=actor_id,
            )
        )
        self.commit()
        self.db.refresh(record)
        context = LogContext(tenant_id=self.tenant_id, user_id=actor_id, entity_type=entity.value, entity_id=record.id)
        logger.info(
            "pipeline.stage.updated",
            extra=build_log_event("pipeline.stage.updated", context, from_stage=from_stage, to_stage=to_stage),
        )

    def _log_noop(self, entity: PipelineEntity, entity_id: int, stage_id: StageId) -> None:
        context = LogContext(tenant_id=self.tenant_id, entity_type=entity.value, entity_id=entity_id)
        logger.info(
            "pipeline.stage.noop",
            extra=build_log_event("pipeline.stage.noop", context, stage=str(stage_id)),
        )

    def list_transitions(self, entity: PipelineEntity, entity_id: int) -> list[StageTransition]:
        if entity is PipelineEntity.RETURN:
            self.get_return(entity_id)
        else:
            self.get_client_product(entity_id)
        return (
            self.db.query(StageTransition)
            .filter(
                StageTransition.tenant_id == self.tenant_id,
                StageTransition.entity_type == entity.value,
                StageTransition.entity_id == entity_id,
            )
            .order_by(StageTransition.id)
            .all()
        )

    # -- projections -------------------------------------------------------

    def return_progress(self, return_id: int) -> ProgressView:
        tax_return = self.get_return(return_id)
        stage_id = _status_value(tax_return.status)
        return ProgressView(
            stage_id=stage_id,
            label=stage_label(stage_id),
            percent=progress_percent(LEGACY_STAGES, stage_id),
            complete=is_complete(LEGACY_STAGES, stage_id),
            timeline=stage_timeline(LEGACY_STAGES, stage_id),
            refund_tracker_visible=refund_tracker_visible(stage_id),
        )

    def product_progress(self, client_product_id: int) -> ProgressView:
        client_product = self.get_client_product(client_product_id)
        stages = self.product_stages(client_product.product_id)
        stage_id = client_product.current_stage_id
        return ProgressView(
            stage_id=stage_id,
            label=stage_label(find_stage(stages, stage_id)),
            percent=progress_percent(stages, stage_id),
            complete=is_complete(stages, stage_id),
            timeline=stage_timeline(stages, stage_id),
        )

    # -- boards ------------------------------------------------------------

    def _active_clients_query(self, model):
        return (
            self.db.query(model, User)
            .join(User, User.id == model.user_id)
            .filter(
                model.tenant_id == self.tenant_id,
                User.is_archived.is_(False),
                User.is_admin.is_(False),
            )
        )

    def board_for_returns(self, return_type: ReturnType | str | None = None) -> BoardSnapshot:
        """Returns grouped by legacy stage; archived clients and admins are left out."""
        query = self._active_clients_query(TaxReturn)
        if return_type is not None:
            query = query.filter(TaxReturn.return_type == ReturnType(return_type))
        rows = query.order_by(TaxReturn.created_at, TaxReturn.id).all()

        columns: dict[StageId, list[BoardCard]] = {stage.id: [] for stage in LEGACY_STAGES}
        for tax_return, user in rows:
            stage_id = _status_value(tax_return.status) or ReturnPrepStatus.NOT_STARTED.value
            columns[stage_id].append(
                BoardCard(
                    id=tax_return.id,
                    client_id=user.id,
                    client_name=user.display_name,
                    client_email=user.email,
                    title=f"{tax_return.name} ({tax_return.tax_year})",
                    stage_id=stage_id,
                )
            )
        return BoardSnapshot(stages=list(LEGACY_STAGES), columns=columns)

    def board_for_product(self, product_id: int, stages: Sequence[Stage] | None = None) -> BoardSnapshot:
        """Client products of one product grouped by stage; unset pointers land in the first column."""
        stages = list(stages) if stages is not None else self.product_stages(product_id)
        columns: dict[StageId, list[BoardCard]] = {stage.id: [] for stage in stages}
        if not stages:
            return BoardSnapshot(stages=[], columns=columns)

        rows = (
            self._active_clients_query(ClientProduct)
            .filter(ClientProduct.product_id == product_id)
            .order_by(ClientProduct.created_at, ClientProduct.id)
            .all()
        )
        for client_product, user in rows:
            stage_id = client_product.current_stage_id
            if stage_id not in columns:
                stage_id = stages[0].id
            columns[stage_id].append(
                BoardCard(
                    id=client_product.id,
                    client_id=user.id,
                    client_name=user.display_name,
                    client_email=user.email,
                    title=client_product.name,
                    stage_id=client_product.current_stage_id,
                )
            )
        return BoardSnapshot(stages=stages, columns=columns)
