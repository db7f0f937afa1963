"""Kanban board orchestration independent of any UI event library.

The board keeps a local copy of the grouped columns, applies drag-and-drop
moves optimistically and falls back to the server's state when a transition
call fails.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from app.core.exceptions import PortalException
from app.pipeline.registry import Stage, StageId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardCard:
    id: int
    client_id: int
    client_name: str
    title: str
    stage_id: StageId | None
    client_email: str = ""


@dataclass
class BoardSnapshot:
    stages: list[Stage]
    columns: dict[StageId, list[BoardCard]] = field(default_factory=dict)

    def card(self, card_id: int) -> BoardCard | None:
        for cards in self.columns.values():
            for card in cards:
                if card.id == card_id:
                    return card
        return None

    def column_of(self, card_id: int) -> StageId | None:
        for stage_id, cards in self.columns.items():
            if any(card.id == card_id for card in cards):
                return stage_id
        return None


@dataclass(frozen=True)
class DropEvent:
    """Where the pointer was released while dragging ``card_id``."""

    card_id: int
    over_card_id: int | None = None
    over_column_id: StageId | None = None


class MoveOutcome(str, enum.Enum):
    NOOP = "noop"
    MOVED = "moved"
    REVERTED = "reverted"


class PipelineGateway(Protocol):
    def fetch_board(self) -> BoardSnapshot:
        ...

    def update_stage(self, card_id: int, stage_id: StageId) -> dict:
        ...


def resolve_drop_target(columns: dict[StageId, Sequence[BoardCard]], drop: DropEvent) -> StageId | None:
    """Stage a drop lands on: a card's column first, then a bare column, else nothing."""
    if drop.over_card_id is not None:
        for stage_id, cards in columns.items():
            if any(card.id == drop.over_card_id for card in cards):
                return stage_id
    if drop.over_column_id is not None and drop.over_column_id in columns:
        return drop.over_column_id
    return None


def _log_notification(message: str) -> None:
    logger.warning(message, extra={"event": "board.notification"})


class KanbanBoard:
    """Client-side board state driven by a :class:`PipelineGateway`."""

    def __init__(self, gateway: PipelineGateway, notify: Callable[[str], None] | None = None) -> None:
        self.gateway = gateway
        self.notify = notify or _log_notification
        self.snapshot = BoardSnapshot(stages=[])

    @property
    def stages(self) -> list[Stage]:
        return self.snapshot.stages

    @property
    def columns(self) -> dict[StageId, list[BoardCard]]:
        return self.snapshot.columns

    def refresh(self) -> BoardSnapshot:
        self.snapshot = self.gateway.fetch_board()
        return self.snapshot

    def _refresh_after_failure(self) -> None:
        try:
            self.refresh()
        except PortalException as exc:
            logger.warning(
                "board.refresh.failed",
                extra={"event": "board.refresh.failed", "error": str(exc)},
            )
            self.notify(f"Could not reload the board: {exc}")

    def _apply_local_move(self, card: BoardCard, target: StageId) -> None:
        columns = {
            stage_id: [item for item in cards if item.id != card.id]
            for stage_id, cards in self.snapshot.columns.items()
        }
        columns.setdefault(target, []).append(replace(card, stage_id=target))
        self.snapshot = BoardSnapshot(stages=self.snapshot.stages, columns=columns)

    def move(self, drop: DropEvent) -> MoveOutcome:
        card = self.snapshot.card(drop.card_id)
        if card is None:
            return MoveOutcome.NOOP

        target = resolve_drop_target(self.snapshot.columns, drop)
        # Compare with the stored stage, not the column: unset pointers sit in the first column.
        if target is None or target == card.stage_id:
            return MoveOutcome.NOOP

        previous = self.snapshot
        self._apply_local_move(card, target)
        try:
            self.gateway.update_stage(card.id, target)
        except PortalException as exc:
            logger.warning(
                "board.move.reverted",
                extra={
                    "event": "board.move.reverted",
                    "card_id": card.id,
                    "target_stage": str(target),
                    "error": str(exc),
                },
            )
            self.snapshot = previous
            self.notify(f"Could not move {card.client_name}: {exc}")
            self._refresh_after_failure()
            return MoveOutcome.REVERTED

        logger.info(
            "board.move.applied",
            extra={"event": "board.move.applied", "card_id": card.id, "target_stage": str(target)},
        )
        return MoveOutcome.MOVED
