"""Ordered stage lists for the legacy and per-product pipelines."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Union

from app.models.enums import ReturnPrepStatus

StageId = Union[int, str]


@dataclass(frozen=True)
class Stage:
    """A named step in a pipeline.

    Legacy stages use their slug as ``id``; product stages use the database id.
    """

    id: StageId
    name: str
    slug: str
    color: str
    sort_order: int


_LEGACY_COLORS: dict[ReturnPrepStatus, str] = {
    ReturnPrepStatus.NOT_STARTED: "#9ca3af",
    ReturnPrepStatus.DOCUMENTS_GATHERING: "#3b82f6",
    ReturnPrepStatus.INFORMATION_REVIEW: "#eab308",
    ReturnPrepStatus.RETURN_PREPARATION: "#f97316",
    ReturnPrepStatus.QUALITY_REVIEW: "#8b5cf6",
    ReturnPrepStatus.CLIENT_REVIEW: "#ec4899",
    ReturnPrepStatus.SIGNATURE_REQUIRED: "#6366f1",
    ReturnPrepStatus.FILING: "#06b6d4",
    ReturnPrepStatus.FILED: "#22c55e",
}

LEGACY_LABELS: dict[str, str] = {
    ReturnPrepStatus.NOT_STARTED.value: "Not Started",
    ReturnPrepStatus.DOCUMENTS_GATHERING.value: "Gathering Docs",
    ReturnPrepStatus.INFORMATION_REVIEW.value: "Info Review",
    ReturnPrepStatus.RETURN_PREPARATION.value: "Prep",
    ReturnPrepStatus.QUALITY_REVIEW.value: "QA Review",
    ReturnPrepStatus.CLIENT_REVIEW.value: "Client Review",
    ReturnPrepStatus.SIGNATURE_REQUIRED.value: "Signatures",
    ReturnPrepStatus.FILING.value: "Filing",
    ReturnPrepStatus.FILED.value: "Filed",
}

LEGACY_STAGES: tuple[Stage, ...] = tuple(
    Stage(
        id=status.value,
        name=LEGACY_LABELS[status.value],
        slug=status.value,
        color=_LEGACY_COLORS[status],
        sort_order=position,
    )
    for position, status in enumerate(ReturnPrepStatus)
)


def list_stages(stages: Iterable[Stage]) -> list[Stage]:
    """Return stages ascending by ``sort_order``; ties keep input (creation) order."""
    return sorted(stages, key=lambda stage: stage.sort_order)


def stage_index(stages: Sequence[Stage], stage_id: StageId | None) -> int:
    """Position of ``stage_id`` in ``stages`` or -1 when absent."""
    if stage_id is None:
        return -1
    for position, stage in enumerate(stages):
        if stage.id == stage_id:
            return position
    return -1


def find_stage(stages: Sequence[Stage], stage_id: StageId | None) -> Stage | None:
    position = stage_index(stages, stage_id)
    return stages[position] if position >= 0 else None


def slugify_stage_name(name: str) -> str:
    """Default slug for a product stage: lower-cased, whitespace runs as ``_``."""
    return re.sub(r"\s+", "_", name.strip().lower())
