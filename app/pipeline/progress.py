"""Read-only projections derived from a stage list and a current stage pointer."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from app.models.enums import ReturnPrepStatus
from app.pipeline.registry import LEGACY_LABELS, Stage, StageId, stage_index

NOT_STARTED_LABEL = LEGACY_LABELS[ReturnPrepStatus.NOT_STARTED.value]


@dataclass(frozen=True)
class AttentionSignals:
    """Counts pulled from the messages, documents and signatures subsystems."""

    unread_messages: int = 0
    pending_documents: int = 0
    pending_signatures: int = 0


@dataclass(frozen=True)
class TimelineEntry:
    stage: Stage
    status: str  # completed | current | pending


def progress_percent(stages: Sequence[Stage], current_stage_id: StageId | None) -> int:
    """Percentage of the pipeline reached, counting the current stage as done.

    Returns 0 for an empty stage list or when the current stage is unknown.
    """
    if not stages:
        return 0
    position = stage_index(stages, current_stage_id)
    if position < 0:
        return 0
    # Half-up rounding, matching the percentages the portal has always shown.
    return int(math.floor((position + 1) / len(stages) * 100 + 0.5))


def is_complete(stages: Sequence[Stage], current_stage_id: StageId | None) -> bool:
    if not stages or current_stage_id is None:
        return False
    return stages[-1].id == current_stage_id


def stage_label(stage: Stage | str | None) -> str:
    """Display label for a stage, legacy slug, or missing state."""
    if stage is None:
        return NOT_STARTED_LABEL
    if isinstance(stage, Stage) and stage.name:
        return stage.name
    slug = stage if isinstance(stage, str) else stage.slug
    if slug in LEGACY_LABELS:
        return LEGACY_LABELS[slug]
    return slug.replace("_", " ").replace("-", " ").title()


def needs_attention(signals: AttentionSignals) -> bool:
    return (
        signals.unread_messages > 0
        or signals.pending_documents > 0
        or signals.pending_signatures > 0
    )


def next_stage(stages: Sequence[Stage], current_stage_id: StageId | None) -> Stage | None:
    """Stage after the current one; the first stage when nothing is recorded yet."""
    if not stages:
        return None
    position = stage_index(stages, current_stage_id)
    if position + 1 >= len(stages):
        return None
    return stages[position + 1]


def stage_timeline(stages: Sequence[Stage], current_stage_id: StageId | None) -> list[TimelineEntry]:
    position = stage_index(stages, current_stage_id)
    last = len(stages) - 1
    entries: list[TimelineEntry] = []
    for index, stage in enumerate(stages):
        if index < position or (index == position == last):
            status = "completed"
        elif index == position:
            status = "current"
        else:
            status = "pending"
        entries.append(TimelineEntry(stage=stage, status=status))
    return entries


def refund_tracker_visible(status: ReturnPrepStatus | str | None) -> bool:
    """The refund tracker replaces the prep tracker once the return is filed."""
    if status is None:
        return False
    return ReturnPrepStatus(status) is ReturnPrepStatus.FILED
