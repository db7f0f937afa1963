"""State machine view over a stage registry."""

from __future__ import annotations

from collections.abc import Sequence

from app.core.exceptions import InvalidStageError
from app.pipeline.registry import Stage, StageId, stage_index


class StageStateMachine:
    """Fully connected state machine: any stage may move to any other stage.

    The terminal stage is advisory; transitions out of it are allowed.
    """

    def __init__(self, stages: Sequence[Stage]) -> None:
        self._stages = list(stages)

    @property
    def stages(self) -> list[Stage]:
        return list(self._stages)

    @property
    def initial(self) -> Stage | None:
        return self._stages[0] if self._stages else None

    @property
    def terminal(self) -> Stage | None:
        return self._stages[-1] if self._stages else None

    def is_terminal(self, stage_id: StageId | None) -> bool:
        terminal = self.terminal
        return terminal is not None and terminal.id == stage_id

    def contains(self, stage_id: StageId | None) -> bool:
        return stage_index(self._stages, stage_id) >= 0

    def can_transition(self, current: StageId | None, target: StageId | None) -> bool:
        return self.contains(target) and current != target

    def assert_valid_target(self, target: StageId | None) -> Stage:
        position = stage_index(self._stages, target)
        if position < 0:
            raise InvalidStageError(f"Stage {target!r} is not part of this pipeline.")
        return self._stages[position]
