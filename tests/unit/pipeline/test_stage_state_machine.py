from __future__ import annotations

import pytest

from app.core.exceptions import InvalidStageError
from app.pipeline.registry import LEGACY_STAGES
from app.pipeline.state_machine import StageStateMachine


def test_any_stage_may_move_to_any_other_stage():
    sm = StageStateMachine(LEGACY_STAGES)
    assert sm.can_transition("not_started", "filed") is True
    assert sm.can_transition("filed", "not_started") is True
    assert sm.can_transition("filing", "filing") is False
    assert sm.can_transition(None, "documents_gathering") is True


def test_terminal_stage_is_advisory():
    sm = StageStateMachine(LEGACY_STAGES)
    assert sm.initial.id == "not_started"
    assert sm.is_terminal("filed") is True
    assert sm.assert_valid_target("client_review").id == "client_review"


def test_unknown_target_is_rejected():
    sm = StageStateMachine(LEGACY_STAGES)
    with pytest.raises(InvalidStageError):
        sm.assert_valid_target("archived")
    with pytest.raises(InvalidStageError):
        sm.assert_valid_target(None)


def test_empty_pipeline_has_no_valid_targets():
    sm = StageStateMachine([])
    assert sm.initial is None
    assert sm.terminal is None
    with pytest.raises(InvalidStageError):
        sm.assert_valid_target(1)
