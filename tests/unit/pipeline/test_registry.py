from __future__ import annotations

from app.models import ReturnPrepStatus
from app.pipeline.registry import (
    LEGACY_STAGES,
    Stage,
    find_stage,
    list_stages,
    slugify_stage_name,
    stage_index,
)


def test_legacy_registry_has_nine_stages_in_fixed_order():
    assert [stage.id for stage in LEGACY_STAGES] == [status.value for status in ReturnPrepStatus]
    assert LEGACY_STAGES[0].id == "not_started"
    assert LEGACY_STAGES[-1].id == "filed"
    assert [stage.sort_order for stage in LEGACY_STAGES] == list(range(9))


def test_list_stages_sorts_by_sort_order_and_keeps_ties_stable():
    stages = [
        Stage(id=3, name="C", slug="c", color="#000000", sort_order=2),
        Stage(id=1, name="A", slug="a", color="#000000", sort_order=0),
        Stage(id=2, name="B", slug="b", color="#000000", sort_order=0),
    ]
    assert [stage.id for stage in list_stages(stages)] == [1, 2, 3]


def test_stage_index_returns_minus_one_for_unknown_or_missing_stage():
    assert stage_index(LEGACY_STAGES, "return_preparation") == 3
    assert stage_index(LEGACY_STAGES, "archived") == -1
    assert stage_index(LEGACY_STAGES, None) == -1
    assert stage_index([], "filed") == -1
    assert find_stage(LEGACY_STAGES, "bogus") is None


def test_slugify_stage_name_lowercases_and_joins_whitespace():
    assert slugify_stage_name("  QA   Review ") == "qa_review"
