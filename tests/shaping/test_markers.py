"""Tests for marker planning, strategy selection and edge planning."""

import pytest

from purlwise.schemas import EdgeAction, EdgeTarget, MarkerAction, MarkerArray, MarkerPosition
from purlwise.shaping import (
    EdgeOp,
    IndividualMarkerStrategy,
    MarkerStrategy,
    UniformMarkerStrategy,
    is_uniform,
    plan_edges,
    plan_markers,
    render_edges,
    select_strategy,
)
from purlwise.techniques import get_registry


@pytest.fixture(scope="module")
def registry():
    return get_registry()


ARRAY = MarkerArray(("BOR", 10, "A", 10, "B", 10, "C", 10))


class TestPlanMarkers:
    def test_groups_by_marker_in_needle_order(self):
        plan, bor = plan_markers(
            [MarkerAction("SSK", ("C", "A"), MarkerPosition.BEFORE)], ARRAY
        )
        assert plan.order == ("A", "B", "C")
        assert plan.acted == ("A", "C")
        assert bor == ()

    def test_bor_actions_split_out(self):
        action = MarkerAction("M1L", ("BOR", "A"), MarkerPosition.AFTER)
        plan, bor = plan_markers([action], ARRAY)
        assert bor == (action,)
        assert plan.acted == ("A",)

    def test_unknown_targets_dropped(self):
        plan, _ = plan_markers([MarkerAction("SSK", ("Q",), MarkerPosition.BEFORE)], ARRAY)
        assert plan.acted == ()

    def test_actions_mapping_read_only(self):
        plan, _ = plan_markers([MarkerAction("SSK", ("A",), MarkerPosition.BEFORE)], ARRAY)
        with pytest.raises(TypeError):
            plan.actions["B"] = ()  # type: ignore[index]


class TestStrategySelection:
    def test_uniform_when_every_marker_matches(self):
        plan, _ = plan_markers(
            [MarkerAction("SSK", ("A", "B", "C"), MarkerPosition.BEFORE)], ARRAY
        )
        assert is_uniform(plan)
        assert isinstance(select_strategy(plan), UniformMarkerStrategy)

    def test_individual_when_signatures_differ(self):
        plan, _ = plan_markers(
            [
                MarkerAction("SSK", ("A", "B"), MarkerPosition.BEFORE),
                MarkerAction("SSK", ("C",), MarkerPosition.BEFORE, distance=1),
            ],
            ARRAY,
        )
        assert not is_uniform(plan)
        assert isinstance(select_strategy(plan), IndividualMarkerStrategy)

    def test_single_marker_never_uniform(self):
        plan, _ = plan_markers(
            [MarkerAction("SSK", ("A",), MarkerPosition.BEFORE)], MarkerArray((5, "A", 5))
        )
        assert not is_uniform(plan)

    def test_strategies_satisfy_protocol(self):
        assert isinstance(UniformMarkerStrategy(), MarkerStrategy)
        assert isinstance(IndividualMarkerStrategy(), MarkerStrategy)

    def test_strategies_render_independently(self, registry):
        plan, _ = plan_markers(
            [MarkerAction("K2tog", ("A", "B", "C"), MarkerPosition.BEFORE)], ARRAY
        )
        uniform = UniformMarkerStrategy().render(plan, "stockinette", registry)
        individual = IndividualMarkerStrategy().render(plan, "stockinette", registry)
        assert uniform.stitch_change == individual.stitch_change == -3
        assert individual.text.count("K2tog") == 3
        assert uniform.text.count("K2tog") == 1


class TestEdgePlan:
    def test_compound_split(self):
        plan = plan_edges([EdgeAction("SSK_K2tog", (EdgeTarget.BEGINNING, EdgeTarget.END))])
        assert plan.beginning == (EdgeOp("SSK"),)
        assert plan.end == (EdgeOp("K2tog"),)

    def test_compound_single_edge_uses_matching_half(self):
        plan = plan_edges([EdgeAction("SSK_K2tog", (EdgeTarget.END,))])
        assert plan.beginning == ()
        assert plan.end == (EdgeOp("K2tog"),)

    def test_bor_positions(self):
        plan = plan_edges(
            [],
            [
                MarkerAction("M1R", ("BOR",), MarkerPosition.AFTER),
                MarkerAction("M1L", ("BOR",), MarkerPosition.BEFORE),
            ],
        )
        assert plan.beginning == (EdgeOp("M1R"),)
        assert plan.end == (EdgeOp("M1L"),)

    def test_empty_plan_is_falsy(self):
        assert not plan_edges([])

    def test_render_standoff_sums_end_work(self, registry):
        plan = plan_edges(
            [
                EdgeAction("K2tog", (EdgeTarget.END,), distance=2),
                EdgeAction("SSK", (EdgeTarget.END,)),
            ]
        )
        text, change = render_edges(plan, "stockinette", "row", registry)
        assert text == "work in stockinette until 6 stitches before end of row, K2tog, k2, SSK"
        assert change == -2
