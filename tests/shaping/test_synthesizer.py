"""
Tests for the Marker Shaping Synthesizer.

Covers:
  - Empty, continue-only and unresolvable action lists
  - Uniform marker collapse (raglan-style) and the individual walk
  - Edge shaping with stand-off distances and compound techniques
  - Beginning-of-round marker actions rendered as edge work
  - Bind-off rows
  - Timing wording and stitch-change suffixes
  - synthesize() never raises
"""

import pytest

from purlwise.schemas import (
    BindOffAction,
    ContinueAction,
    EdgeAction,
    EdgeTarget,
    MarkerAction,
    MarkerArray,
    MarkerPosition,
    Timing,
)
from purlwise.shaping import synthesize, synthesize_shaping, timing_text
from purlwise.schemas.row import Construction

BOTH_ENDS = (EdgeTarget.BEGINNING, EdgeTarget.END)
FOUR_MARKERS = MarkerArray((10, "A", 10, "B", 10, "C", 10, "D", 10))


def _ssk_before(*targets):
    return MarkerAction("SSK", targets, MarkerPosition.BEFORE)


class TestTrivialRows:
    def test_no_actions(self):
        assert synthesize([]) == "No actions defined"

    def test_continue_only(self):
        assert synthesize([ContinueAction()], base_pattern="garter") == (
            "Work in garter until end of row"
        )

    def test_continue_only_round_with_timing(self):
        result = synthesize(
            [ContinueAction()],
            timing=Timing(frequency=2, times=3),
            construction="round",
            base_pattern="stockinette",
        )
        assert result == "Work in stockinette until end of round every 2 rounds 3 times"

    def test_unknown_marker_only(self):
        result = synthesize_shaping(
            [_ssk_before("Z")], marker_array=MarkerArray((10, "A", 10))
        )
        assert result.text == "No valid actions defined"
        assert result.stitch_change == 0


class TestUniformMarkers:
    def test_four_markers_collapse(self):
        result = synthesize_shaping(
            [_ssk_before("A", "B", "C", "D")],
            timing=Timing(frequency=2, times=5),
            marker_array=FOUR_MARKERS,
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette until 2 stitches before marker, SSK, slip marker, "
            "repeat 3 times, work to end every 2 rows 5 times (-4 sts)"
        )
        assert result.stitch_change == -4

    def test_exactly_one_repeat_clause(self):
        text = synthesize(
            [_ssk_before("A", "B", "C", "D")], marker_array=FOUR_MARKERS
        )
        assert text.count("repeat 3 times") == 1
        assert text.count("SSK") == 1

    def test_two_markers_repeat_once(self):
        result = synthesize_shaping(
            [MarkerAction("K2tog_SSK", ("L", "R"), MarkerPosition.BEFORE_AND_AFTER)],
            marker_array=MarkerArray((20, "L", 40, "R", 20)),
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette until 2 stitches before marker, K2tog, slip marker, SSK, "
            "repeat 1 time, work to end (-4 sts)"
        )
        assert result.stitch_change == -4

    def test_raglan_increases(self):
        result = synthesize_shaping(
            [MarkerAction("M1L_M1R", ("A", "B", "C", "D"), MarkerPosition.BEFORE_AND_AFTER)],
            marker_array=FOUR_MARKERS,
            construction=Construction.ROUND,
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette to marker, M1L, slip marker, M1R, "
            "repeat 3 times, work to end (+8 sts)"
        )
        assert result.stitch_change == 8

    def test_distance_added_to_standoff(self):
        result = synthesize_shaping(
            [MarkerAction("K2tog", ("A", "B"), MarkerPosition.BEFORE, distance=1)],
            marker_array=MarkerArray((10, "A", 10, "B", 10)),
            base_pattern="stockinette",
        )
        assert result.text.startswith(
            "Work in stockinette until 3 stitches before marker, K2tog, k1, slip marker"
        )


class TestIndividualMarkers:
    def test_single_marker_after_idle_marker(self):
        result = synthesize_shaping(
            [MarkerAction("M1L", ("B",), MarkerPosition.AFTER)],
            marker_array=MarkerArray((10, "A", 10, "B", 10)),
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette to marker, slip marker, work to marker, slip marker, M1L, "
            "work to end (+1 sts)"
        )
        assert result.stitch_change == 1

    def test_differing_markers_not_collapsed(self):
        result = synthesize_shaping(
            [_ssk_before("A"), MarkerAction("K2tog", ("B",), MarkerPosition.BEFORE)],
            marker_array=MarkerArray((10, "A", 10, "B", 10)),
            base_pattern="stockinette",
        )
        assert "repeat" not in result.text
        assert result.text == (
            "Work in stockinette until 2 stitches before marker, SSK, slip marker, "
            "work until 2 stitches before marker, K2tog, slip marker, work to end (-2 sts)"
        )

    def test_partial_coverage_uses_individual(self):
        result = synthesize_shaping(
            [_ssk_before("A", "B")], marker_array=FOUR_MARKERS, base_pattern="stockinette"
        )
        assert "repeat" not in result.text
        assert result.stitch_change == -2

    def test_unknown_target_skipped(self):
        result = synthesize_shaping(
            [_ssk_before("A", "Z")],
            marker_array=MarkerArray((10, "A", 10)),
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette until 2 stitches before marker, SSK, slip marker, "
            "work to end (-1 sts)"
        )


class TestEdges:
    def test_both_ends_with_distance(self):
        result = synthesize_shaping(
            [EdgeAction("K2tog", BOTH_ENDS, distance=1)], base_pattern="stockinette"
        )
        assert result.text == (
            "K1, K2tog, work in stockinette until 3 stitches before end of row, K2tog, k1 "
            "(-2 sts)"
        )
        assert result.stitch_change == -2

    def test_compound_split_across_edges(self):
        result = synthesize_shaping(
            [EdgeAction("SSK_K2tog", BOTH_ENDS)],
            timing=Timing(frequency=4, target_stitches=60),
            base_pattern="garter",
        )
        assert result.text == (
            "SSK, work in garter until 2 stitches before end of row, K2tog "
            "every 4 rows until 60 stitches remain (-2 sts)"
        )

    def test_beginning_only(self):
        result = synthesize_shaping(
            [EdgeAction("KFB", (EdgeTarget.BEGINNING,))], base_pattern="stockinette"
        )
        assert result.text == "KFB, work in stockinette until end of row (+1 sts)"

    def test_end_with_zero_standoff(self):
        result = synthesize_shaping(
            [EdgeAction("M1", (EdgeTarget.END,))], base_pattern="stockinette"
        )
        assert result.text == "Work in stockinette to end of row, M1 (+1 sts)"

    def test_edge_then_marker(self):
        result = synthesize_shaping(
            [EdgeAction("K2tog", (EdgeTarget.END,)), _ssk_before("A")],
            marker_array=MarkerArray((10, "A", 10)),
            base_pattern="stockinette",
        )
        assert result.text == (
            "Work in stockinette until 2 stitches before end of row, K2tog and "
            "work in stockinette until 2 stitches before marker, SSK, slip marker, "
            "work to end (-2 sts)"
        )
        assert result.stitch_change == -2


class TestBeginningOfRound:
    def test_bor_pair_becomes_edge_work(self):
        result = synthesize_shaping(
            [MarkerAction("K2tog_SSK", ("BOR",), MarkerPosition.BEFORE_AND_AFTER)],
            marker_array=MarkerArray(("BOR", 40, "M", 40)),
            construction="round",
            base_pattern="stockinette",
        )
        assert result.text == (
            "SSK, work in stockinette until 2 stitches before end of round, K2tog (-2 sts)"
        )
        assert result.stitch_change == -2

    def test_bor_ignored_without_bor_marker(self):
        result = synthesize_shaping(
            [MarkerAction("SSK", ("BOR",), MarkerPosition.AFTER)],
            marker_array=MarkerArray((40, "M", 40)),
        )
        assert result.text == "No valid actions defined"


class TestBindOff:
    def test_bind_off_all(self):
        result = synthesize_shaping(
            [BindOffAction("all")], marker_array=MarkerArray((20, "A", 20))
        )
        assert result.text == "Bind off all stitches"
        assert result.stitch_change == -40

    def test_bind_off_all_prefers_live_count(self):
        result = synthesize_shaping(
            [BindOffAction("all")], marker_array=MarkerArray((10, "A", 10)), stitch_count=16
        )
        assert result.text == "Bind off all stitches"
        assert result.stitch_change == -16

    def test_bind_off_amount_covering_every_stitch(self):
        result = synthesize_shaping([BindOffAction(30)], stitch_count=30)
        assert result.text == "Bind off all stitches"

    def test_bind_off_some_at_beginning(self):
        result = synthesize_shaping(
            [BindOffAction(3, ("beginning",))], base_pattern="stockinette", stitch_count=40
        )
        assert result.text == (
            "Bind off 3 stitches at beginning of row then work in stockinette until end of row"
        )
        assert result.stitch_change == -3

    def test_bind_off_owns_the_row(self):
        result = synthesize_shaping(
            [BindOffAction(2), EdgeAction("K2tog", BOTH_ENDS)], stitch_count=40
        )
        assert "K2tog" not in result.text
        assert result.stitch_change == -2


class TestTimingText:
    def test_every_row_once_is_silent(self):
        assert timing_text(Timing(), Construction.FLAT) == ""

    def test_single_time_is_silent(self):
        assert timing_text(Timing(frequency=1, times=1), Construction.FLAT) == ""

    def test_frequency_and_times(self):
        assert timing_text(Timing(frequency=6, times=4), Construction.ROUND) == (
            " every 6 rounds 4 times"
        )

    def test_target_mode(self):
        assert timing_text(Timing(target_stitches=48), Construction.FLAT) == (
            " until 48 stitches remain"
        )


class TestNeverRaises:
    def test_broken_action_falls_back(self):
        broken = EdgeAction(123, BOTH_ENDS)  # type: ignore[arg-type]
        with pytest.warns(RuntimeWarning, match="Shaping synthesis failed"):
            text = synthesize([broken], base_pattern="stockinette")
        assert text == "Work in stockinette pattern"

    def test_bad_construction_falls_back(self):
        with pytest.warns(RuntimeWarning):
            assert synthesize([ContinueAction()], construction="sideways") == "Work in pattern"

    def test_missing_base_pattern_falls_back(self):
        edge = EdgeAction("K2tog", (EdgeTarget.END,))
        with pytest.warns(RuntimeWarning, match="Shaping synthesis failed"):
            text = synthesize([edge], construction="sideways", base_pattern=None)  # type: ignore[arg-type]
        assert text == "Work in pattern"

    def test_unrecognised_objects_render_nothing(self):
        assert synthesize([object()]) == "No valid actions defined"  # type: ignore[list-item]
