"""Tests for the grid index mapping, axis sizing and space allocation."""

import logging
import math

import pytest

from flexgrid.model.data_model import (
    Allocation,
    AxisTotals,
    GridConfig,
    GridPosition,
    LineMetrics,
    SizeHint,
)
from flexgrid.model.enums import Axis
from flexgrid.model.layout_engine import (
    LayoutEngine,
    LayoutError,
    LayoutResult,
    allocate_axis,
    clamp_columns,
    map_cells,
    measure_axis,
    normalize_hint,
    row_count,
)


def _hints_from(table):
    """size_hint query backed by {cell: {axis: (min, preferred, flexible)}}."""

    def size_hint(cell, axis):
        return table[cell][axis]

    return size_hint


def _sizes(allocations):
    return [a.size for a in allocations]


def _offsets(allocations):
    return [a.offset for a in allocations]


# ── Cell index mapping ──


def test_map_cells_row_major():
    positions = map_cells(5, 2)
    assert positions == [
        GridPosition(0, 0),
        GridPosition(1, 0),
        GridPosition(0, 1),
        GridPosition(1, 1),
        GridPosition(0, 2),
    ]


def test_map_cells_matches_division_for_many_grids():
    for columns in range(1, 6):
        for count in range(0, 13):
            positions = map_cells(count, columns)
            assert len(positions) == count
            for i, position in enumerate(positions):
                assert position.column == i % columns
                assert position.row == i // columns
            assert row_count(count, columns) == math.ceil(count / columns)


def test_row_count_edges():
    assert row_count(0, 3) == 0
    assert row_count(1, 3) == 1
    assert row_count(3, 3) == 1
    assert row_count(4, 3) == 2


def test_clamp_columns_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="flexgrid"):
        assert clamp_columns(0) == 1
        assert clamp_columns(-4) == 1
    assert "below" in caplog.text
    assert clamp_columns(3) == 3


def test_grid_position_line_for_axis():
    position = GridPosition(column=2, row=5)
    assert position.line_for(Axis.HORIZONTAL) == 2
    assert position.line_for(Axis.VERTICAL) == 5


# ── Hint normalization ──


def test_normalize_hint_accepts_tuples():
    assert normalize_hint((1, 2, 3)) == SizeHint(1, 2, 3)


def test_normalize_hint_clamps_negative_values(caplog):
    with caplog.at_level(logging.WARNING, logger="flexgrid"):
        hint = normalize_hint(SizeHint(-1, -2, -3))
    assert hint == SizeHint(0, 0, 0)
    assert "clamped" in caplog.text


# ── Axis sizing ──


def test_measure_axis_empty_reserves_padding():
    lines, totals = measure_axis([], [], Axis.HORIZONTAL, 3, 6.0, 4.0)
    assert lines == []
    assert totals == AxisTotals(6.0, 6.0, 0.0)


def test_measure_axis_takes_maximum_per_column():
    hints = [SizeHint(10, 10, 0), SizeHint(20, 20, 0), SizeHint(5, 5, 0), SizeHint(5, 5, 0)]
    positions = map_cells(4, 2)
    lines, totals = measure_axis(hints, positions, Axis.HORIZONTAL, 2, 0.0, 0.0)
    assert lines == [LineMetrics(10, 10, 0), LineMetrics(20, 20, 0)]
    assert totals == AxisTotals(30, 30, 0)


def test_measure_axis_groups_rows_on_vertical_axis():
    hints = [SizeHint(1, 2, 0), SizeHint(3, 3, 1), SizeHint(7, 9, 2)]
    positions = map_cells(3, 2)
    lines, _ = measure_axis(hints, positions, Axis.VERTICAL, 2, 0.0, 0.0)
    assert lines == [LineMetrics(3, 3, 1), LineMetrics(7, 9, 2)]


def test_measure_axis_widens_preferred_to_minimum():
    """A minimum-only cell still raises its line's preferred size."""
    hints = [SizeHint(10, 0, 0)]
    lines, totals = measure_axis(hints, map_cells(1, 1), Axis.HORIZONTAL, 1, 0.0, 0.0)
    assert lines == [LineMetrics(10, 10, 0)]
    assert totals.ideal_growth == 0


def test_measure_axis_preferred_never_below_min_in_either_order():
    a = SizeHint(10, 0, 0)
    b = SizeHint(5, 8, 2)
    positions = [GridPosition(0, 0), GridPosition(0, 1)]
    for hints in ([a, b], [b, a]):
        lines, _ = measure_axis(hints, positions, Axis.HORIZONTAL, 1, 0.0, 0.0)
        assert lines == [LineMetrics(10, 10, 2)]
        assert all(line.min <= line.preferred for line in lines)


def test_measure_axis_spacing_and_padding_not_flexible():
    hints = [SizeHint(10, 15, 1), SizeHint(20, 20, 2)]
    lines, totals = measure_axis(hints, map_cells(2, 3), Axis.HORIZONTAL, 3, 8.0, 5.0)
    # Three columns, the last one empty: two gaps of spacing
    assert lines[2] == LineMetrics(0, 0, 0)
    assert totals == AxisTotals(10 + 20 + 2 * 5 + 8, 15 + 20 + 2 * 5 + 8, 3)


# ── Space allocation ──


def test_allocate_exact_minimum():
    lines = [LineMetrics(10, 10, 0), LineMetrics(20, 20, 0)]
    allocations = allocate_axis(30, (0, 0), 0, lines)
    assert allocations == [Allocation(0, 10), Allocation(10, 20)]


def test_allocate_single_flexible_line_takes_everything():
    allocations = allocate_axis(100, (0, 0), 0, [LineMetrics(0, 0, 1)])
    assert allocations == [Allocation(0, 100)]


def test_allocate_empty_lines():
    assert allocate_axis(100, (5, 5), 2, []) == []


def test_allocate_preferred_proportional_to_missing_space():
    lines = [LineMetrics(10, 30, 0), LineMetrics(10, 20, 0)]
    allocations = allocate_axis(35, (0, 0), 0, lines)
    assert _sizes(allocations) == pytest.approx([20, 15])
    assert _offsets(allocations) == pytest.approx([0, 20])


def test_allocate_preferred_then_flexible():
    lines = [LineMetrics(10, 20, 1), LineMetrics(10, 10, 3)]
    allocations = allocate_axis(60, (0, 0), 0, lines)
    assert _sizes(allocations) == pytest.approx([27.5, 32.5])
    assert sum(_sizes(allocations)) == pytest.approx(60)


def test_allocate_preferred_before_flexible():
    """Flexible lines get nothing extra until every preferred size is met."""
    lines = [LineMetrics(10, 20, 1), LineMetrics(5, 5, 5)]
    allocations = allocate_axis(25, (0, 0), 0, lines)
    assert _sizes(allocations) == pytest.approx([20, 5])
    assert _offsets(allocations) == pytest.approx([0, 20])


def test_allocate_without_flexible_weight_leaves_space_unused():
    lines = [LineMetrics(10, 20, 0), LineMetrics(5, 5, 0)]
    allocations = allocate_axis(1000, (0, 0), 0, lines)
    assert _sizes(allocations) == pytest.approx([20, 5])


def test_allocate_no_ideal_growth_no_flexible():
    lines = [LineMetrics(4, 4, 0), LineMetrics(6, 6, 0)]
    allocations = allocate_axis(50, (0, 0), 0, lines)
    assert _sizes(allocations) == [4, 6]


def test_allocate_overflow_keeps_minimums():
    lines = [LineMetrics(10, 20, 1), LineMetrics(30, 30, 0)]
    allocations = allocate_axis(20, (0, 0), 0, lines)
    assert _sizes(allocations) == [10, 30]
    assert _offsets(allocations) == [0, 10]


def test_allocate_with_padding_and_spacing_fills_available():
    lines = [LineMetrics(10, 10, 1), LineMetrics(10, 10, 1)]
    allocations = allocate_axis(100, (5, 7), 4, lines)
    assert _sizes(allocations) == pytest.approx([42, 42])
    assert _offsets(allocations) == pytest.approx([5, 51])
    used = sum(_sizes(allocations)) + 4 + 5 + 7
    assert used == pytest.approx(100)


def test_allocate_offsets_do_not_overlap():
    lines = [
        LineMetrics(3, 9, 0),
        LineMetrics(0, 0, 2),
        LineMetrics(12, 15, 1),
        LineMetrics(1, 4, 0),
    ]
    spacing = 3
    for available in (0, 20, 40, 75, 200):
        allocations = allocate_axis(available, (2, 2), spacing, lines)
        for a, b in zip(allocations, allocations[1:]):
            assert b.offset >= a.offset + a.size + spacing - 1e-9
        for line, allocation in zip(lines, allocations):
            assert allocation.size >= line.min


# ── Full pass ──


def test_calculate_layout_two_columns():
    table = {
        "a": {Axis.HORIZONTAL: (10, 10, 0), Axis.VERTICAL: (5, 5, 0)},
        "b": {Axis.HORIZONTAL: (20, 20, 0), Axis.VERTICAL: (5, 5, 0)},
        "c": {Axis.HORIZONTAL: (5, 5, 0), Axis.VERTICAL: (5, 5, 0)},
        "d": {Axis.HORIZONTAL: (5, 5, 0), Axis.VERTICAL: (5, 5, 0)},
    }
    result = LayoutEngine.calculate_layout(
        ["a", "b", "c", "d"], GridConfig(columns=2), _hints_from(table), 30, 10
    )
    assert result.column_allocations == [Allocation(0, 10), Allocation(10, 20)]
    assert result.row_allocations == [Allocation(0, 5), Allocation(5, 5)]
    assert result.cell_rects == [
        (0, 0, 10, 5),
        (10, 0, 20, 5),
        (0, 5, 10, 5),
        (10, 5, 20, 5),
    ]
    assert result.horizontal == AxisTotals(30, 30, 0)


def test_measure_queries_each_cell_once_per_axis():
    calls = []

    def size_hint(cell, axis):
        calls.append((cell, axis))
        return SizeHint(1, 2, 0)

    LayoutEngine.measure(["a", "b", "c"], GridConfig(columns=2), size_hint)
    assert sorted(calls, key=lambda c: (c[0], c[1].value)) == [
        ("a", Axis.HORIZONTAL), ("a", Axis.VERTICAL),
        ("b", Axis.HORIZONTAL), ("b", Axis.VERTICAL),
        ("c", Axis.HORIZONTAL), ("c", Axis.VERTICAL),
    ]


def test_request_axis_extent_includes_padding_and_spacing():
    config = GridConfig(
        columns=2, spacing_x=3, spacing_y=4,
        padding_left=1, padding_right=2, padding_top=5, padding_bottom=6,
    )
    measurement = LayoutEngine.measure(["a", "b", "c"], config, lambda c, a: SizeHint(10, 12, 1))
    horizontal = LayoutEngine.request_axis_extent(measurement, Axis.HORIZONTAL)
    vertical = LayoutEngine.request_axis_extent(measurement, Axis.VERTICAL)
    assert horizontal == AxisTotals(10 + 10 + 3 + 3, 12 + 12 + 3 + 3, 2)
    assert vertical == AxisTotals(10 + 10 + 4 + 11, 12 + 12 + 4 + 11, 2)
    assert measurement.rows == 2


def test_calculate_layout_clamps_columns():
    result = LayoutEngine.calculate_layout(
        ["a", "b"], GridConfig(columns=0), lambda c, a: (1, 1, 0), 10, 10
    )
    assert result.positions == [GridPosition(0, 0), GridPosition(0, 1)]
    assert len(result.column_allocations) == 1


def test_empty_grid_places_nothing():
    config = GridConfig(columns=3, padding_left=3, padding_right=4)
    result = LayoutEngine.calculate_layout([], config, lambda c, a: (1, 1, 1), 100, 100)
    assert result.column_allocations == []
    assert result.row_allocations == []
    assert result.horizontal == AxisTotals(7, 7, 0)

    calls = []
    LayoutEngine.apply_layout(result, lambda *args: calls.append(args))
    assert calls == []


def test_apply_layout_horizontal_pass_first():
    table = {
        "a": {Axis.HORIZONTAL: (0, 0, 1), Axis.VERTICAL: (0, 0, 1)},
        "b": {Axis.HORIZONTAL: (0, 0, 1), Axis.VERTICAL: (0, 0, 1)},
    }
    result = LayoutEngine.calculate_layout(
        ["a", "b"], GridConfig(columns=2, spacing_x=10), _hints_from(table), 110, 40
    )
    calls = []
    LayoutEngine.apply_layout(result, lambda *args: calls.append(args))
    assert calls == [
        ("a", Axis.HORIZONTAL, 0, 50),
        ("b", Axis.HORIZONTAL, 60, 50),
        ("a", Axis.VERTICAL, 0, 40),
        ("b", Axis.VERTICAL, 0, 40),
    ]


def test_apply_layout_rejects_mismatched_allocations():
    result = LayoutResult(
        cells=["a"],
        positions=[GridPosition(2, 0)],
        column_allocations=[Allocation(0, 10)],
        row_allocations=[Allocation(0, 10)],
        cell_rects=[],
        horizontal=AxisTotals(),
        vertical=AxisTotals(),
    )
    with pytest.raises(LayoutError):
        LayoutEngine.apply_layout(result, lambda *args: None)
