import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple, Union

from flexgrid.model.data_model import (
    MIN_COLUMNS, Allocation, AxisTotals, GridConfig, GridPosition, LineMetrics, SizeHint
)
from flexgrid.model.enums import Axis

logger = logging.getLogger(__name__)

# size_hint(cell, axis) -> SizeHint or (min, preferred, flexible)
SizeHintQuery = Callable[[Any, Axis], Union[SizeHint, Tuple[float, float, float]]]
# place(cell, axis, offset, size)
PlaceCommand = Callable[[Any, Axis, float, float], None]

class LayoutError(ValueError):
    """A cell refers to a column/row the allocation does not cover."""

def clamp_columns(columns: int) -> int:
    if columns < MIN_COLUMNS:
        logger.warning("Column count %s is below %d, using %d", columns, MIN_COLUMNS, MIN_COLUMNS)
        return MIN_COLUMNS
    return columns

def row_count(cell_count: int, columns: int) -> int:
    if cell_count <= 0:
        return 0
    # Round up to account for a partially filled last row
    return ((cell_count - 1) // columns) + 1

def map_cells(cell_count: int, columns: int) -> List[GridPosition]:
    """Row-major (column, row) for each cell index."""
    return [GridPosition(i % columns, i // columns) for i in range(cell_count)]

def normalize_hint(hint) -> SizeHint:
    """
    Accepts a SizeHint or a (min, preferred, flexible) tuple.
    Negative values are clamped to zero.
    """
    if not isinstance(hint, SizeHint):
        hint = SizeHint(*hint)
    minimum, preferred, flexible = hint.min, hint.preferred, hint.flexible
    if minimum < 0 or preferred < 0 or flexible < 0:
        logger.warning("Negative size hint %s clamped to zero", hint)
        minimum = max(minimum, 0.0)
        preferred = max(preferred, 0.0)
        flexible = max(flexible, 0.0)
    return SizeHint(minimum, preferred, flexible)

def total_line_size(lines: Sequence[LineMetrics], padding: float, spacing: float) -> AxisTotals:
    total_min = sum(line.min for line in lines)
    total_preferred = sum(line.preferred for line in lines)
    total_flexible = sum(line.flexible for line in lines)

    # Spacing and padding are fixed costs; only the lines themselves can flex
    total_spacing = max(0, len(lines) - 1) * spacing
    return AxisTotals(
        total_min + total_spacing + padding,
        total_preferred + total_spacing + padding,
        total_flexible,
    )

def measure_axis(
    hints: Sequence[SizeHint],
    positions: Sequence[GridPosition],
    axis: Axis,
    line_count: int,
    padding: float,
    spacing: float,
) -> Tuple[List[LineMetrics], AxisTotals]:
    """
    Aggregates cell hints into one LineMetrics per column (horizontal)
    or row (vertical), plus the totals the axis asks its parent for.
    """
    if not hints:
        # A gridless container still reserves its padding
        return [], AxisTotals(padding, padding, 0.0)

    lines = [LineMetrics() for _ in range(line_count)]

    for hint, position in zip(hints, positions):
        index = position.line_for(axis)
        current = lines[index]

        required = max(current.min, hint.min)
        # Widen by the updated minimum so a minimum-only cell still keeps
        # its line from donating space other lines asked for
        preferred = max(current.preferred, required, hint.preferred)
        flexible = max(current.flexible, hint.flexible)

        lines[index] = LineMetrics(required, preferred, flexible)

    return lines, total_line_size(lines, padding, spacing)

def allocate_axis(
    available: float,
    padding: Tuple[float, float],
    spacing: float,
    lines: Sequence[LineMetrics],
) -> List[Allocation]:
    """
    Splits the available space over the lines.

    Every line first gets its minimum. Space left after that goes towards
    preferred sizes, proportional to how much each line is missing, but
    never more than what is available or wanted. Anything left then goes
    to lines with a flexible weight, proportional to that weight.
    """
    start, end = padding
    totals = total_line_size(lines, start + end, spacing)

    remaining = available - totals.total_min
    ideally = totals.ideal_growth
    # Lines overflowing (remaining < 0) keep their minimums
    reserved = max(min(remaining, ideally), 0.0)
    remaining = max(remaining - reserved, 0.0)

    allocations = []
    offset = start
    for line in lines:
        preferred_share = 0.0
        if ideally > 0:
            preferred_share = (line.missing / ideally) * reserved

        flexible_share = 0.0
        if totals.total_flexible > 0:
            flexible_share = (remaining / totals.total_flexible) * line.flexible

        size = line.min + preferred_share + flexible_share
        allocations.append(Allocation(offset, size))
        offset += size + spacing

    return allocations

@dataclass
class AxisMeasurement:
    lines: List[LineMetrics]
    totals: AxisTotals

@dataclass
class GridMeasurement:
    columns: int
    rows: int
    positions: List[GridPosition]
    horizontal: AxisMeasurement
    vertical: AxisMeasurement

    def for_axis(self, axis: Axis) -> AxisMeasurement:
        return self.horizontal if axis is Axis.HORIZONTAL else self.vertical

@dataclass
class LayoutResult:
    cells: List[Any]
    positions: List[GridPosition]
    column_allocations: List[Allocation]
    row_allocations: List[Allocation]
    # (x, y, width, height) per cell, in input order
    cell_rects: List[Tuple[float, float, float, float]]
    horizontal: AxisTotals
    vertical: AxisTotals

    def allocations_for(self, axis: Axis) -> List[Allocation]:
        return self.column_allocations if axis is Axis.HORIZONTAL else self.row_allocations

def _allocation_at(allocations: List[Allocation], index: int, axis: Axis) -> Allocation:
    if not 0 <= index < len(allocations):
        raise LayoutError(
            f"Line {index} has no {axis.label} allocation ({len(allocations)} lines allocated)"
        )
    return allocations[index]

class LayoutEngine:
    @staticmethod
    def measure(cells: Sequence[Any], config: GridConfig, size_hint: SizeHintQuery) -> GridMeasurement:
        """
        Maps cells to the grid and measures both axes.
        size_hint is queried once per cell per axis.
        """
        cells = list(cells)
        columns = clamp_columns(config.columns)
        rows = row_count(len(cells), columns)
        positions = map_cells(len(cells), columns)

        measurements = {}
        for axis in (Axis.HORIZONTAL, Axis.VERTICAL):
            hints = [normalize_hint(size_hint(cell, axis)) for cell in cells]
            start, end = config.padding_for(axis)
            line_count = columns if axis is Axis.HORIZONTAL else rows
            lines, totals = measure_axis(
                hints, positions, axis, line_count, start + end, config.spacing_for(axis)
            )
            measurements[axis] = AxisMeasurement(lines, totals)

        return GridMeasurement(
            columns, rows, positions,
            measurements[Axis.HORIZONTAL], measurements[Axis.VERTICAL],
        )

    @staticmethod
    def request_axis_extent(measurement: GridMeasurement, axis: Axis) -> AxisTotals:
        return measurement.for_axis(axis).totals

    @staticmethod
    def allocate(
        cells: Sequence[Any],
        measurement: GridMeasurement,
        config: GridConfig,
        width: float,
        height: float,
    ) -> LayoutResult:
        cells = list(cells)
        columns = allocate_axis(
            width, config.padding_for(Axis.HORIZONTAL), config.spacing_x, measurement.horizontal.lines
        )
        rows = allocate_axis(
            height, config.padding_for(Axis.VERTICAL), config.spacing_y, measurement.vertical.lines
        )

        cell_rects = []
        for position in measurement.positions:
            col = _allocation_at(columns, position.column, Axis.HORIZONTAL)
            row = _allocation_at(rows, position.row, Axis.VERTICAL)
            cell_rects.append((col.offset, row.offset, col.size, row.size))

        logger.debug(
            "Grid %dx%d laid out in %.1f x %.1f (cells: %d)",
            measurement.columns, measurement.rows, width, height, len(cells),
        )
        return LayoutResult(
            cells, measurement.positions, columns, rows, cell_rects,
            measurement.horizontal.totals, measurement.vertical.totals,
        )

    @staticmethod
    def calculate_layout(
        cells: Sequence[Any],
        config: GridConfig,
        size_hint: SizeHintQuery,
        width: float,
        height: float,
    ) -> LayoutResult:
        """Measures and allocates one full layout pass."""
        cells = list(cells)
        measurement = LayoutEngine.measure(cells, config, size_hint)
        return LayoutEngine.allocate(cells, measurement, config, width, height)

    @staticmethod
    def apply_layout(result: LayoutResult, place: PlaceCommand):
        """Issues every horizontal placement, then every vertical one."""
        for axis in (Axis.HORIZONTAL, Axis.VERTICAL):
            allocations = result.allocations_for(axis)
            for cell, position in zip(result.cells, result.positions):
                allocation = _allocation_at(allocations, position.line_for(axis), axis)
                place(cell, axis, allocation.offset, allocation.size)
