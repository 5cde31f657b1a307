import json
from dataclasses import dataclass, replace
from typing import Dict, Any, Tuple

from flexgrid.model.enums import Axis
from flexgrid.version import APP_VERSION

# A grid needs at least one column to place anything
MIN_COLUMNS = 1

@dataclass(frozen=True)
class GridPosition:
    column: int
    row: int

    def line_for(self, axis: Axis) -> int:
        return self.column if axis is Axis.HORIZONTAL else self.row

@dataclass(frozen=True)
class SizeHint:
    """Minimum, preferred and flexible size a cell declares along one axis."""
    min: float = 0.0
    preferred: float = 0.0
    flexible: float = 0.0

@dataclass(frozen=True)
class LineMetrics:
    """Aggregated hints of every cell sharing one column or row."""
    min: float = 0.0
    preferred: float = 0.0
    flexible: float = 0.0

    @property
    def missing(self) -> float:
        # How far the line wants to grow past its minimum
        return self.preferred - self.min

@dataclass(frozen=True)
class AxisTotals:
    """Space one axis asks for, padding and spacing included."""
    total_min: float = 0.0
    total_preferred: float = 0.0
    total_flexible: float = 0.0

    @property
    def ideal_growth(self) -> float:
        return self.total_preferred - self.total_min

@dataclass(frozen=True)
class Allocation:
    offset: float
    size: float

    @property
    def end(self) -> float:
        return self.offset + self.size

@dataclass
class GridConfig:
    columns: int = MIN_COLUMNS

    # Space between neighbouring columns (x) and rows (y)
    spacing_x: float = 0.0
    spacing_y: float = 0.0

    padding_left: float = 0.0
    padding_right: float = 0.0
    padding_top: float = 0.0
    padding_bottom: float = 0.0

    def padding_for(self, axis: Axis) -> Tuple[float, float]:
        """(start, end) padding along the axis."""
        if axis is Axis.HORIZONTAL:
            return (self.padding_left, self.padding_right)
        return (self.padding_top, self.padding_bottom)

    def spacing_for(self, axis: Axis) -> float:
        return self.spacing_x if axis is Axis.HORIZONTAL else self.spacing_y

    def with_columns(self, columns: int) -> 'GridConfig':
        return replace(self, columns=max(int(columns), MIN_COLUMNS))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_version": APP_VERSION,
            "columns": self.columns,
            "spacing_x": self.spacing_x,
            "spacing_y": self.spacing_y,
            "padding_left": self.padding_left,
            "padding_right": self.padding_right,
            "padding_top": self.padding_top,
            "padding_bottom": self.padding_bottom,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridConfig':
        c = cls()
        c.columns = max(int(data.get("columns", MIN_COLUMNS)), MIN_COLUMNS)
        c.spacing_x = float(data.get("spacing_x", 0.0))
        c.spacing_y = float(data.get("spacing_y", 0.0))
        c.padding_left = float(data.get("padding_left", 0.0))
        c.padding_right = float(data.get("padding_right", 0.0))
        c.padding_top = float(data.get("padding_top", 0.0))
        c.padding_bottom = float(data.get("padding_bottom", 0.0))
        return c

    def save_to_file(self, filepath: str):
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=4)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'GridConfig':
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)
