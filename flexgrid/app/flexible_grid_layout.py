import math
from typing import List, Optional

from PyQt6.QtWidgets import QLayout, QLayoutItem
from PyQt6.QtCore import Qt, QRect, QSize

from flexgrid.model.data_model import GridConfig, SizeHint
from flexgrid.model.enums import Axis
from flexgrid.model.layout_engine import LayoutEngine, LayoutResult, clamp_columns


def item_size_hint(item: QLayoutItem, axis: Axis) -> SizeHint:
    """Reads minimum, preferred and flexible size of a layout item."""
    minimum = item.minimumSize()
    preferred = item.sizeHint()
    if axis is Axis.HORIZONTAL:
        orientation = Qt.Orientation.Horizontal
        min_size, preferred_size = minimum.width(), preferred.width()
    else:
        orientation = Qt.Orientation.Vertical
        min_size, preferred_size = minimum.height(), preferred.height()

    flexible = 0.0
    widget = item.widget()
    if widget is not None:
        policy = widget.sizePolicy()
        stretch = policy.horizontalStretch() if axis is Axis.HORIZONTAL else policy.verticalStretch()
        flexible = float(stretch)
    # Items that expand without an explicit stretch take an equal share
    if flexible == 0 and item.expandingDirections() & orientation:
        flexible = 1.0

    # Qt reports unset sizes as -1
    return SizeHint(float(max(min_size, 0)), float(max(preferred_size, 0)), flexible)


class FlexibleGridLayout(QLayout):
    """
    Lays out items in a fixed number of columns, filled row by row.
    Each column is as wide as its widest item and each row as high as its
    highest one; extra space goes to preferred sizes first, then to
    stretching items.
    """

    def __init__(self, parent=None, columns: int = 1):
        super().__init__(parent)
        self._items: List[QLayoutItem] = []
        self._columns = clamp_columns(columns)
        self._horizontal_spacing = 0
        self._vertical_spacing = 0

    # ── Properties ──

    def columns(self) -> int:
        return self._columns

    def setColumns(self, columns: int):
        columns = clamp_columns(columns)
        if columns != self._columns:
            self._columns = columns
            self.invalidate()

    def horizontalSpacing(self) -> int:
        return self._horizontal_spacing

    def setHorizontalSpacing(self, spacing: int):
        self._horizontal_spacing = max(spacing, 0)
        self.invalidate()

    def verticalSpacing(self) -> int:
        return self._vertical_spacing

    def setVerticalSpacing(self, spacing: int):
        self._vertical_spacing = max(spacing, 0)
        self.invalidate()

    def spacing(self) -> int:
        if self._horizontal_spacing == self._vertical_spacing:
            return self._horizontal_spacing
        return -1

    def setSpacing(self, spacing: int):
        self._horizontal_spacing = max(spacing, 0)
        self._vertical_spacing = max(spacing, 0)
        self.invalidate()

    def gridConfig(self) -> GridConfig:
        margins = self.contentsMargins()
        return GridConfig(
            columns=self._columns,
            spacing_x=self._horizontal_spacing,
            spacing_y=self._vertical_spacing,
            padding_left=margins.left(),
            padding_right=margins.right(),
            padding_top=margins.top(),
            padding_bottom=margins.bottom(),
        )

    def setGridConfig(self, config: GridConfig):
        self._columns = clamp_columns(config.columns)
        self._horizontal_spacing = max(int(round(config.spacing_x)), 0)
        self._vertical_spacing = max(int(round(config.spacing_y)), 0)
        self.setContentsMargins(
            int(round(config.padding_left)), int(round(config.padding_top)),
            int(round(config.padding_right)), int(round(config.padding_bottom)),
        )
        self.invalidate()

    # ── Item storage ──

    def addItem(self, item: QLayoutItem):
        self._items.append(item)
        self.invalidate()

    def count(self) -> int:
        return len(self._items)

    def itemAt(self, index: int) -> Optional[QLayoutItem]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def takeAt(self, index: int) -> Optional[QLayoutItem]:
        if 0 <= index < len(self._items):
            item = self._items.pop(index)
            self.invalidate()
            return item
        return None

    def _layout_items(self) -> List[QLayoutItem]:
        # Hidden widgets do not take a grid slot
        return [item for item in self._items if item.widget() is None or not item.isEmpty()]

    # ── Sizing ──

    def _measure(self):
        return LayoutEngine.measure(self._layout_items(), self.gridConfig(), item_size_hint)

    def sizeHint(self) -> QSize:
        measurement = self._measure()
        h = LayoutEngine.request_axis_extent(measurement, Axis.HORIZONTAL)
        v = LayoutEngine.request_axis_extent(measurement, Axis.VERTICAL)
        return QSize(math.ceil(h.total_preferred), math.ceil(v.total_preferred))

    def minimumSize(self) -> QSize:
        measurement = self._measure()
        h = LayoutEngine.request_axis_extent(measurement, Axis.HORIZONTAL)
        v = LayoutEngine.request_axis_extent(measurement, Axis.VERTICAL)
        return QSize(math.ceil(h.total_min), math.ceil(v.total_min))

    def expandingDirections(self) -> Qt.Orientation:
        measurement = self._measure()
        directions = Qt.Orientation(0)
        if measurement.horizontal.totals.total_flexible > 0:
            directions |= Qt.Orientation.Horizontal
        if measurement.vertical.totals.total_flexible > 0:
            directions |= Qt.Orientation.Vertical
        return directions

    # ── Placement ──

    def calculateLayout(self, width: float, height: float) -> LayoutResult:
        return LayoutEngine.calculate_layout(
            self._layout_items(), self.gridConfig(), item_size_hint, width, height
        )

    def setGeometry(self, rect: QRect):
        super().setGeometry(rect)
        result = self.calculateLayout(rect.width(), rect.height())

        # [x, y, width, height] per item, filled one axis at a time
        pending = {id(item): [0, 0, 0, 0] for item in result.cells}

        def place(item, axis, offset, size):
            start = int(round(offset))
            end = int(round(offset + size))
            geometry = pending[id(item)]
            geometry[axis.value] = start
            geometry[axis.value + 2] = end - start

        LayoutEngine.apply_layout(result, place)

        for item in result.cells:
            x, y, w, h = pending[id(item)]
            item.setGeometry(QRect(rect.x() + x, rect.y() + y, w, h))
