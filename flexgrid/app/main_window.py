import logging
import random
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QLabel, QFrame, QSpinBox, QToolBar, QFileDialog,
    QMessageBox, QSizePolicy, QStyle
)
from PyQt6.QtCore import Qt, QSize
from PyQt6.QtGui import QAction, QKeySequence

from flexgrid.app.flexible_grid_layout import FlexibleGridLayout
from flexgrid.export.image_exporter import ImageExporter
from flexgrid.model.data_model import GridConfig
from flexgrid.version import APP_VERSION

logger = logging.getLogger(__name__)


class DemoCell(QLabel):
    """A labelled frame with a fixed preferred size and optional stretch."""

    def __init__(self, index: int, preferred: QSize, stretch: int = 0, parent=None):
        super().__init__(parent)
        self._preferred = preferred
        self.setFrameShape(QFrame.Shape.Box)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setStyleSheet("background: #F0F0F0; color: #333333;")
        self.setMinimumSize(preferred.width() // 2, preferred.height() // 2)

        policy = QSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Preferred)
        policy.setHorizontalStretch(stretch)
        policy.setVerticalStretch(stretch)
        self.setSizePolicy(policy)

        flex = f"\nflex {stretch}" if stretch else ""
        self.setText(f"#{index}\n{preferred.width()}x{preferred.height()}{flex}")

    def sizeHint(self) -> QSize:
        return self._preferred


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"Flexible Grid Layout v{APP_VERSION}")
        self.resize(900, 600)

        self._config_path: Optional[str] = None
        self._next_index = 0

        self._setup_ui()
        for _ in range(6):
            self._on_add_cell()

    def _setup_ui(self):
        self.container = QWidget()
        self.grid = FlexibleGridLayout(self.container, columns=3)
        self.grid.setContentsMargins(8, 8, 8, 8)
        self.grid.setSpacing(6)
        self.setCentralWidget(self.container)

        self.toolbar = QToolBar()
        self.toolbar.setMovable(False)
        self.addToolBar(self.toolbar)

        file_menu = self.menuBar().addMenu("File")

        open_action = QAction("Open Grid Settings...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DialogOpenButton))
        open_action.triggered.connect(self._on_open_config)

        save_action = QAction("Save Grid Settings...", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DialogSaveButton))
        save_action.triggered.connect(self._on_save_config)

        export_action = QAction("Export Wireframe...", self)
        export_action.triggered.connect(self._on_export_wireframe)

        file_menu.addAction(open_action)
        file_menu.addAction(save_action)
        file_menu.addSeparator()
        file_menu.addAction(export_action)

        add_action = QAction("Add Cell", self)
        add_action.triggered.connect(self._on_add_cell)
        remove_action = QAction("Remove Cell", self)
        remove_action.triggered.connect(self._on_remove_cell)

        self.toolbar.addAction(open_action)
        self.toolbar.addAction(save_action)
        self.toolbar.addSeparator()
        self.toolbar.addAction(add_action)
        self.toolbar.addAction(remove_action)
        self.toolbar.addSeparator()

        self.columns_spin = self._add_spin("Columns", 1, 12, self.grid.columns())
        self.spacing_spin = self._add_spin("Spacing", 0, 64, self.grid.horizontalSpacing())
        self.padding_spin = self._add_spin("Padding", 0, 64, self.grid.contentsMargins().left())

        self.columns_spin.valueChanged.connect(self.grid.setColumns)
        self.spacing_spin.valueChanged.connect(self.grid.setSpacing)
        self.padding_spin.valueChanged.connect(lambda v: self.grid.setContentsMargins(v, v, v, v))

    def _add_spin(self, label: str, minimum: int, maximum: int, value: int) -> QSpinBox:
        self.toolbar.addWidget(QLabel(f" {label}: "))
        spin = QSpinBox()
        spin.setRange(minimum, maximum)
        spin.setValue(value)
        self.toolbar.addWidget(spin)
        return spin

    def _sync_controls(self):
        config = self.grid.gridConfig()
        for spin, value in (
            (self.columns_spin, config.columns),
            (self.spacing_spin, int(config.spacing_x)),
            (self.padding_spin, int(config.padding_left)),
        ):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)

    def _on_add_cell(self):
        preferred = QSize(random.randint(60, 180), random.randint(40, 120))
        stretch = random.choice([0, 0, 1, 2])
        self.grid.addWidget(DemoCell(self._next_index, preferred, stretch))
        self._next_index += 1

    def _on_remove_cell(self):
        if self.grid.count() == 0:
            return
        item = self.grid.takeAt(self.grid.count() - 1)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()

    def _on_open_config(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Grid Settings", "", "JSON Files (*.json)")
        if not path:
            return
        try:
            config = GridConfig.load_from_file(path)
        except (OSError, ValueError) as e:
            logger.error("Failed to load grid settings %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Failed to load grid settings:\n{e}")
            return
        self._config_path = path
        self.grid.setGridConfig(config)
        self._sync_controls()

    def _on_save_config(self):
        path = self._config_path
        if not path:
            path, _ = QFileDialog.getSaveFileName(self, "Save Grid Settings", "grid.json", "JSON Files (*.json)")
        if not path:
            return
        try:
            self.grid.gridConfig().save_to_file(path)
        except OSError as e:
            logger.error("Failed to save grid settings %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Failed to save grid settings:\n{e}")
            return
        self._config_path = path

    def _on_export_wireframe(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export Wireframe", "grid.png", "PNG Files (*.png)")
        if not path:
            return
        width, height = self.container.width(), self.container.height()
        config = self.grid.gridConfig()
        result = self.grid.calculateLayout(width, height)
        try:
            ImageExporter.export(
                result, width, height, path,
                padding=(config.padding_left, config.padding_right,
                         config.padding_top, config.padding_bottom),
            )
        except OSError as e:
            logger.error("Failed to export wireframe %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Failed to export wireframe:\n{e}")
