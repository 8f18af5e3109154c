"""
Control UI Module for Tablet Optimizer

Provides a PyQt5 "tablet simulator" window: the tablet drawn as a grid of
cell buttons, undo/redo controls, and one tab per sequence length listing
the best ways to improve the current tablet.

The window only renders a TabletSession and forwards user input to it;
loading tablets and persisting settings are handled by the application.
"""

from functools import partial
from typing import Dict, List

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QPushButton, QSpinBox, QTabWidget, QListWidget, QListWidgetItem,
    QFileDialog
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QFont

from tablet_optimizer.session import TabletSession
from tablet_optimizer.solver import (
    CellType, Coordinate, SearchStep, MIN_SEARCH_DEPTH, MAX_SEARCH_DEPTH
)

# Cell colors (background, text)
CELL_COLORS: Dict[CellType, str] = {
    CellType.EMPTY: "#3e4246",
    CellType.WATER: "#232b36",
    CellType.ENTRANCE: "#357089",
    CellType.ENCOUNTER: "#dbb36a",
}
CELL_TEXT_COLORS: Dict[CellType, str] = {
    CellType.EMPTY: "#ffffff",
    CellType.WATER: "#9aa5b1",
    CellType.ENTRANCE: "#ffffff",
    CellType.ENCOUNTER: "#222222",
}
HIGHLIGHT_BORDER = "#00c853"
CELL_SIZE = 80


def format_delta(delta: float) -> str:
    """Format a score change as +N / -N / 0."""
    if delta == 0:
        return "0"
    return f"{delta:+g}"


class TabletWindow(QMainWindow):
    """
    Main simulator window.

    Signals:
        load_sample_requested(): Load the built-in sample tablet
        load_file_requested(str): Load a text layout from a path
        depth_changed(int): Search depth spin box changed
        shutdown_requested(): Window is closing
    """

    load_sample_requested = pyqtSignal()
    load_file_requested = pyqtSignal(str)
    depth_changed = pyqtSignal(int)
    shutdown_requested = pyqtSignal()

    def __init__(self, session: TabletSession):
        super().__init__()
        self._session = session
        self._cell_buttons: List[QPushButton] = []
        self._init_ui()

    def _init_ui(self):
        """Initialize the user interface components."""
        self.setWindowTitle("Tablet simulator")

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(15, 15, 15, 15)
        central_widget.setLayout(layout)

        # Toolbar
        toolbar = QHBoxLayout()
        self.sample_button = QPushButton("Load sample")
        self.sample_button.clicked.connect(self._on_sample_clicked)
        self.file_button = QPushButton("Load layout...")
        self.file_button.clicked.connect(self._on_file_clicked)
        self.undo_button = QPushButton("Undo")
        self.undo_button.clicked.connect(self._on_undo_clicked)
        self.redo_button = QPushButton("Redo")
        self.redo_button.clicked.connect(self._on_redo_clicked)
        self.clear_button = QPushButton("Clear selection")
        self.clear_button.clicked.connect(self._on_clear_clicked)

        for button in [self.sample_button, self.file_button, self.undo_button,
                       self.redo_button, self.clear_button]:
            toolbar.addWidget(button)

        toolbar.addStretch()
        toolbar.addWidget(QLabel("Depth:"))
        self.depth_spin = QSpinBox()
        self.depth_spin.setRange(MIN_SEARCH_DEPTH, MAX_SEARCH_DEPTH)
        self.depth_spin.setValue(self._session.optimizer.search_depth)
        self.depth_spin.valueChanged.connect(self.depth_changed.emit)
        toolbar.addWidget(self.depth_spin)
        layout.addLayout(toolbar)

        # Tablet grid | rankings
        body = QHBoxLayout()
        self.grid_widget = QWidget()
        self.grid_layout = QGridLayout()
        self.grid_layout.setSpacing(4)
        self.grid_widget.setLayout(self.grid_layout)
        body.addWidget(self.grid_widget, 0, Qt.AlignTop)

        rankings_layout = QVBoxLayout()
        self.score_label = QLabel("Top possible ways to improve")
        score_font = QFont()
        score_font.setBold(True)
        self.score_label.setFont(score_font)
        rankings_layout.addWidget(self.score_label)
        self.tabs = QTabWidget()
        rankings_layout.addWidget(self.tabs)
        body.addLayout(rankings_layout, 1)
        layout.addLayout(body, 1)

        # Status label
        self.status_label = QLabel("Status: No tablet loaded")
        layout.addWidget(self.status_label)

        self.resize(900, 500)
        self.refresh()

    def set_status(self, status: str):
        """
        Update the status label.

        Args:
            status: Status text (messages starting with "Error" are red)
        """
        self.status_label.setText(f"Status: {status}")
        if status.lower().startswith("error"):
            self.status_label.setStyleSheet("color: #d32f2f;")
        else:
            self.status_label.setStyleSheet("color: #333333;")

    def refresh(self):
        """
        Redraw grid, rankings and button states from the session.

        While the session waits for an optimization result, every input
        that would change the tablet is disabled.
        """
        idle = not self._session.busy
        for widget in [self.sample_button, self.file_button, self.depth_spin,
                       self.grid_widget, self.tabs]:
            widget.setEnabled(idle)
        self.undo_button.setEnabled(idle and self._session.can_undo)
        self.redo_button.setEnabled(idle and self._session.can_redo)
        self.clear_button.setVisible(self._session.selected is not None)
        self._rebuild_grid()
        self._rebuild_tabs()

    def _rebuild_grid(self):
        for button in self._cell_buttons:
            self.grid_layout.removeWidget(button)
            button.deleteLater()
        self._cell_buttons = []

        state = self._session.state
        if state is None:
            return

        improvements = self._session.selected_improvements
        for y in range(state.height - 1, -1, -1):
            for x in range(state.width):
                coord = Coordinate(x, y)
                cell = state.at(coord)
                text = f"({x},{y})\n{cell.type.name.title()}"

                step = improvements.get(coord)
                if step is not None:
                    delta = self._session.score_delta(step)
                    text += f"\n({format_delta(delta)})"

                button = QPushButton(text)
                button.setFixedSize(CELL_SIZE, CELL_SIZE)
                border = f"2px solid {HIGHLIGHT_BORDER}" if step is not None else "none"
                button.setStyleSheet(
                    f"QPushButton {{ background-color: {CELL_COLORS[cell.type]}; "
                    f"color: {CELL_TEXT_COLORS[cell.type]}; border: {border}; }}"
                )
                if step is not None:
                    button.setToolTip(
                        f"{step.first_move.describe()}: {step.result_score:g} "
                        f"({format_delta(self._session.score_delta(step))})"
                    )
                button.clicked.connect(partial(self._on_cell_clicked, coord))
                self.grid_layout.addWidget(button, state.height - 1 - y, x)
                self._cell_buttons.append(button)

    def _rebuild_tabs(self):
        # clear() only detaches pages; the list widgets (and the steps in
        # their items) live until deleted
        for index in range(self.tabs.count()):
            self.tabs.widget(index).deleteLater()
        self.tabs.clear()

        if self._session.busy:
            self.score_label.setText("Optimizing...")
            return
        if self._session.state is None:
            self.score_label.setText("Top possible ways to improve")
            return

        self.score_label.setText(
            f"Top possible ways to improve (score {self._session.score:g})"
        )
        for depth, steps in sorted(self._session.rankings.items()):
            list_widget = QListWidget()
            for step in steps:
                delta = self._session.score_delta(step)
                item = QListWidgetItem(
                    f"{step.describe()}: {step.result_score:g} ({format_delta(delta)})"
                )
                item.setData(Qt.UserRole, step)
                list_widget.addItem(item)
            list_widget.itemClicked.connect(self._on_step_clicked)
            self.tabs.addTab(list_widget, str(depth))

    def _on_sample_clicked(self):
        self.load_sample_requested.emit()

    def _on_cell_clicked(self, coord: Coordinate, checked: bool = False):
        self._session.click(coord)
        self.refresh()

    def _on_step_clicked(self, item: QListWidgetItem):
        step: SearchStep = item.data(Qt.UserRole)
        self._session.apply_step(step)
        self.refresh()

    def _on_undo_clicked(self):
        self._session.undo()
        self.refresh()

    def _on_redo_clicked(self):
        self._session.redo()
        self.refresh()

    def _on_clear_clicked(self):
        self._session.clear_selection()
        self.refresh()

    def _on_file_clicked(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Load tablet layout", "", "Layout files (*.txt);;All files (*)"
        )
        if path:
            self.load_file_requested.emit(path)

    def closeEvent(self, event):
        """
        Handle window close event.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()
