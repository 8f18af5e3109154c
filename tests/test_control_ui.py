"""
Tests for the simulator window and the background optimizer worker.

Runs Qt on the offscreen platform, no display needed.

Usage:
    pytest tests/test_control_ui.py
"""

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QEvent
from PyQt5.QtWidgets import QApplication, QListWidget

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tablet_optimizer.control_ui import TabletWindow, format_delta
from tablet_optimizer.optimizer_worker import OptimizerWorker
from tablet_optimizer.session import TabletSession
from tablet_optimizer.snapshot import sample_tablet
from tablet_optimizer.solver import Coordinate, TabletOptimizer


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def flush_deleted():
    QApplication.sendPostedEvents(None, QEvent.DeferredDelete)


def tab_counts(window):
    return [window.tabs.widget(i).count() for i in range(window.tabs.count())]


def test_format_delta():
    assert format_delta(0) == "0"
    assert format_delta(3.0) == "+3"
    assert format_delta(-2.5) == "-2.5"


def test_refresh_disposes_old_ranking_lists(qapp):
    session = TabletSession(TabletOptimizer(search_depth=2))
    session.load(sample_tablet())
    window = TabletWindow(session)

    for _ in range(20):
        window.refresh()
    flush_deleted()

    assert window.tabs.count() == 2
    assert len(window.findChildren(QListWidget)) == 2


def test_tabs_show_session_rankings_as_is(qapp):
    session = TabletSession(TabletOptimizer(search_depth=2, top_options_count=1))
    session.load(sample_tablet())
    window = TabletWindow(session)
    assert tab_counts(window) == [1, 1]

    session.set_optimizer(TabletOptimizer(search_depth=2, top_options_count=1000))
    window.refresh()
    assert tab_counts(window) == [len(session.rankings[1]), len(session.rankings[2])]


def test_selected_cell_highlights_partner(qapp):
    session = TabletSession(TabletOptimizer(search_depth=1))
    session.load(sample_tablet())
    window = TabletWindow(session)

    window._on_cell_clicked(Coordinate(0, 1))
    assert window.clear_button.isVisibleTo(window)
    # Top row first: (0,2) is the empty cell the entrance can move to
    assert window._cell_buttons[0].toolTip() == "Move entrance to (0,2): 5 (+3)"
    assert window._cell_buttons[1].toolTip() == ""


def test_inputs_disabled_while_optimizing(qapp):
    requests = []
    session = TabletSession(
        TabletOptimizer(search_depth=2),
        scheduler=lambda request_id, optimizer, state: requests.append(
            (request_id, optimizer, state)
        ),
    )
    window = TabletWindow(session)
    session.load(sample_tablet())
    window.refresh()

    assert session.busy
    for widget in [window.sample_button, window.file_button, window.undo_button,
                   window.redo_button, window.depth_spin, window.grid_widget,
                   window.tabs]:
        assert not widget.isEnabled()
    assert window.tabs.count() == 0
    assert window.score_label.text() == "Optimizing..."

    request_id, optimizer, state = requests[-1]
    assert session.accept_result(request_id, optimizer.optimize(state))
    window.refresh()

    assert window.grid_widget.isEnabled()
    assert window.depth_spin.isEnabled()
    assert window.tabs.count() == 2
    assert not window.undo_button.isEnabled()


def test_worker_emits_result(qapp):
    worker = OptimizerWorker(7, TabletOptimizer(search_depth=1), sample_tablet())
    results = []
    errors = []
    worker.result_ready.connect(lambda request_id, result: results.append((request_id, result)))
    worker.error_occurred.connect(lambda request_id, message: errors.append(request_id))

    worker.run()

    assert errors == []
    assert len(results) == 1
    request_id, result = results[0]
    assert request_id == 7
    assert result.state == sample_tablet()
    assert result.score == 2.0
    assert sorted(result.rankings) == [1]


def test_worker_reports_failure(qapp):
    worker = OptimizerWorker(3, TabletOptimizer(search_depth=1), None)
    results = []
    errors = []
    worker.result_ready.connect(lambda request_id, result: results.append(request_id))
    worker.error_occurred.connect(lambda request_id, message: errors.append(request_id))

    worker.run()

    assert results == []
    assert errors == [3]


def test_worker_thread_delivers_to_session(qapp):
    session = TabletSession(TabletOptimizer(search_depth=2))
    workers = []

    def start(request_id, optimizer, state):
        worker = OptimizerWorker(request_id, optimizer, state)
        worker.result_ready.connect(session.accept_result)
        workers.append(worker)
        worker.start()

    session.set_scheduler(start)
    session.load(sample_tablet())
    assert session.busy

    workers[0].wait(10000)
    # Cross-thread signals are queued for this thread's event loop
    qapp.processEvents()

    assert not session.busy
    assert session.score == 2.0
    assert sorted(session.rankings) == [1, 2]
