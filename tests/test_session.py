"""
Tests for TabletSession: undo/redo history and the cell selection flow.

Usage:
    pytest tests/test_session.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tablet_optimizer.session import SelectionState, TabletSession
from tablet_optimizer.snapshot import sample_tablet
from tablet_optimizer.solver import Coordinate, TabletOptimizer


def test_empty_session():
    session = TabletSession()
    assert session.state is None
    assert session.score == 0.0
    assert session.rankings == {}
    assert not session.can_undo
    assert not session.can_redo
    assert session.click(Coordinate(0, 0)) is None
    assert session.undo() is False
    assert session.redo() is False


def test_load_ranks_current_state():
    session = TabletSession(TabletOptimizer(search_depth=2))
    session.load(sample_tablet())
    assert session.state == sample_tablet()
    assert session.score == 2.0
    assert sorted(session.rankings) == [1, 2]
    assert not session.can_undo


def test_undo_redo():
    session = TabletSession()
    session.load(sample_tablet())
    best = session.rankings[1][0]
    assert session.score_delta(best) == 3.0

    session.apply_step(best)
    assert session.score == 5.0
    assert session.can_undo and not session.can_redo

    assert session.undo() is True
    assert session.state == sample_tablet()
    assert session.score == 2.0
    assert session.can_redo

    assert session.redo() is True
    assert session.state == best.result_state
    assert not session.can_redo
    assert session.can_undo


def test_load_clears_redo():
    session = TabletSession()
    session.load(sample_tablet())
    session.apply_step(session.rankings[1][0])
    session.undo()
    assert session.can_redo

    session.load(sample_tablet())
    assert not session.can_redo


def test_click_selects_then_applies():
    session = TabletSession()
    session.load(sample_tablet())

    # Encounter cell takes part in no move
    assert session.click(Coordinate(0, 0)) is None
    assert session.selection_state is SelectionState.IDLE

    # Entrance can swap with the empty cell above it
    assert session.click(Coordinate(0, 1)) is None
    assert session.selection_state is SelectionState.CELL_SELECTED
    assert session.selected == Coordinate(0, 1)
    assert list(session.selected_improvements) == [Coordinate(0, 2)]

    # Clicking a cell that is not highlighted keeps the selection
    assert session.click(Coordinate(0, 0)) is None
    assert session.selected == Coordinate(0, 1)

    step = session.click(Coordinate(0, 2))
    assert step is not None
    assert session.state.entrance_coordinate == Coordinate(0, 2)
    assert session.score == 5.0
    assert session.selection_state is SelectionState.IDLE
    assert session.selected is None
    assert session.can_undo


def test_clear_selection():
    session = TabletSession()
    session.load(sample_tablet())
    session.click(Coordinate(0, 1))
    session.clear_selection()
    assert session.selection_state is SelectionState.IDLE
    assert session.selected_improvements == {}


def test_set_optimizer_reranks():
    session = TabletSession(TabletOptimizer(search_depth=1))
    session.load(sample_tablet())
    assert sorted(session.rankings) == [1]

    session.set_optimizer(TabletOptimizer(search_depth=2))
    assert sorted(session.rankings) == [1, 2]
    assert not session.can_undo


class RecordingScheduler:
    """Collects scheduled requests so a test can complete them by hand."""

    def __init__(self):
        self.requests = []

    def __call__(self, request_id, optimizer, state):
        self.requests.append((request_id, optimizer, state))

    def complete(self, session, index=-1):
        request_id, optimizer, state = self.requests[index]
        return session.accept_result(request_id, optimizer.optimize(state))


def test_scheduled_load_waits_for_result():
    scheduler = RecordingScheduler()
    session = TabletSession(TabletOptimizer(search_depth=1), scheduler=scheduler)
    session.load(sample_tablet())

    assert session.busy
    assert session.state is None
    assert len(scheduler.requests) == 1
    assert session.click(Coordinate(0, 2)) is None

    assert scheduler.complete(session) is True
    assert not session.busy
    assert session.state == sample_tablet()
    assert session.score == 2.0
    assert not session.can_undo


def test_scheduled_history_commits_on_accept():
    scheduler = RecordingScheduler()
    session = TabletSession(TabletOptimizer(search_depth=1), scheduler=scheduler)
    session.load(sample_tablet())
    scheduler.complete(session)

    best = session.rankings[1][0]
    session.apply_step(best)
    # Current tablet and history stay put until the result arrives
    assert session.state == sample_tablet()
    assert not session.can_undo
    scheduler.complete(session)
    assert session.state == best.result_state
    assert session.can_undo

    session.undo()
    assert session.state == best.result_state
    assert not session.can_redo
    scheduler.complete(session)
    assert session.state == sample_tablet()
    assert session.can_redo and not session.can_undo

    session.redo()
    scheduler.complete(session)
    assert session.state == best.result_state
    assert session.can_undo and not session.can_redo


def test_superseded_result_is_dropped():
    scheduler = RecordingScheduler()
    session = TabletSession(TabletOptimizer(search_depth=1), scheduler=scheduler)
    session.load(sample_tablet())
    session.set_optimizer(TabletOptimizer(search_depth=2))

    assert len(scheduler.requests) == 2
    assert scheduler.complete(session, index=0) is False
    assert session.busy

    assert scheduler.complete(session, index=1) is True
    assert sorted(session.rankings) == [1, 2]
    assert not session.can_undo


def test_discard_pending_keeps_current_tablet():
    scheduler = RecordingScheduler()
    session = TabletSession(TabletOptimizer(search_depth=1), scheduler=scheduler)
    session.load(sample_tablet())
    scheduler.complete(session)

    session.apply_step(session.rankings[1][0])
    request_id = scheduler.requests[-1][0]
    assert session.discard_pending(request_id) is True
    assert session.discard_pending(request_id) is False
    assert not session.busy
    assert session.state == sample_tablet()
    assert not session.can_undo


def test_scheduler_can_be_removed():
    scheduler = RecordingScheduler()
    session = TabletSession(scheduler=scheduler)
    session.set_scheduler(None)
    session.load(sample_tablet())
    assert scheduler.requests == []
    assert not session.busy
    assert session.score == 2.0
