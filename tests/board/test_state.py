"""
Board state and reducer tests
"""
import pytest

from questhire.board.state import (
    BoardState,
    Card,
    Column,
    Loaded,
    LoadFailed,
    MoveFailure,
    MoveStart,
    MoveSuccess,
    PipelineSnapshot,
    SelectionCleared,
    SelectionModeChanged,
    SelectionToggled,
    move_card,
    reduce,
)
from questhire.models.application import ApplicationStatus, STATUS_ORDER, can_transition

NEW = ApplicationStatus.NEW
CONTACTED = ApplicationStatus.CONTACTED
QUALIFIED = ApplicationStatus.QUALIFIED


def ids(state: BoardState, status: ApplicationStatus) -> list:
    return [c.id for c in state.column(status).cards]


@pytest.fixture
def loaded(pipeline_payload) -> BoardState:
    snapshot = PipelineSnapshot.from_dict(
        pipeline_payload({"NEW": ["a1", "a2"], "CONTACTED": ["a3"]})["data"]
    )
    return reduce(BoardState(job_id="job-1"), Loaded(snapshot))


def test_snapshot_from_dict(pipeline_payload):
    snapshot = PipelineSnapshot.from_dict(pipeline_payload({"QUALIFIED": ["a1"]})["data"])

    assert snapshot.job.title == "Backend Engineer"
    assert snapshot.total_applications == 1
    assert snapshot.can_edit is True
    assert [c.status for c in snapshot.columns] == STATUS_ORDER
    card = snapshot.columns[2].cards[0]
    assert card.status == QUALIFIED
    assert card.tags == ("python",)
    assert card.created_at.year == 2024


def test_snapshot_fills_missing_columns():
    snapshot = PipelineSnapshot.from_dict({
        "job": {"id": "job-1", "title": "T"},
        "columns": [{"status": "PLACED", "applications": [
            {"id": "a1", "candidate_name": "Ann", "status": "PLACED"},
        ]}],
    })

    assert [c.status for c in snapshot.columns] == STATUS_ORDER
    assert snapshot.columns[3].label == "Placed"
    assert snapshot.total_applications == 1
    assert snapshot.can_edit is False


def test_loaded(loaded):
    assert loaded.loaded is True
    assert loaded.load_error is None
    assert loaded.job_title == "Backend Engineer"
    assert loaded.can_edit is True
    assert loaded.total == 3
    assert ids(loaded, NEW) == ["a1", "a2"]


def test_load_failed_clears_columns(loaded):
    state = reduce(loaded, LoadFailed("boom"))
    assert state.columns == ()
    assert state.loaded is False
    assert state.load_error == "boom"


def test_move_start_prepends_to_target(loaded):
    state = reduce(loaded, MoveStart("a2", NEW, CONTACTED))

    assert ids(state, NEW) == ["a1"]
    assert ids(state, CONTACTED) == ["a2", "a3"]
    assert state.column(CONTACTED).cards[0].status == CONTACTED
    assert state.is_updating("a2")
    assert state.total == loaded.total
    # the previous state is untouched
    assert ids(loaded, NEW) == ["a1", "a2"]
    assert not loaded.is_updating("a2")


def test_move_start_same_status_is_noop(loaded):
    assert reduce(loaded, MoveStart("a1", NEW, NEW)) is loaded


def test_move_card_not_in_source_column(loaded):
    assert move_card(loaded.columns, "a3", NEW, QUALIFIED) is loaded.columns
    assert move_card(loaded.columns, "missing", NEW, QUALIFIED) is loaded.columns


def test_move_success_clears_updating(loaded):
    moving = reduce(loaded, MoveStart("a1", NEW, QUALIFIED))
    state = reduce(moving, MoveSuccess("a1"))
    assert not state.is_updating("a1")
    assert ids(state, QUALIFIED) == ["a1"]


def test_move_failure_restores_columns(loaded):
    moving = reduce(loaded, MoveStart("a1", NEW, QUALIFIED))
    state = reduce(moving, MoveFailure("a1", loaded.columns))
    assert state.columns == loaded.columns
    assert not state.is_updating("a1")


def test_selection(loaded):
    # toggling outside selection mode does nothing
    assert reduce(loaded, SelectionToggled("a1")).selected == frozenset()

    state = reduce(loaded, SelectionModeChanged(True))
    state = reduce(state, SelectionToggled("a1"))
    state = reduce(state, SelectionToggled("a3"))
    assert state.selected == {"a1", "a3"}

    state = reduce(state, SelectionToggled("a1"))
    assert state.selected == {"a3"}

    cleared = reduce(state, SelectionCleared())
    assert cleared.selected == frozenset()
    assert cleared.selection_mode is False

    left = reduce(state, SelectionModeChanged(False))
    assert left.selected == frozenset()


def test_unknown_action(loaded):
    with pytest.raises(TypeError):
        reduce(loaded, object())


def test_column_find():
    card = Card(id="a1", candidate_name="Ann", status=NEW)
    column = Column(status=NEW, label="New", cards=(card,))
    assert column.count == 1
    assert column.find("a1") is card
    assert column.find("a2") is None


def test_transition_table():
    # permissive by default, backwards moves included
    assert can_transition("PLACED", "NEW") is True
    assert can_transition("NEW", "NEW") is False

    assert can_transition("NEW", "REJECTED", strict=True) is True
    assert can_transition("QUALIFIED", "REJECTED", strict=True) is True
    assert can_transition("NEW", "CONTACTED", strict=True) is True
    assert can_transition("NEW", "QUALIFIED", strict=True) is False
    assert can_transition("PLACED", "NEW", strict=True) is False
    assert can_transition("REJECTED", "NEW", strict=True) is False
