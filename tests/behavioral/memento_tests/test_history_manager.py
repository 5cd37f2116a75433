import logging

import pytest
from behavioral.memento.history_manager import HistoryManager, HistoryPolicy, HistoryState, NoHistoryError


def test_fresh_history_is_empty():
    h = HistoryManager()
    assert h.current() is None
    assert h.position == -1
    assert len(h) == 0
    assert h.state is HistoryState.EMPTY


def test_current_is_last_saved_and_undo_walks_back_to_oldest():
    h = HistoryManager()
    for s in ["s1", "s2", "s3", "s4"]:
        h.save(s)
    assert h.current() == "s4"
    assert [h.undo() for _ in range(3)] == ["s3", "s2", "s1"]
    with pytest.raises(NoHistoryError, match="nothing to undo"):
        h.undo()
    assert h.current() == "s1"


def test_undo_then_redo_restores_current():
    h = HistoryManager()
    h.save("A")
    h.save("B")
    h.undo()
    assert h.redo() == "B"
    assert h.current() == "B"


def test_save_after_undo_discards_redo_branch():
    h = HistoryManager()
    h.save("A")
    h.save("B")
    h.save("C")
    h.undo()
    h.undo()
    h.save("X")
    assert h.snapshots() == ("A", "X")
    with pytest.raises(NoHistoryError, match="nothing to redo"):
        h.redo()


def test_clear_resets_everything():
    h = HistoryManager()
    h.save("A")
    h.save("B")
    h.undo()
    h.clear()
    assert h.current() is None
    assert h.position == -1
    with pytest.raises(NoHistoryError):
        h.undo()
    with pytest.raises(NoHistoryError):
        h.redo()


def test_undo_on_empty_history_leaves_it_empty():
    h = HistoryManager()
    with pytest.raises(NoHistoryError):
        h.undo()
    assert h.position == -1
    assert h.snapshots() == ()


def test_redo_blocked_at_newest_keeps_cursor():
    h = HistoryManager()
    h.save("A")
    with pytest.raises(NoHistoryError):
        h.redo()
    assert h.position == 0


def test_editor_scenario():
    h = HistoryManager()
    h.save("A")
    h.save("B")
    h.save("C")
    assert h.undo() == "B"
    assert h.undo() == "A"
    with pytest.raises(NoHistoryError):
        h.undo()
    assert h.redo() == "B"
    h.save("D")
    with pytest.raises(NoHistoryError):
        h.redo()
    assert h.current() == "D"


def test_none_snapshot_is_rejected():
    h = HistoryManager()
    h.save("A")
    with pytest.raises(ValueError):
        h.save(None)
    assert h.snapshots() == ("A",)


def test_snapshots_are_returned_untouched():
    h = HistoryManager()
    payload = {"text": "hi"}
    h.save(payload)
    h.save({"text": "hi there"})
    assert h.undo() is payload


def test_state_reporting():
    h = HistoryManager()
    h.save(1)
    assert h.state is HistoryState.AT_NEWEST
    h.save(2)
    h.save(3)
    h.undo()
    assert h.state is HistoryState.MIDDLE
    h.undo()
    assert h.state is HistoryState.AT_OLDEST
    assert h.can_redo() and not h.can_undo()
    h.save(4)
    assert h.state is HistoryState.AT_NEWEST


def test_bounded_history_evicts_oldest():
    h = HistoryManager(HistoryPolicy(max_entries=3))
    for s in "ABCDE":
        h.save(s)
    assert h.snapshots() == ("C", "D", "E")
    assert h.position == 2
    assert h.undo() == "D"
    assert h.undo() == "C"
    assert not h.can_undo()


@pytest.mark.parametrize("bad", [0, -2])
def test_policy_rejects_non_positive_bound(bad):
    with pytest.raises(ValueError):
        HistoryPolicy(max_entries=bad)


def test_injected_logger_receives_messages(caplog):
    log = logging.getLogger("tests.history")
    h = HistoryManager(HistoryPolicy(max_entries=1), logger=log)
    with caplog.at_level(logging.DEBUG, logger="tests.history"):
        h.save("A")
        h.save("B")
    assert any(r.name == "tests.history" and r.levelno == logging.WARNING for r in caplog.records)


def test_default_logger_is_module_logger(caplog):
    h = HistoryManager()
    with caplog.at_level(logging.DEBUG, logger="behavioral.memento.history_manager"):
        h.save("A")
    assert [r.name for r in caplog.records] == ["behavioral.memento.history_manager"]
