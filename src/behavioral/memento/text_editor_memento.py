from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from behavioral.memento.history_manager import HistoryManager, NoHistoryError

__all__ = [
    "Originator",
    "TextEditorMemento",
    "TextEditor",
    "EditingSession",
    "NoHistoryError",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: text_editor_memento
# Purpose: Memento pattern over a text editor: the editor captures and restores
#          its own state, the session (caretaker) keeps the snapshots in a
#          HistoryManager without looking inside them.
# ==========================


class Originator(ABC):
    """
    Stateful object able to snapshot itself and roll back to a snapshot.
    """

    @abstractmethod
    def create_memento(self) -> Any:
        """
        Captures the complete current state.

        :return: An immutable snapshot value.
        """

    @abstractmethod
    def restore_from_memento(self, memento: Any) -> None:
        """
        Replaces the current state with the one captured in `memento`.

        :param memento: A value previously returned by create_memento().
        """


@dataclass(frozen=True)
class TextEditorMemento:
    """
    Snapshot of a TextEditor.

    :param text: Full buffer contents.
    :param cursor: Cursor offset into `text`.
    """
    text: str
    cursor: int


class TextEditor(Originator):
    """
    Minimal text buffer with a cursor.

    :param text: Initial contents; the cursor starts at the end.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_text(self, text: str) -> None:
        """
        Replaces the whole buffer and moves the cursor to its end.

        :param text: New contents.
        """
        self._text = text
        self._cursor = len(text)

    def insert(self, s: str) -> None:
        """
        Inserts `s` at the cursor; the cursor ends up just after the inserted text.

        :param s: Text to insert; empty is a no-op.
        """
        self._text = self._text[: self._cursor] + s + self._text[self._cursor:]
        self._cursor += len(s)

    def delete(self, count: int) -> str:
        """
        Deletes up to `count` characters to the right of the cursor.

        Fewer are removed near the end of the buffer. The cursor does not move.

        :param count: Number of characters to delete.
        :return: The deleted substring.
        :raises ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        deleted = self._text[self._cursor: self._cursor + count]
        self._text = self._text[: self._cursor] + self._text[self._cursor + count:]
        return deleted

    def move_cursor(self, pos: int) -> int:
        """
        Moves the cursor to `pos`.

        Out-of-range targets are clamped to [0, len(text)] rather than rejected.

        :param pos: Target position, may be negative or past the end.
        :return: Previous cursor position.
        """
        prev = self._cursor
        self._cursor = max(0, min(pos, len(self._text)))
        return prev

    def create_memento(self) -> TextEditorMemento:
        return TextEditorMemento(text=self._text, cursor=self._cursor)

    def restore_from_memento(self, memento: Any) -> None:
        if not isinstance(memento, TextEditorMemento):
            raise TypeError(f"Expected TextEditorMemento, got {type(memento).__name__}")
        self._text = memento.text
        self._cursor = memento.cursor


class EditingSession:
    """
    Caretaker: decides when to snapshot an originator and when to roll it back.

    The initial state is saved on construction so the first edit can be undone.

    :param originator: Object being edited.
    :param history: History to keep snapshots in; a fresh unbounded one by default.
    :param logger: Logger shared with the default history; defaults to the module logger.
    """

    def __init__(self, originator: Originator, history: Optional[HistoryManager] = None,
                 logger: logging.Logger = logger) -> None:
        self._originator = originator
        self._log = logger
        self._history = history if history is not None else HistoryManager(logger=logger)
        self.checkpoint()

    @property
    def originator(self) -> Originator:
        return self._originator

    @property
    def history(self) -> HistoryManager:
        return self._history

    def edit(self, action: Callable[[Originator], Any]) -> Any:
        """
        Applies `action` to the originator and records the resulting state.

        If the action raises, nothing is recorded and the error propagates.

        :param action: Callable receiving the originator.
        :return: Whatever the action returned.
        """
        result = action(self._originator)
        self.checkpoint()
        return result

    def checkpoint(self) -> None:
        """Records the originator's current state without editing it."""
        self._history.save(self._originator.create_memento())

    def undo(self) -> Any:
        """
        Rolls the originator back one step.

        :return: The memento that was restored.
        :raises NoHistoryError: If there is nothing to undo; the originator is untouched.
        :raises TypeError: If the originator rejects the memento; the cursor is moved back.
        """
        memento = self._history.undo()
        try:
            self._originator.restore_from_memento(memento)
        except Exception:
            self._history.redo()
            raise
        self._log.debug("Restored previous state (position %d)", self._history.position)
        return memento

    def redo(self) -> Any:
        """
        Reapplies the step most recently undone.

        :return: The memento that was restored.
        :raises NoHistoryError: If there is nothing to redo; the originator is untouched.
        :raises TypeError: If the originator rejects the memento; the cursor is moved back.
        """
        memento = self._history.redo()
        try:
            self._originator.restore_from_memento(memento)
        except Exception:
            self._history.undo()
            raise
        self._log.debug("Restored next state (position %d)", self._history.position)
        return memento

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def reset(self) -> None:
        """Forgets all history, keeping the current state as the new baseline."""
        self._history.clear()
        self.checkpoint()
        self._log.info("History reset")
