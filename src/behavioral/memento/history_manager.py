from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Optional, Tuple

__all__ = [
    "NoHistoryError",
    "HistoryPolicy",
    "HistoryState",
    "HistoryManager",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: history_manager
# Purpose: Caretaker-side storage of opaque snapshots with a cursor,
#          giving linear undo/redo navigation.
# ==========================


class NoHistoryError(IndexError):
    """
    Raised when undo/redo has no snapshot to move to.

    Expected and recoverable: callers typically no-op (e.g. disable an "Undo" button).
    """


@dataclass(frozen=True)
class HistoryPolicy:
    """
    Retention configuration for a HistoryManager.

    :param max_entries: Upper bound on stored snapshots; None keeps everything.
    """
    max_entries: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_entries is not None and self.max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {self.max_entries}")


class HistoryState(Enum):
    """
    Position of the cursor within the history.
    """
    EMPTY = auto()
    AT_OLDEST = auto()
    MIDDLE = auto()
    AT_NEWEST = auto()


class HistoryManager:
    """
    Ordered sequence of snapshots plus a cursor marking the current one.

    Snapshots are opaque: they are stored and returned as-is, never inspected.
    Entries after the cursor are redo candidates and are dropped by the next save().

    :param policy: Optional retention policy (unbounded by default).
    :param logger: Logger to report transitions to; defaults to the module logger.
    """

    def __init__(self, policy: Optional[HistoryPolicy] = None,
                 logger: logging.Logger = logger) -> None:
        self._policy = policy or HistoryPolicy()
        self._log = logger
        self._snapshots: List[Any] = []
        self._position = -1

    @property
    def policy(self) -> HistoryPolicy:
        return self._policy

    @property
    def position(self) -> int:
        """
        :return: Index of the current snapshot, -1 when empty.
        """
        return self._position

    @property
    def state(self) -> HistoryState:
        """
        :return: Where the cursor sits; a single entry reports AT_NEWEST.
        """
        if not self._snapshots:
            return HistoryState.EMPTY
        if self._position == len(self._snapshots) - 1:
            return HistoryState.AT_NEWEST
        if self._position == 0:
            return HistoryState.AT_OLDEST
        return HistoryState.MIDDLE

    def __len__(self) -> int:
        return len(self._snapshots)

    def snapshots(self) -> Tuple[Any, ...]:
        """
        :return: All stored snapshots, oldest first, including redo candidates.
        """
        return tuple(self._snapshots)

    def save(self, snapshot: Any) -> None:
        """
        Records a new snapshot as the current one.

        Any redo candidates after the cursor are discarded first.

        :param snapshot: Opaque state value; must not be None.
        :raises ValueError: If snapshot is None.
        """
        if snapshot is None:
            raise ValueError("snapshot must be defined")

        discarded = len(self._snapshots) - 1 - self._position
        if discarded:
            del self._snapshots[self._position + 1:]
            self._log.debug("Discarded %d redo snapshot(s)", discarded)

        self._snapshots.append(snapshot)
        self._position = len(self._snapshots) - 1
        self._enforce_limit()
        self._log.debug("Saved snapshot at position %d (size %d)",
                        self._position, len(self._snapshots))

    def undo(self) -> Any:
        """
        Steps the cursor back by one.

        :return: The snapshot now current.
        :raises NoHistoryError: If the cursor is at the oldest entry or history is empty.
        """
        if not self.can_undo():
            raise NoHistoryError("nothing to undo")
        self._position -= 1
        self._log.debug("Undo -> position %d", self._position)
        return self._snapshots[self._position]

    def redo(self) -> Any:
        """
        Steps the cursor forward by one.

        :return: The snapshot now current.
        :raises NoHistoryError: If the cursor is at the newest entry or history is empty.
        """
        if not self.can_redo():
            raise NoHistoryError("nothing to redo")
        self._position += 1
        self._log.debug("Redo -> position %d", self._position)
        return self._snapshots[self._position]

    def current(self) -> Optional[Any]:
        """
        :return: The current snapshot, or None if history is empty.
        """
        if self._position < 0:
            return None
        return self._snapshots[self._position]

    def clear(self) -> None:
        """Drops all snapshots and resets the cursor."""
        self._snapshots.clear()
        self._position = -1
        self._log.debug("History cleared")

    def can_undo(self) -> bool:
        return self._position > 0

    def can_redo(self) -> bool:
        return 0 <= self._position < len(self._snapshots) - 1

    def _enforce_limit(self) -> None:
        limit = self._policy.max_entries
        if limit is None or len(self._snapshots) <= limit:
            return
        overflow = len(self._snapshots) - limit
        del self._snapshots[:overflow]
        self._position -= overflow
        self._log.warning("History limit %d reached; evicted %d oldest snapshot(s)",
                          limit, overflow)
