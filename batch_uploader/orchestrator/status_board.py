"""Shared collection of upload statuses, updated by id."""
from typing import Callable, Dict, Iterable, List, Optional
import asyncio
import logging

from ..models import UploadStatus
from ..utils.events import EventEmitter
logger = logging.getLogger(__name__)

STATUS_EVENT = "status"
RESET_EVENT = "reset"


class StatusBoard:
    """
    The one piece of shared mutable state in a batch.

    Every group operation reports through ``update``, which replaces the
    record carrying the same id under a lock. Records are kept in the order
    they were seeded; nothing is ever appended by an update.

    Usage:
        board = StatusBoard()
        board.on_status(lambda status: print(status.id, status.status.value))
        board.reset(initial_statuses)
        await board.update(next_status)
    """

    def __init__(self):
        self._statuses: List[UploadStatus] = []
        self._index: Dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._events = EventEmitter()

    def on_status(self, callback: Callable[[UploadStatus], None]):
        """Called after every applied update. Receives the new UploadStatus."""
        self._events.on(STATUS_EVENT, callback)

    def off_status(self, callback: Callable[[UploadStatus], None]):
        self._events.off(STATUS_EVENT, callback)

    def on_reset(self, callback: Callable[[List[UploadStatus]], None]):
        """Called when a new batch is seeded. Receives the initial list."""
        self._events.on(RESET_EVENT, callback)

    def reset(self, statuses: Iterable[UploadStatus]) -> None:
        """Replace the whole collection, e.g. at the start of a new batch."""
        self._statuses = list(statuses)
        self._index = {}
        for position, status in enumerate(self._statuses):
            if status.id in self._index:
                raise ValueError(f"Duplicate status id: {status.id!r}")
            self._index[status.id] = position

    async def seed(self, statuses: Iterable[UploadStatus]) -> None:
        """Reset the collection and tell listeners about the new batch."""
        self.reset(statuses)
        await self._events.emit(RESET_EVENT, self.snapshot())

    async def update(self, status: UploadStatus) -> bool:
        """
        Replace the record with ``status.id``.

        Returns:
            True if the collection changed. Replaying an identical record,
            an unknown id or an attempt to leave a terminal state is ignored.
        """
        async with self._lock:
            position = self._index.get(status.id)
            if position is None:
                logger.warning(f"Ignoring update for unknown status id {status.id!r}")
                return False

            current = self._statuses[position]
            if current == status:
                return False
            if current.is_terminal:
                logger.warning(
                    f"Ignoring {status.status.value} update for {status.id!r}: "
                    f"already {current.status.value}"
                )
                return False

            self._statuses[position] = status

        logger.debug(f"{status.id}: {current.status.value} -> {status.status.value}")
        await self._events.emit(STATUS_EVENT, status)
        return True

    async def announce(self, status: UploadStatus) -> None:
        """Notify listeners about a seeded record without changing it."""
        await self._events.emit(STATUS_EVENT, status)

    def get(self, status_id: str) -> Optional[UploadStatus]:
        position = self._index.get(status_id)
        return None if position is None else self._statuses[position]

    def snapshot(self) -> List[UploadStatus]:
        return list(self._statuses)

    def __len__(self) -> int:
        return len(self._statuses)

    @property
    def all_settled(self) -> bool:
        return all(s.is_terminal for s in self._statuses)
