"""
In-memory entity repositories.

Persons and missions live for the process lifetime only. Repositories
hand out snapshots; callers replace entities with `put` after computing
updated copies, or with `update` when the copy must be computed from the
stored entity without interleaving writers.
"""
from typing import Callable, ContextManager, Dict, Generic, List, Optional, TypeVar
import threading

from mission_risk.core.errors import NotFound

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """
    Thread-safe dict-backed repository keyed by entity id.

    Args:
        kind: Entity kind used in NotFound messages (e.g. "Mission")
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()

    def get(self, item_id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(item_id)

    def get_or_raise(self, item_id: str) -> T:
        """
        Get an entity by id.

        Raises:
            NotFound: If no entity has this id
        """
        item = self.get(item_id)
        if item is None:
            raise NotFound(self.kind, item_id)
        return item

    def list(self) -> List[T]:
        """All entities in insertion order."""
        with self._lock:
            return list(self._items.values())

    def put(self, item: T) -> T:
        with self._lock:
            self._items[item.id] = item
        return item

    def update(self, item_id: str, fn: Callable[[T], T]) -> T:
        """
        Replace an entity with `fn(current)` atomically.

        `fn` runs under the repository lock against the stored entity, so
        no other writer can interleave between the read and the write.
        Exceptions raised by `fn` propagate and leave the entity unchanged.

        Args:
            item_id: Entity id
            fn: Callable taking the current entity and returning its replacement

        Returns:
            The stored replacement

        Raises:
            NotFound: If no entity has this id
        """
        with self._lock:
            current = self._items.get(item_id)
            if current is None:
                raise NotFound(self.kind, item_id)
            updated = fn(current)
            self._items[item_id] = updated
        return updated

    def locked(self) -> ContextManager:
        """Hold the repository lock across several reads and writes."""
        return self._lock

    def delete(self, item_id: str) -> T:
        """
        Remove an entity.

        Raises:
            NotFound: If no entity has this id
        """
        with self._lock:
            if item_id not in self._items:
                raise NotFound(self.kind, item_id)
            return self._items.pop(item_id)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
