"""
Registry of child loggers, keyed by any hashable value.
"""

import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .logger import Logger


def child_prefix(key: Any) -> str:
    """The prefix text for a child key: the key itself, its ``__str__``, or ``""``."""
    if isinstance(key, str):
        return key
    if type(key).__str__ is not object.__str__:
        return str(key)
    return ""


class ChildRegistry:
    """
    Insertion-ordered map of child loggers.

    ``get_or_add`` is atomic per key: concurrent calls with the same key
    return the same child.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[Any, "Logger"] = {}
        # Registration order, kept compact on removal.
        self._order: list[Any] = []

    def get_or_add(self, key: Any, parent: "Logger") -> "Logger":
        with self._lock:
            logger = self._items.get(key)
            if logger is not None:
                return logger

            logger = parent.clone()
            logger.set_child_prefix(child_prefix(key))
            self._items[key] = logger
            self._order.append(key)
            return logger

    def get(self, key: Any) -> "Logger | None":
        with self._lock:
            return self._items.get(key)

    def get_by_index(self, index: int) -> "Logger | None":
        with self._lock:
            if 0 <= index < len(self._order):
                return self._items[self._order[index]]
            return None

    def last(self) -> "Logger | None":
        with self._lock:
            if not self._order:
                return None
            return self._items[self._order[-1]]

    def remove(self, key: Any) -> bool:
        with self._lock:
            if key not in self._items:
                return False
            del self._items[key]
            self._order = [k for k in self._order if k != key]
            return True

    def clear(self) -> None:
        with self._lock:
            self._items = {}
            self._order = []

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def keys(self) -> list[Any]:
        """Keys in registration order."""
        with self._lock:
            return list(self._order)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._items
