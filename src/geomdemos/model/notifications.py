"""Publish/subscribe hub for per-frame time updates."""
from __future__ import annotations

import logging
from typing import Iterator, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Animated(Protocol):
    """Anything that can be advanced by a time step (seconds)."""
    def advance(self, delta: float) -> None: ...


class Subject:
    """
    Fans a single "time advanced by delta" event out to registered objects.

    Delivery is synchronous, on the calling thread, in registration order.
    """
    def __init__(self) -> None:
        # Membership is by identity so unhashable subscribers work too
        self._observers: list[Animated] = []

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, obj: object) -> bool:
        return self._index(obj) is not None

    def __iter__(self) -> Iterator[Animated]:
        return iter(list(self._observers))

    def _index(self, obj: object) -> Optional[int]:
        for i, observer in enumerate(self._observers):
            if observer is obj:
                return i
        return None

    def register(self, obj: Animated) -> None:
        """Subscribe ``obj``; registering twice has no further effect."""
        if not isinstance(obj, Animated):
            raise TypeError(f"{obj!r} has no advance(delta) method.")
        if self._index(obj) is None:
            self._observers.append(obj)
            logger.debug(f"Registered {obj.__class__.__name__} ({len(self._observers)} observers).")

    def unregister(self, obj: Animated) -> None:
        """Unsubscribe ``obj``; no-op if it is not registered."""
        i = self._index(obj)
        if i is not None:
            del self._observers[i]
            logger.debug(f"Unregistered {obj.__class__.__name__} ({len(self._observers)} observers).")

    def notify(self, delta: float) -> None:
        # Snapshot, so observers may (un)register while being notified
        for obj in list(self._observers):
            obj.advance(delta)
