"""Synchronous change-notification channel used by stateful components."""

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ListenerSet(Generic[T]):
    """
    Ordered set of callbacks notified with a single payload.

    A listener that raises is logged and skipped so that a faulty observer
    cannot break the component that owns the state.
    """

    def __init__(self, owner: str):
        self._owner = owner
        self._listeners: List[Callable[[T], None]] = []

    def add(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def _remove() -> None:
            self.remove(listener)

        return _remove

    def remove(self, listener: Callable[[T], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, payload: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:  # policy_guard: allow-silent-handler
                logger.exception("Listener %r for %s failed", listener, self._owner)

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ["ListenerSet"]
