"""
BigRedact - Observable Values

Push-updated values for host UIs (current page index, page count).
A subscriber receives the current value immediately and then every change.
"""

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Holds a value and notifies subscribers whenever it is set."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Store a new value and push it to every subscriber.

        Every assignment is delivered, even when the value did not change.
        """
        self._value = value
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a callback and emit the current value to it.

        Args:
            callback: Function called with each new value

        Returns:
            A function that removes the subscription when called.
        """
        with self._lock:
            self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"ObservableValue({self._value!r})"
