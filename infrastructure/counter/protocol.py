"""CounterStore protocol: SequenceCounter depends on this, not the concrete implementation."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CounterStore(Protocol):
    def atomic_increment(self, context: str, start: int) -> int:
        """Return the current value for *context* and persist value + 1.

        A context seen for the first time starts at *start*. Each value is
        handed out exactly once, however many callers race on the context.
        """
        ...


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[int]: ...

    def set(self, key: str, value: int) -> None: ...
