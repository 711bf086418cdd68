"""Set-backed slug checker for tests and small fixed registries."""

from typing import Iterable


class InMemorySlugChecker:
    def __init__(self, taken: Iterable[tuple[str, str]] = ()) -> None:
        self._taken: set[tuple[str, str]] = set(taken)

    def add(self, candidate: str, type_: str) -> None:
        self._taken.add((candidate, type_))

    def exists(self, candidate: str, type_: str) -> bool:
        return (candidate, type_) in self._taken
