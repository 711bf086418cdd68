"""SlugChecker protocol: the slug service asks this whether a candidate is taken."""

from typing import Protocol


class SlugChecker(Protocol):
    def exists(self, candidate: str, type_: str) -> bool: ...
