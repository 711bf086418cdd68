"""NonceProvider protocol: token binding depends on this, not the concrete implementation."""

from typing import Protocol


class NonceProvider(Protocol):
    def create_binding(self, action: str) -> str: ...

    def verify_binding(self, action: str, nonce: str) -> bool: ...
