"""
Process-wide service providers.

Each provider builds its object from get_settings() on first use and
returns the same instance afterwards. Tests and applications that need
isolation construct the services directly with their own stores.
"""

from __future__ import annotations

from functools import lru_cache

from config import get_settings
from infrastructure.counter.factory import create_counter_store
from infrastructure.counter.protocol import CounterStore
from infrastructure.nonce.hmac_nonce import HmacNonceProvider
from infrastructure.nonce.protocol import NonceProvider
from services.sequence_service import SequenceCounter


@lru_cache(maxsize=1)
def get_counter_store() -> CounterStore:
    """Return the counter store selected by the configured URIs."""
    return create_counter_store(get_settings().counter)


@lru_cache(maxsize=1)
def get_sequence_counter() -> SequenceCounter:
    """Return the SequenceCounter over the process-wide counter store."""
    return SequenceCounter.from_settings(get_counter_store(), get_settings().counter)


@lru_cache(maxsize=1)
def get_nonce_provider() -> NonceProvider:
    """Return the HMAC nonce provider keyed with the process secret."""
    settings = get_settings()
    return HmacNonceProvider(
        settings.secret_key,
        lifetime_seconds=settings.tokens.nonce_lifetime_seconds,
    )


def sequential_id(prefix: str = "", padding: int = 8, context: str = "default") -> str:
    """Issue a sequential ID such as ``INV-00001000`` from the shared counter."""
    return get_sequence_counter().sequential_id(prefix, padding, context)
