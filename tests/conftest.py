"""
Pytest configuration and shared fixtures for nostrcite tests.

Provides:
- Real secp256k1 test keys (DO NOT USE IN PRODUCTION)
- An ``make_event`` factory for building events from tags and content
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import pytest
from nostr_sdk import Keys

from nostrcite.models import Event


# ============================================================================
# Test Constants
# ============================================================================

# NIP-19 reference private key (DO NOT USE IN PRODUCTION)
VALID_HEX_KEY = (
    "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"  # pragma: allowlist secret
)

# A real, valid public key (NIP-19 nprofile example)
FIATJAF_PUBKEY = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def keys() -> Keys:
    """Signing keys parsed from the NIP-19 reference private key."""
    return Keys.parse(VALID_HEX_KEY)


@pytest.fixture
def pubkey(keys: Keys) -> str:
    """Hex public key derived from ``keys``."""
    return keys.public_key().to_hex()


@pytest.fixture
def other_pubkey() -> str:
    """A second valid hex public key, unrelated to ``keys``."""
    return FIATJAF_PUBKEY


# ============================================================================
# Event Fixtures
# ============================================================================


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory building an event from tags and content with dummy signature fields."""

    def _make(
        tags: Sequence[Sequence[str]] = (),
        content: str = "",
        *,
        kind: int = 1,
        **overrides: Any,
    ) -> Event:
        fields: dict[str, Any] = {
            "id": "e" * 64,
            "pubkey": "f" * 64,
            "created_at": 1_700_000_000,
            "kind": kind,
            "tags": [list(tag) for tag in tags],
            "content": content,
            "sig": "0" * 128,
        }
        fields.update(overrides)
        return Event(**fields)

    return _make
