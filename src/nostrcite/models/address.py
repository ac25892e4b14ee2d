"""Coordinates of addressable (parameterized replaceable) events.

An address is written ``<kind>:<pubkey>:<d-tag>`` in ``a`` tags and is the
value an ``naddr`` NIP-19 entity resolves to.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._validation import validate_instance, validate_int_range
from .constants import EVENT_KIND_MAX


@dataclass(frozen=True, slots=True)
class Address:
    """Immutable ``kind:pubkey:d-tag`` coordinate.

    Args:
        kind: Event kind of the addressed event.
        pubkey: Hex public key of the author.
        d_tag: Value of the ``d`` tag; may be empty.
        relay: Optional relay hint carried next to the coordinate.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If ``kind`` is out of range or ``pubkey`` is empty.
    """

    kind: int
    pubkey: str
    d_tag: str = ""
    relay: str | None = None

    def __post_init__(self) -> None:
        validate_int_range(self.kind, "kind", 0, EVENT_KIND_MAX)
        validate_instance(self.pubkey, str, "pubkey")
        validate_instance(self.d_tag, str, "d_tag")
        if not self.pubkey:
            raise ValueError("pubkey must not be empty")

    def to_tag(self) -> str:
        """Render the canonical ``kind:pubkey:d-tag`` string."""
        return f"{self.kind}:{self.pubkey}:{self.d_tag}"

    @classmethod
    def parse(cls, value: str, relay: str | None = None) -> Address | None:
        """Parse an ``a`` tag value, returning ``None`` when it is malformed.

        The d-tag is everything after the second colon and may itself
        contain colons.
        """
        parts = value.split(":", 2)
        if len(parts) < 2:  # noqa: PLR2004
            return None
        kind_str, pubkey = parts[0], parts[1]
        if not (kind_str.isascii() and kind_str.isdigit()):
            return None
        try:
            return cls(int(kind_str), pubkey, parts[2] if len(parts) > 2 else "", relay)  # noqa: PLR2004
        except (TypeError, ValueError):
            return None
