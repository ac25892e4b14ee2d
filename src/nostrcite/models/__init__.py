"""Pure frozen dataclasses with zero I/O for Nostr events and tags.

The models layer is the foundation of the diamond DAG. It has **no
dependencies** on any other nostrcite package and only imports
``nostr_sdk`` for type checking. Every model uses
``@dataclass(frozen=True, slots=True)``; computed fields are set with
``object.__setattr__`` in ``__post_init__`` or on first access.

Attributes:
    Event: Immutable NIP-01 event with a lazily built tag index.
    TagIndex: Positional, by-marker, and reverse lookups over a tag list.
    Address: ``kind:pubkey:d-tag`` coordinate of an addressable event.
    EventKind: Well-known event kinds.
    TagMarker: Reference-carrying tag markers (``p``, ``e``, ``a``).
    Nip19Prefix: Human-readable prefixes of NIP-19 entities.

See Also:
    [nostrcite.nips][]: Protocol logic built on these models.
"""

from .address import Address
from .constants import EVENT_KIND_MAX, EventKind, Nip19Prefix, TagMarker
from .event import Event
from .tags import Tag, TagIndex


__all__ = [
    "EVENT_KIND_MAX",
    "Address",
    "Event",
    "EventKind",
    "Nip19Prefix",
    "Tag",
    "TagIndex",
    "TagMarker",
]
