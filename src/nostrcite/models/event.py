"""
Immutable Nostr event value type.

Holds the seven NIP-01 fields as plain Python values so the reference
resolver and the contact list decoder can work on tags and content without
going through the ``nostr_sdk`` FFI layer. Conversion helpers cover the
NIP-01 JSON wire form and ``nostr_sdk.Event`` instances.

See Also:
    [nostrcite.models.tags.TagIndex][]: Lookup view built lazily from
        [Event.tags][nostrcite.models.event.Event].
    [nostrcite.nips.nip27.NoteReferences][]: Reference resolver consuming
        events.
    [nostrcite.nips.nip02.ContactList][]: Contact list decoder consuming
        kind 3 events.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ._validation import freeze_tags, validate_instance, validate_int_range, validate_timestamp
from .constants import EVENT_KIND_MAX
from .tags import Tag, TagIndex


if TYPE_CHECKING:
    from collections.abc import Mapping

    from nostr_sdk import Event as NostrEvent


_WIRE_FIELDS = ("id", "pubkey", "created_at", "kind", "tags", "content", "sig")


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable signed Nostr event.

    Tags are normalized to a tuple of tuples during construction, which
    freezes their order: positional ``#[n]`` backreferences in ``content``
    point at tags by index.

    Args:
        id: Event id (hex SHA-256 of the serialized event).
        pubkey: Author public key (hex).
        created_at: Unix timestamp in seconds.
        kind: Integer event kind.
        tags: Ordered tag list; each tag is a sequence of strings.
        content: Text body, possibly empty.
        sig: Schnorr signature (hex).

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If ``created_at`` is negative or ``kind`` is out of range.

    Note:
        Signatures and ids are not verified. Events built by
        [ContactList.build()][nostrcite.nips.nip02.ContactList.build] are
        signed by ``nostr_sdk``; events read from the wire are taken as is.

    Examples:
        ```python
        event = Event.from_json(raw)
        event.tag_index.values_where("e")
        event.to_dict()["tags"]  # lists again, ready for json.dumps
        ```
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[Tag, ...]
    content: str
    sig: str
    _tag_index: TagIndex = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
        hash=False,  # type: ignore[assignment]
    )

    def __post_init__(self) -> None:
        validate_instance(self.id, str, "id")
        validate_instance(self.pubkey, str, "pubkey")
        validate_timestamp(self.created_at, "created_at")
        validate_int_range(self.kind, "kind", 0, EVENT_KIND_MAX)
        validate_instance(self.content, str, "content")
        validate_instance(self.sig, str, "sig")
        object.__setattr__(self, "tags", freeze_tags(self.tags, "tags"))

    @property
    def tag_index(self) -> TagIndex:
        """Lookup view over ``tags``, built on first access.

        Concurrent first accesses may each build an index; they are equal
        and the last one stored wins.
        """
        index = self._tag_index
        if index is None:
            index = TagIndex(self.tags)
            object.__setattr__(self, "_tag_index", index)
        return index

    def to_dict(self) -> dict[str, Any]:
        """Return the NIP-01 wire representation as a dict."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    def to_json(self) -> str:
        """Serialize to a NIP-01 JSON object string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an event from a NIP-01 wire dict.

        Raises:
            ValueError: If a required field is missing.
            TypeError: If a field has the wrong type.
        """
        missing = [name for name in _WIRE_FIELDS if name not in data]
        if missing:
            raise ValueError(f"event is missing fields: {', '.join(missing)}")
        return cls(**{name: data[name] for name in _WIRE_FIELDS})

    @classmethod
    def from_json(cls, raw: str) -> Event:
        """Parse a NIP-01 JSON object string.

        Raises:
            ValueError: If *raw* is not a JSON object or lacks required fields.
            TypeError: If a field has the wrong type.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"event JSON must be an object, got {type(data).__name__}")
        return cls.from_dict(data)

    @classmethod
    def from_nostr_event(cls, nostr_event: NostrEvent) -> Event:
        """Copy the fields of a ``nostr_sdk.Event`` into an [Event][nostrcite.models.event.Event]."""
        return cls(
            id=nostr_event.id().to_hex(),
            pubkey=nostr_event.author().to_hex(),
            created_at=nostr_event.created_at().as_secs(),
            kind=nostr_event.kind().as_u16(),
            tags=[list(tag.as_vec()) for tag in nostr_event.tags().to_vec()],
            content=nostr_event.content(),
            sig=nostr_event.signature(),
        )
