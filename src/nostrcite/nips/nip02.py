"""NIP-02 contact lists (kind 3).

A contact list carries the follow set in ``p`` tags
(``["p", <pubkey>, <relay hint>?]``) and, by a widespread client
convention, the author's relay read/write preferences as a JSON object in
``content``:

```json
{"wss://relay.example.com": {"read": true, "write": false}}
```

Decoding is best-effort: an invalid public key drops only that entry, and
unparseable content yields ``None``. Both are reported as warnings on the
module logger and never raised.

See Also:
    [nostrcite.utils.keys.validate_public_key][]: Identity validator used
        for verified follow sets.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nostr_sdk import EventBuilder, Kind, NostrSdkError, Tag, Timestamp
from pydantic import BaseModel, ConfigDict, StrictBool, TypeAdapter, ValidationError

from nostrcite.models.constants import EventKind, TagMarker
from nostrcite.models.event import Event
from nostrcite.utils.keys import validate_public_key


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from nostr_sdk import Keys


logger = logging.getLogger(__name__)


class ReadWrite(BaseModel):
    """Read/write preference for one relay."""

    model_config = ConfigDict(frozen=True)

    read: StrictBool = False
    write: StrictBool = False


RelayPreferences = dict[str, ReadWrite]

_RELAY_PREFERENCES = TypeAdapter(RelayPreferences)


@dataclass(frozen=True, slots=True)
class Contact:
    """A followed public key with an optional relay hint."""

    pubkey: str
    relay_url: str | None = None

    def to_tag(self) -> list[str]:
        """Return the ``p`` tag for this contact (relay hint only if set)."""
        if self.relay_url is not None:
            return [TagMarker.PUBKEY.value, self.pubkey, self.relay_url]
        return [TagMarker.PUBKEY.value, self.pubkey]


@dataclass(frozen=True, slots=True)
class ContactList:
    """Decoder for a kind 3 contact list event.

    Args:
        event: A kind 3 event.

    Raises:
        ValueError: If ``event`` is not of kind 3.

    Examples:
        ```python
        contacts = ContactList(event)
        contacts.followed_identities()            # frozenset of valid hex keys
        contacts.followed_identities(verify=False)  # raw tag values
        contacts.relay_preferences()              # {"wss://...": ReadWrite(...)} or None
        ```
    """

    event: Event
    _verified: frozenset[str] = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
        hash=False,  # type: ignore[assignment]
    )

    def __post_init__(self) -> None:
        if self.event.kind != EventKind.CONTACTS:
            raise ValueError(f"contact list must be kind {EventKind.CONTACTS}, got {self.event.kind}")

    def _pubkey_tags(self) -> tuple[tuple[str, ...], ...]:
        return self.event.tag_index.tags_where(TagMarker.PUBKEY)

    def unverified_follows(self) -> list[str]:
        """Return the raw value of every ``p`` tag, in tag order."""
        return self.event.tag_index.values_where(TagMarker.PUBKEY)

    def verified_follows(self) -> frozenset[str]:
        """Return the normalized hex keys of every valid ``p`` tag (cached)."""
        cached = self._verified
        if cached is not None:
            return cached
        verified: set[str] = set()
        for value in self.unverified_follows():
            try:
                verified.add(validate_public_key(value))
            except NostrSdkError as e:
                logger.warning("follow_invalid pubkey=%s error=%s", value, e)
        result = frozenset(verified)
        object.__setattr__(self, "_verified", result)
        return result

    def followed_identities(self, *, verify: bool = True) -> frozenset[str] | list[str]:
        """Return the follow set.

        Args:
            verify: If True, return a set of validated, normalized hex keys
                and drop invalid entries with a warning. If False, return the
                raw tag values unfiltered, in tag order.
        """
        if verify:
            return self.verified_follows()
        return self.unverified_follows()

    def followed_identities_and_me(self) -> frozenset[str]:
        """Return the verified follow set plus the list's author."""
        return self.verified_follows() | {self.event.pubkey}

    def follows_with_relay_hints(self) -> list[Contact]:
        """Return a [Contact][nostrcite.nips.nip02.Contact] per valid ``p`` tag, in tag order."""
        contacts: list[Contact] = []
        for tag in self._pubkey_tags():
            if len(tag) < 2:  # noqa: PLR2004
                continue
            try:
                pubkey = validate_public_key(tag[1])
            except NostrSdkError as e:
                logger.warning("follow_parse_failed pubkey=%s error=%s", tag[1], e)
                continue
            contacts.append(Contact(pubkey, tag[2] if len(tag) > 2 else None))  # noqa: PLR2004
        return contacts

    def relay_preferences(self) -> RelayPreferences | None:
        """Parse ``content`` as relay preferences.

        Returns:
            The preference map, or ``None`` if ``content`` is empty or is
            not a JSON object of ``{"read": bool, "write": bool}`` values.
        """
        content = self.event.content
        if not content:
            return None
        try:
            return _RELAY_PREFERENCES.validate_json(content)
        except ValidationError as e:
            logger.warning(
                "relay_preferences_parse_failed content=%s errors=%d", content, e.error_count()
            )
            return None

    @staticmethod
    def serialize_relay_preferences(relay_preferences: Mapping[str, ReadWrite] | None) -> str:
        """Serialize preferences as compact JSON, or ``""`` for ``None``.

        Keys keep their insertion order so identical input yields identical
        content.
        """
        if relay_preferences is None:
            return ""
        return json.dumps(
            {url: rw.model_dump() for url, rw in relay_preferences.items()},
            separators=(",", ":"),
        )

    @classmethod
    def build(
        cls,
        follows: Iterable[Contact],
        relay_preferences: Mapping[str, ReadWrite] | None,
        keys: Keys,
        created_at: int | None = None,
    ) -> ContactList:
        """Build and sign a contact list.

        Args:
            follows: Contacts in the order their ``p`` tags should appear.
            relay_preferences: Relay map stored in ``content``, or ``None``
                for empty content.
            keys: Signing keys; the author is ``keys.public_key()``.
            created_at: Unix timestamp; defaults to now.

        Returns:
            The signed contact list. Identical inputs produce identical
            tags, content and event id.
        """
        if created_at is None:
            created_at = int(time.time())
        content = cls.serialize_relay_preferences(relay_preferences)
        tags = [Tag.parse(contact.to_tag()) for contact in follows]
        nostr_event = (
            EventBuilder(Kind(EventKind.CONTACTS), content)
            .tags(tags)
            .custom_created_at(Timestamp.from_secs(created_at))
            .sign_with_keys(keys)
        )
        return cls(Event.from_nostr_event(nostr_event))


__all__ = ["Contact", "ContactList", "ReadWrite", "RelayPreferences"]
