"""Shared constants for the models layer.

Defines enumerations used across the models and nips layers. Placing them
here avoids circular dependencies between the two.

See Also:
    [nostrcite.models.tags][]: Uses [TagMarker][nostrcite.models.constants.TagMarker]
        to group tag entries.
    [nostrcite.nips.nip19][]: Uses [Nip19Prefix][nostrcite.models.constants.Nip19Prefix]
        to dispatch bech32 decoding.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Well-known Nostr event kinds handled by nostrcite.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        TEXT_NOTE: Kind 1 -- short text note (NIP-01).
        CONTACTS: Kind 3 -- contact list with relay hints (NIP-02).
        REPOST: Kind 6 -- repost of a text note (NIP-18).
        REACTION: Kind 7 -- reaction to an event (NIP-25).
        LONG_FORM: Kind 30023 -- long-form article (NIP-23).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1
    CONTACTS = 3
    REPOST = 6
    REACTION = 7
    LONG_FORM = 30_023


class TagMarker(StrEnum):
    """Tag markers (element 0 of a tag) that carry references.

    Attributes:
        PUBKEY: ``p`` -- reference to a user public key.
        EVENT: ``e`` -- reference to an event id.
        ADDRESS: ``a`` -- reference to an addressable event coordinate.
    """

    PUBKEY = "p"
    EVENT = "e"
    ADDRESS = "a"


class Nip19Prefix(StrEnum):
    """Human-readable prefixes of NIP-19 bech32 entities.

    ``nsec`` and ``nrelay`` are recognized by the lexer so that they are
    consumed as whole tokens, but never decode to a reference.
    """

    NSEC = "nsec"
    NPUB = "npub"
    NOTE = "note"
    NPROFILE = "nprofile"
    NEVENT = "nevent"
    NADDR = "naddr"
    NRELAY = "nrelay"


EVENT_KIND_MAX = 65_535
