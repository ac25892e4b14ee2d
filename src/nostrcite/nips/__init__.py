"""Nostr Implementation Possibilities -- reference extraction and contact lists.

The NIPs layer sits in the middle of the diamond DAG, depending on
[nostrcite.models][nostrcite.models] and [nostrcite.utils][nostrcite.utils].
It performs no I/O.

Warning:
    Decoding functions **never raise** for malformed input found inside an
    event. Bad tokens, out-of-range ``#[n]`` indices and invalid keys are
    skipped (and, for contact lists, logged as warnings).

Attributes:
    NoteReferences: NIP-27 resolver for mentions, reply targets and inline
        citations, reconciling ``#[n]`` backreferences (NIP-08) and NIP-19
        entities (NIP-21) with the tag list.
    ContactList: NIP-02 follow list and relay preference decoder/builder.
    Contact: Followed public key with optional relay hint.
    ReadWrite: Relay read/write preference.
    UserReference, NoteReference, AddressReference: Decoded NIP-19
        entities.
"""

from nostrcite.nips.nip02 import Contact, ContactList, ReadWrite, RelayPreferences
from nostrcite.nips.nip19 import AddressReference, NoteReference, Reference, UserReference
from nostrcite.nips.nip21 import Nip21Token
from nostrcite.nips.nip27 import NoteReferences


__all__ = [
    "AddressReference",
    "Contact",
    "ContactList",
    "Nip21Token",
    "NoteReference",
    "NoteReferences",
    "ReadWrite",
    "Reference",
    "RelayPreferences",
    "UserReference",
]
