"""NIP-19 bech32-encoded entities.

Decodes the portable identifiers that can be embedded in event content
(``npub``, ``nprofile``, ``note``, ``nevent``, ``naddr``) into a closed set of
reference types, and encodes them back. Decoding **never raises**: malformed
input yields ``None``.

Bech32 primitives come from the ``bech32`` package. Its ``bech32_decode``
enforces the BIP-173 90 character limit, which TLV entities with relay hints
routinely exceed, so the checksum is verified with ``bech32_verify_checksum``
directly.

TLV layout (type, length, value):

```text
0  special   npub of nprofile, event id of nevent, d-tag of naddr
1  relay     ascii relay URL, repeatable
2  author    32-byte pubkey (nevent, naddr)
3  kind      32-bit big-endian unsigned integer (nevent, naddr)
```

See Also:
    [nostrcite.nips.nip21][]: Lexer that finds NIP-19 tokens in content.
    [nostrcite.nips.nip27][]: Resolver that matches decoded references
        against event tags.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from bech32 import CHARSET, bech32_encode, bech32_verify_checksum, convertbits

from nostrcite.models.address import Address
from nostrcite.models.constants import Nip19Prefix


logger = logging.getLogger(__name__)

_KEY_SIZE = 32
_KIND_SIZE = 4
_CHECKSUM_SIZE = 6
_TLV_MAX_LENGTH = 255

_TLV_SPECIAL = 0
_TLV_RELAY = 1
_TLV_AUTHOR = 2
_TLV_KIND = 3


class _InvalidEntityError(ValueError):
    """Raised internally for malformed entities; never escapes this module."""


# =============================================================================
# Reference Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class UserReference:
    """Decoded ``npub`` or ``nprofile``."""

    hex: str
    relays: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class NoteReference:
    """Decoded ``note`` or ``nevent``.

    ``author`` and ``kind`` are optional hints carried by ``nevent``.
    """

    hex: str
    relays: tuple[str, ...] = ()
    author: str | None = None
    kind: int | None = None


@dataclass(frozen=True, slots=True)
class AddressReference:
    """Decoded ``naddr``.

    Its ``hex`` is the canonical ``kind:pubkey:d-tag`` string, which is
    the value ``a`` tags carry.
    """

    address: Address
    relays: tuple[str, ...] = ()

    @property
    def hex(self) -> str:
        return self.address.to_tag()


Reference = UserReference | NoteReference | AddressReference


# =============================================================================
# Decoding
# =============================================================================


def _bech32_payload(prefix: str, data: str) -> bytes:
    """Verify the checksum of ``prefix1data`` and return the 8-bit payload."""
    if data.lower() != data and data.upper() != data:
        raise _InvalidEntityError("mixed case")
    data = data.lower()
    if len(data) < _CHECKSUM_SIZE or any(c not in CHARSET for c in data):
        raise _InvalidEntityError("invalid data part")
    values = [CHARSET.find(c) for c in data]
    if not bech32_verify_checksum(prefix, values):
        raise _InvalidEntityError("bad checksum")
    decoded = convertbits(values[:-_CHECKSUM_SIZE], 5, 8, False)
    if decoded is None:
        raise _InvalidEntityError("invalid padding")
    return bytes(decoded)


def _parse_tlv(payload: bytes) -> dict[int, list[bytes]]:
    entries: dict[int, list[bytes]] = {}
    i = 0
    while i < len(payload):
        if i + 2 > len(payload):
            raise _InvalidEntityError("truncated TLV header")
        t, length = payload[i], payload[i + 1]
        value = payload[i + 2 : i + 2 + length]
        if len(value) != length:
            raise _InvalidEntityError("truncated TLV value")
        entries.setdefault(t, []).append(value)
        i += 2 + length
    return entries


def _key_hex(value: bytes, what: str) -> str:
    if len(value) != _KEY_SIZE:
        raise _InvalidEntityError(f"{what} must be {_KEY_SIZE} bytes, got {len(value)}")
    return value.hex()


def _relays(entries: dict[int, list[bytes]]) -> tuple[str, ...]:
    try:
        return tuple(v.decode("ascii") for v in entries.get(_TLV_RELAY, []))
    except UnicodeDecodeError as e:
        raise _InvalidEntityError("relay is not ascii") from e


def _first(entries: dict[int, list[bytes]], t: int) -> bytes | None:
    values = entries.get(t)
    return values[0] if values else None


def _kind(entries: dict[int, list[bytes]]) -> int | None:
    value = _first(entries, _TLV_KIND)
    if value is None:
        return None
    if len(value) != _KIND_SIZE:
        raise _InvalidEntityError(f"kind must be {_KIND_SIZE} bytes, got {len(value)}")
    return int.from_bytes(value, "big")


def _decode_npub(payload: bytes) -> UserReference:
    return UserReference(_key_hex(payload, "pubkey"))


def _decode_note(payload: bytes) -> NoteReference:
    return NoteReference(_key_hex(payload, "event id"))


def _decode_nprofile(payload: bytes) -> UserReference:
    entries = _parse_tlv(payload)
    special = _first(entries, _TLV_SPECIAL)
    if special is None:
        raise _InvalidEntityError("nprofile without pubkey")
    return UserReference(_key_hex(special, "pubkey"), _relays(entries))


def _decode_nevent(payload: bytes) -> NoteReference:
    entries = _parse_tlv(payload)
    special = _first(entries, _TLV_SPECIAL)
    if special is None:
        raise _InvalidEntityError("nevent without event id")
    author = _first(entries, _TLV_AUTHOR)
    return NoteReference(
        _key_hex(special, "event id"),
        _relays(entries),
        author=_key_hex(author, "author") if author is not None else None,
        kind=_kind(entries),
    )


def _decode_naddr(payload: bytes) -> AddressReference:
    entries = _parse_tlv(payload)
    special = _first(entries, _TLV_SPECIAL)
    author = _first(entries, _TLV_AUTHOR)
    kind = _kind(entries)
    if special is None or author is None or kind is None:
        raise _InvalidEntityError("naddr requires identifier, author and kind")
    try:
        d_tag = special.decode("utf-8")
        address = Address(kind, _key_hex(author, "author"), d_tag)
    except (UnicodeDecodeError, ValueError, TypeError) as e:
        raise _InvalidEntityError(str(e)) from e
    return AddressReference(address, _relays(entries))


_DECODERS = {
    Nip19Prefix.NPUB: _decode_npub,
    Nip19Prefix.NOTE: _decode_note,
    Nip19Prefix.NPROFILE: _decode_nprofile,
    Nip19Prefix.NEVENT: _decode_nevent,
    Nip19Prefix.NADDR: _decode_naddr,
}


def decode(prefix: str, data: str) -> Reference | None:
    """Decode the entity ``<prefix>1<data>``.

    Args:
        prefix: Human-readable part without the ``1`` separator
            (e.g. ``"npub"``); case-insensitive.
        data: Bech32 data part including the 6-character checksum.

    Returns:
        The decoded reference, or ``None`` when the entity is malformed, is
        an ``nsec``/``nrelay``, or has an unknown prefix.
    """
    prefix = prefix.lower()
    decoder = _DECODERS.get(prefix)  # type: ignore[call-overload]
    if decoder is None:
        return None
    try:
        return decoder(_bech32_payload(prefix, data))
    except _InvalidEntityError as e:
        logger.debug("nip19_decode_failed prefix=%s error=%s", prefix, e)
        return None


def decode_bech32(text: str) -> Reference | None:
    """Decode a complete entity string such as ``npub1...``; ``None`` on failure."""
    pos = text.rfind("1")
    if pos < 1:
        return None
    return decode(text[:pos], text[pos + 1 :])


# =============================================================================
# Encoding
# =============================================================================


def _encode(prefix: Nip19Prefix, payload: bytes) -> str:
    return bech32_encode(prefix.value, convertbits(payload, 8, 5))


def _tlv(t: int, value: bytes) -> bytes:
    if len(value) > _TLV_MAX_LENGTH:
        raise ValueError(f"TLV value too long ({len(value)} bytes)")
    return bytes([t, len(value)]) + value


def _key_bytes(value: str, name: str) -> bytes:
    raw = bytes.fromhex(value)
    if len(raw) != _KEY_SIZE:
        raise ValueError(f"{name} must be {_KEY_SIZE} bytes of hex")
    return raw


def encode_npub(pubkey: str) -> str:
    """Encode a hex public key as ``npub1...``."""
    return _encode(Nip19Prefix.NPUB, _key_bytes(pubkey, "pubkey"))


def encode_note(event_id: str) -> str:
    """Encode a hex event id as ``note1...``."""
    return _encode(Nip19Prefix.NOTE, _key_bytes(event_id, "event_id"))


def encode_nprofile(pubkey: str, relays: Iterable[str] = ()) -> str:
    """Encode a public key with relay hints as ``nprofile1...``."""
    payload = _tlv(_TLV_SPECIAL, _key_bytes(pubkey, "pubkey"))
    payload += b"".join(_tlv(_TLV_RELAY, r.encode("ascii")) for r in relays)
    return _encode(Nip19Prefix.NPROFILE, payload)


def encode_nevent(
    event_id: str,
    relays: Iterable[str] = (),
    *,
    author: str | None = None,
    kind: int | None = None,
) -> str:
    """Encode an event id with optional hints as ``nevent1...``."""
    payload = _tlv(_TLV_SPECIAL, _key_bytes(event_id, "event_id"))
    payload += b"".join(_tlv(_TLV_RELAY, r.encode("ascii")) for r in relays)
    if author is not None:
        payload += _tlv(_TLV_AUTHOR, _key_bytes(author, "author"))
    if kind is not None:
        payload += _tlv(_TLV_KIND, kind.to_bytes(_KIND_SIZE, "big"))
    return _encode(Nip19Prefix.NEVENT, payload)


def encode_naddr(address: Address, relays: Iterable[str] = ()) -> str:
    """Encode an [Address][nostrcite.models.address.Address] as ``naddr1...``."""
    payload = _tlv(_TLV_SPECIAL, address.d_tag.encode("utf-8"))
    payload += b"".join(_tlv(_TLV_RELAY, r.encode("ascii")) for r in relays)
    payload += _tlv(_TLV_AUTHOR, _key_bytes(address.pubkey, "pubkey"))
    payload += _tlv(_TLV_KIND, address.kind.to_bytes(_KIND_SIZE, "big"))
    return _encode(Nip19Prefix.NADDR, payload)


__all__ = [
    "AddressReference",
    "NoteReference",
    "Reference",
    "UserReference",
    "decode",
    "decode_bech32",
    "encode_naddr",
    "encode_nevent",
    "encode_note",
    "encode_nprofile",
    "encode_npub",
]
