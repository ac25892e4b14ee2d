"""NIP-21 ``nostr:`` URIs and bare NIP-19 entities in text.

The lexer finds every token that looks like a NIP-19 entity, with or
without the ``nostr:`` scheme and an optional leading ``@``. Tokens are
cheap value objects; decoding is deferred to
[Nip21Token.decode()][nostrcite.nips.nip21.Nip21Token.decode] so a scan can
stop early without paying for bech32 checksums.

Grammar (case-insensitive):

```text
(nostr:)?@?(nsec1|npub1|nevent1|naddr1|note1|nprofile1|nrelay1)([bech32 chars]+)(\\S*)
```

The trailing ``\\S*`` group is text glued to the entity, such as
punctuation (``npub1...!``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nostrcite.models.constants import Nip19Prefix

from . import nip19


if TYPE_CHECKING:
    from collections.abc import Iterator


URI_SCHEME = "nostr:"

NIP19_PATTERN = re.compile(
    r"(nostr:)?@?(nsec1|npub1|nevent1|naddr1|note1|nprofile1|nrelay1)"
    r"([qpzry9x8gf2tvdw0s3jn54khce6mua7l]+)(\S*)",
    re.IGNORECASE,
)

# 32-byte payload (52 chars) plus 6-char checksum
_FIXED_DATA_LENGTH = 58
_FIXED_SIZE_PREFIXES = frozenset({Nip19Prefix.NPUB, Nip19Prefix.NOTE, Nip19Prefix.NSEC})


@dataclass(frozen=True, slots=True)
class Nip21Token:
    """One NIP-19 entity found in content.

    Attributes:
        prefix: Lower-case human-readable part without the ``1``
            (e.g. ``"npub"``).
        data: Bech32 data part including the checksum.
        has_scheme: Whether the token was written as a ``nostr:`` URI.
        additional_chars: Non-whitespace text glued after the entity.
        start: Offset of the token in the scanned content.
        end: Offset just past the token, trailing text included.
    """

    prefix: str
    data: str
    has_scheme: bool
    additional_chars: str
    start: int
    end: int

    @property
    def entity(self) -> str:
        """The bare ``prefix1data`` entity string."""
        return f"{self.prefix}1{self.data}"

    def decode(self) -> nip19.Reference | None:
        """Decode the entity; ``None`` when it is malformed or not a reference."""
        return nip19.decode(self.prefix, self.data)


def iter_tokens(content: str) -> Iterator[Nip21Token]:
    """Yield every NIP-19 token in *content*, in order.

    ``npub``, ``note`` and ``nsec`` have a fixed length, so bech32
    characters beyond it belong to the trailing text rather than the
    entity. Each call returns a fresh generator.
    """
    for match in NIP19_PATTERN.finditer(content):
        scheme, raw_prefix, data, additional = match.groups()
        prefix = raw_prefix[:-1].lower()
        if prefix in _FIXED_SIZE_PREFIXES and len(data) > _FIXED_DATA_LENGTH:
            additional = data[_FIXED_DATA_LENGTH:] + additional
            data = data[:_FIXED_DATA_LENGTH]
        yield Nip21Token(
            prefix=prefix,
            data=data,
            has_scheme=scheme is not None,
            additional_chars=additional,
            start=match.start(),
            end=match.end(),
        )


def parse_uri(uri: str) -> nip19.Reference | None:
    """Decode a complete ``nostr:<entity>`` URI; ``None`` if it is not one."""
    if uri[: len(URI_SCHEME)].lower() != URI_SCHEME:
        return None
    return nip19.decode_bech32(uri[len(URI_SCHEME) :])


__all__ = ["NIP19_PATTERN", "URI_SCHEME", "Nip21Token", "iter_tokens", "parse_uri"]
