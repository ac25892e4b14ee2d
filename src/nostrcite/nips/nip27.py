"""NIP-27 text note references.

Resolves which users and which events / addressable events a note refers
to, reconciling the structured tag list with the two inline encodings found
in the content:

* positional ``#[n]`` backreferences ([nostrcite.nips.nip08][]), and
* NIP-19 entities, optionally as ``nostr:`` URIs ([nostrcite.nips.nip21][]).

Tags are authoritative: an inline reference only counts as a citation when
a tag with the expected marker refers to the same value. Malformed tokens,
out-of-range indices, and undecodable entities contribute nothing.

Examples:
    ```python
    refs = NoteReferences(event)
    refs.reply_targets()            # every "e" tag, in order
    refs.find_citations()           # "e"/"a" targets cited inline
    refs.tags_without_citations()   # reply targets that are not inline
    ```

See Also:
    [nostrcite.models.tags.TagIndex][]: Tag lookups used by the resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nostrcite.models.address import Address
from nostrcite.models.constants import TagMarker

from .nip08 import iter_tag_indices
from .nip19 import AddressReference, NoteReference
from .nip21 import iter_tokens


if TYPE_CHECKING:
    from collections.abc import Collection, Iterator

    from nostrcite.models.event import Event


_CITATION_MARKERS = frozenset({TagMarker.EVENT, TagMarker.ADDRESS})
_USER_MARKERS = frozenset({TagMarker.PUBKEY})


@dataclass(frozen=True, slots=True)
class NoteReferences:
    """Reference resolver for a single event.

    All methods are pure functions of the wrapped (immutable) event.
    [cited_users()][nostrcite.nips.nip27.NoteReferences.cited_users] is
    computed once and cached on the instance; concurrent first calls may
    both compute it and store the same value.

    Args:
        event: The event whose tags and content are inspected.
    """

    event: Event
    _cited_users: frozenset[str] = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
        hash=False,  # type: ignore[assignment]
    )

    # -------------------------------------------------------------------------
    # Structural references
    # -------------------------------------------------------------------------

    def mentions(self) -> frozenset[str]:
        """Return the target of every ``p`` tag."""
        return frozenset(self.event.tag_index.values_where(TagMarker.PUBKEY))

    def reply_targets(self) -> list[str]:
        """Return the target of every ``e`` tag, in tag order.

        Order is kept for root/reply heuristics applied by thread builders.
        """
        return self.event.tag_index.values_where(TagMarker.EVENT)

    def tagged_addresses(self) -> list[Address]:
        """Return every well-formed ``a`` tag as an [Address][nostrcite.models.address.Address]."""
        addresses: list[Address] = []
        for tag in self.event.tag_index.tags_where(TagMarker.ADDRESS):
            if len(tag) < 2:  # noqa: PLR2004
                continue
            address = Address.parse(tag[1], tag[2] if len(tag) > 2 else None)  # noqa: PLR2004
            if address is not None:
                addresses.append(address)
        return addresses

    def address_targets(self) -> list[str]:
        """Return every well-formed ``a`` tag rendered as ``kind:pubkey:d-tag``."""
        return [address.to_tag() for address in self.tagged_addresses()]

    # -------------------------------------------------------------------------
    # Inline citations
    # -------------------------------------------------------------------------

    def _backreferenced(self, markers: Collection[str]) -> Iterator[str]:
        index = self.event.tag_index
        for i in iter_tag_indices(self.event.content):
            tag = index.tag_at(i)
            if tag is not None and len(tag) > 1 and tag[0] in markers:
                yield tag[1]

    def _entity_referenced(
        self,
        markers: Collection[str],
        accepted: tuple[type, ...] | None = None,
    ) -> Iterator[str]:
        index = self.event.tag_index
        for token in iter_tokens(self.event.content):
            reference = token.decode()
            if reference is None:
                continue
            if accepted is not None and not isinstance(reference, accepted):
                continue
            tag = index.tag_referencing(reference.hex)
            if tag is not None and tag[0] in markers:
                yield tag[1]

    def cited_users(self) -> frozenset[str]:
        """Return users cited inline that are also ``p``-tagged.

        A NIP-19 user reference without a matching ``p`` tag is ignored:
        there is no relationship entry to promote.
        """
        cached = self._cited_users
        if cached is not None:
            return cached
        cited = frozenset(
            [*self._backreferenced(_USER_MARKERS), *self._entity_referenced(_USER_MARKERS)]
        )
        object.__setattr__(self, "_cited_users", cited)
        return cited

    def find_citations(self) -> frozenset[str]:
        """Return ``e``/``a`` tag targets that are cited inline."""
        return frozenset(
            [
                *self._backreferenced(_CITATION_MARKERS),
                *self._entity_referenced(_CITATION_MARKERS, (NoteReference, AddressReference)),
            ]
        )

    def tags_without_citations(self) -> list[str]:
        """Return the structural reply targets that are not cited inline.

        When nothing is cited, reply targets and address targets are
        returned together. When something is cited, only reply targets
        are returned, minus the cited ones; address targets are dropped
        unfiltered in that case.
        """
        replies = self.reply_targets()
        addresses = self.address_targets()
        if not replies and not addresses:
            return []

        citations = self.find_citations()
        if not citations:
            return replies + addresses
        return [target for target in replies if target not in citations]


__all__ = ["NoteReferences"]
