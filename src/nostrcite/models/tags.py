"""Read-only lookup view over an event's tag list.

The [TagIndex][nostrcite.models.tags.TagIndex] is shared by the reference
resolver ([nostrcite.nips.nip27][]) and the contact list decoder
([nostrcite.nips.nip02][]). All lookups return an explicit absence value
(``None`` or an empty sequence) instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Mapping


Tag = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TagIndex:
    """Positional, by-marker, and reverse lookups over an ordered tag list.

    Tags are grouped by their marker (element 0) once at construction.
    Empty tags have no marker and only take part in positional lookups.

    Args:
        tags: The event tags, in wire order.

    Examples:
        ```python
        index = TagIndex((("e", "ab" * 32), ("p", "cd" * 32, "wss://relay.example.com")))
        index.tag_at(1)              # ("p", "cdcd...", "wss://relay.example.com")
        index.tag_at(7)              # None
        index.values_where("e")      # ["abab..."]
        index.tag_referencing("cd" * 32)[0]  # "p"
        ```
    """

    tags: tuple[Tag, ...]
    _by_marker: Mapping[str, tuple[Tag, ...]] = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
        hash=False,  # type: ignore[assignment]
    )

    def __post_init__(self) -> None:
        grouped: dict[str, list[Tag]] = {}
        for tag in self.tags:
            if tag:
                grouped.setdefault(tag[0], []).append(tag)
        object.__setattr__(
            self, "_by_marker", MappingProxyType({k: tuple(v) for k, v in grouped.items()})
        )

    def __len__(self) -> int:
        return len(self.tags)

    def tag_at(self, index: int) -> Tag | None:
        """Return the tag at *index*, or ``None`` if out of range or negative."""
        if 0 <= index < len(self.tags):
            return self.tags[index]
        return None

    def tags_where(self, marker: str) -> tuple[Tag, ...]:
        """Return every tag whose marker is *marker*, in tag order."""
        return self._by_marker.get(marker, ())

    def values_where(self, marker: str) -> list[str]:
        """Return element 1 of every *marker* tag that has one, in tag order."""
        return [tag[1] for tag in self.tags_where(marker) if len(tag) > 1]

    def tag_referencing(self, value: str) -> Tag | None:
        """Return the first tag whose element 1 equals *value*, regardless of marker."""
        for tag in self.tags:
            if len(tag) > 1 and tag[1] == value:
                return tag
        return None
