"""NIP-08 positional mentions (``#[n]``).

Legacy clients reference tags from the content by index, e.g.
``"hello #[0]"`` points at ``tags[0]``. The lexer only extracts the indices;
resolving them against the tag list is the caller's job.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterator


BACKREFERENCE_PATTERN = re.compile(r"(?:\s|^)#\[([0-9]+)\]")


def iter_tag_indices(content: str) -> Iterator[int]:
    """Yield the tag index of every ``#[n]`` token in *content*, in order.

    A token only counts at the start of the content or after whitespace.
    Indices too long to convert to an int are skipped. Each call returns a
    fresh generator, so the scan can be restarted.
    """
    for match in BACKREFERENCE_PATTERN.finditer(content):
        try:
            index = int(match.group(1))
        except ValueError:
            continue
        yield index


__all__ = ["BACKREFERENCE_PATTERN", "iter_tag_indices"]
