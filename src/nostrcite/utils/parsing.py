"""Tolerant parsing of raw data into validated model instances.

Calls a factory for each element of a batch and keeps only the elements that
parse. Invalid entries are logged at WARNING level and skipped, so one
broken event in a dump does not abort the whole batch.

Examples:
    ```python
    from nostrcite.models import Event
    from nostrcite.utils.parsing import models_from_dict

    events = models_from_dict(json.load(f), Event.from_dict)
    ```
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def models_from_dict(
    rows: Iterable[Any],
    factory: Callable[[dict[str, Any]], _T],
) -> list[_T]:
    """Parse dictionaries into model instances, skipping invalid entries.

    Non-dict rows and rows for which ``factory`` raises ``ValueError`` or
    ``TypeError`` are logged and discarded.
    """
    results: list[_T] = []
    for position, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("parse_failed position=%d error=not an object", position)
            continue
        try:
            results.append(factory(row))
        except (ValueError, TypeError) as e:
            logger.warning("parse_failed position=%d error=%s", position, e)
    return results


__all__ = ["models_from_dict"]
