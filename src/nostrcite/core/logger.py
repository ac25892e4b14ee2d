"""
Structured logging with key=value and JSON output support.

Library modules (models, nips, utils) log through plain
``logging.getLogger(__name__)`` calls with ``event key=value`` messages.
The CLI logs through [Logger][nostrcite.core.logger.Logger], which takes
keyword arguments and renders them either as key=value pairs or as one JSON
object per line.

[setup_logging()][nostrcite.core.logger.setup_logging] installs
[StructuredFormatter][nostrcite.core.logger.StructuredFormatter] on the root
logger so both kinds of records come out as ``level name message k=v ...``.

Examples:
    ```python
    from nostrcite.core.logger import Logger

    logger = Logger("cli")
    logger.info("refs_resolved", events=3, citations=2)
    # info cli refs_resolved events=3 citations=2

    Logger("cli", json_output=True).info("refs_resolved", events=3)
    # {"timestamp": "...", "level": "info", "service": "cli", "message": "refs_resolved", "events": 3}
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import TYPE_CHECKING, Any, ClassVar


if TYPE_CHECKING:
    from .configs import LoggingConfig


def _truncate(value: str, max_length: int | None) -> str:
    if max_length and len(value) > max_length:
        return value[:max_length] + f"...<truncated {len(value) - max_length} chars>"
    return value


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated. Empty values and
    values containing whitespace, ``=`` or quotes are escaped and wrapped in
    double quotes.

    Returns:
        e.g. ``' key1=value1 key2="value with spaces"'``, or ``""`` when
        *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(str(v), max_value_length)
        if not s or any(c in s for c in " =\"'"):
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")
    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Formats log records as ``level name message key=value ...``.

    Key=value pairs come from the ``structured_kv`` extra attached by
    [Logger][nostrcite.core.logger.Logger]; plain records are emitted with
    the same prefix and no pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            base += format_kv_pairs(extra)
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


class Logger:
    """Structured logger that appends keyword arguments as extra fields.

    Args:
        name: Name of the underlying ``logging.getLogger(name)`` logger.
        json_output: Emit one JSON object per record instead of key=value
            pairs.
        max_value_length: Truncate individual values beyond this many
            characters. Defaults to 1000.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            record = {
                "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                "level": logging.getLevelName(level).lower(),
                "service": self._logger.name,
                "message": msg,
                **{k: _truncate(str(v), self._max_value_length) for k, v in kwargs.items()},
            }
            self._logger.log(level, json.dumps(record, default=str), exc_info=exc_info)
            return
        extra = (
            {"structured_kv": {k: _truncate(str(v), self._max_value_length) for k, v in kwargs.items()}}
            if kwargs
            else {}
        )
        self._logger.log(level, msg, extra=extra, exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the current exception traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger with a single structured handler.

    Replaces any handlers previously installed by this function so repeated
    calls (e.g. in tests) do not duplicate output.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(config.level)
