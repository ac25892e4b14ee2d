"""Infrastructure shared by the CLI: logging, YAML config, and exceptions.

Attributes:
    Logger: Structured logger rendering keyword arguments as key=value
        pairs or JSON.
    StructuredFormatter: ``logging.Formatter`` unifying plain and
        structured records.
    setup_logging: Installs the structured formatter on the root logger.
    load_yaml: Safe YAML loading.
    CliConfig: Top-level pydantic configuration.
    NostrCiteError: Base of the exception hierarchy.
"""

from .configs import CliConfig, ContactsConfig, LoggingConfig
from .exceptions import ConfigurationError, NostrCiteError, ProtocolError
from .logger import Logger, StructuredFormatter, format_kv_pairs, setup_logging
from .yaml import load_yaml


__all__ = [
    "CliConfig",
    "ConfigurationError",
    "ContactsConfig",
    "Logger",
    "LoggingConfig",
    "NostrCiteError",
    "ProtocolError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
    "setup_logging",
]
