"""nostrcite exception hierarchy.

Reference resolution and contact list decoding never raise for bad input
found *inside* an event; they skip it. These exceptions cover the edges of
the package, where a caller hands over a broken file or configuration.

```text
NostrCiteError (base -- never raised directly)
├── ConfigurationError  -- bad YAML, invalid config, missing key env var
└── ProtocolError       -- input is not a valid Nostr event / contact list file
```
"""

from __future__ import annotations


class NostrCiteError(Exception):
    """Base exception for all nostrcite errors. Never raised directly."""


class ConfigurationError(NostrCiteError):
    """Invalid or missing configuration (YAML, env vars, CLI flags)."""


class ProtocolError(NostrCiteError):
    """Input that does not describe a valid Nostr event or contact list file."""
