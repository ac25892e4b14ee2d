r"""nostrcite -- cross-reference resolution for Nostr events.

Works out which users and which events / addressable events a Nostr event
mentions, replies to, or cites inline, and decodes NIP-02 contact lists.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
            __main__          Command-line interface
           /   |    \
        core  nips  utils     Logging/config, protocol logic, key helpers
           \   |    /
            models            Pure frozen dataclasses (zero I/O)
```

Note:
    For lightweight usage, import directly from subpackages::

        from nostrcite.models import Event
        from nostrcite.nips import NoteReferences

    Top-level imports (``from nostrcite import NoteReferences``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("nostrcite")

__all__ = [
    "Address",
    "Contact",
    "ContactList",
    "Event",
    "EventKind",
    "Logger",
    "NoteReferences",
    "ReadWrite",
    "TagIndex",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Address": ("nostrcite.models", "Address"),
    "Event": ("nostrcite.models", "Event"),
    "EventKind": ("nostrcite.models", "EventKind"),
    "TagIndex": ("nostrcite.models", "TagIndex"),
    "Contact": ("nostrcite.nips", "Contact"),
    "ContactList": ("nostrcite.nips", "ContactList"),
    "NoteReferences": ("nostrcite.nips", "NoteReferences"),
    "ReadWrite": ("nostrcite.nips", "ReadWrite"),
    "Logger": ("nostrcite.core", "Logger"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'nostrcite' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
