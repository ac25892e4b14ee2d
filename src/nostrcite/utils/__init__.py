"""Key handling and tolerant batch parsing.

The utils layer depends only on [nostrcite.models][nostrcite.models].

Attributes:
    keys: Public key validation and signing key loading from environment
        variables (nsec1 bech32 or hex) with pydantic validation.
    parsing: Batch conversion of raw dicts into models, skipping invalid
        entries with a warning.
"""
