"""Public key validation and signing key loading.

``p`` tags are supposed to hold hex public keys, but real contact lists
carry typos, truncated values and the odd ``npub1`` string.
[validate_public_key()][nostrcite.utils.keys.validate_public_key] is the
single gate every follow goes through before it counts as an identity.

Signing keys are only needed by ``build-contacts``. They are read from an
environment variable whose *name* lives in the config, never the key itself.

Examples:
    ```python
    validate_public_key("npub180cvv07tjdrrgpa0j7j7tmnyl2yr6yr7l8j4s3evf6u64th6gkwsyjh6w6")
    # '3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d'

    signing = KeysConfig(keys_env="NOSTRCITE_KEY")
    signing.public_key  # hex author of everything signed with it
    ```
"""

from __future__ import annotations

import os
from typing import Any

from nostr_sdk import Keys, PublicKey
from pydantic import BaseModel, ConfigDict, Field, model_validator


ENV_PRIVATE_KEY = "PRIVATE_KEY"  # pragma: allowlist secret


def validate_public_key(value: str) -> str:
    """Return *value* as a normalized lower-case hex public key.

    Accepts hex and ``npub1`` input; the key must be a valid x-only
    secp256k1 point.

    Raises:
        nostr_sdk.NostrSdkError: If *value* is not a valid public key.
    """
    return PublicKey.parse(value).to_hex()


def load_keys_from_env(env_var: str) -> Keys:
    """Parse the private key (``nsec1`` or hex) held by *env_var*.

    Raises:
        ValueError: If the variable is unset or empty.
        nostr_sdk.NostrSdkError: If the value is not a valid private key.
    """
    value = os.getenv(env_var, "").strip()
    if not value:
        raise ValueError(
            f"{env_var} environment variable is required to sign events "
            "(nsec1 or hex; generate one with: openssl rand -hex 32)"
        )
    return Keys.parse(value)


class KeysConfig(BaseModel):
    """Signing keys resolved from an environment variable at validation time.

    Passing ``keys`` explicitly skips the environment lookup, which is what
    tests do.

    Warning:
        ``keys`` holds a live private key. Never dump or log this model.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    keys_env: str = Field(default=ENV_PRIVATE_KEY, min_length=1)
    keys: Keys

    @model_validator(mode="before")
    @classmethod
    def _resolve_keys(cls, data: Any) -> Any:
        if isinstance(data, dict) and "keys" not in data:
            return {**data, "keys": load_keys_from_env(data.get("keys_env", ENV_PRIVATE_KEY))}
        return data

    @property
    def public_key(self) -> str:
        """Hex public key of the signer."""
        return self.keys.public_key().to_hex()


__all__ = ["ENV_PRIVATE_KEY", "KeysConfig", "load_keys_from_env", "validate_public_key"]
