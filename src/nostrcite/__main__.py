"""CLI entry point for nostrcite.

Runs the reference resolver and the contact list decoder on event JSON
files, and builds signed contact lists from a YAML description.

Examples:
    ```bash
    python -m nostrcite refs note.json
    python -m nostrcite contacts contacts.json --no-verify
    PRIVATE_KEY=nsec1... python -m nostrcite build-contacts follows.yaml --created-at 1700000000
    python -m nostrcite --config config/nostrcite.yaml --log-level DEBUG refs dump.json
    ```

Event files hold either one NIP-01 event object or an array of them;
invalid entries in an array are skipped with a warning.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml
from nostr_sdk import NostrSdkError
from pydantic import BaseModel, Field, ValidationError, field_validator

from nostrcite.core.configs import CliConfig
from nostrcite.core.exceptions import ConfigurationError, NostrCiteError, ProtocolError
from nostrcite.core.logger import Logger, setup_logging
from nostrcite.core.yaml import load_yaml
from nostrcite.models.event import Event
from nostrcite.nips.nip02 import Contact, ContactList, ReadWrite
from nostrcite.nips.nip27 import NoteReferences
from nostrcite.utils.keys import KeysConfig, validate_public_key
from nostrcite.utils.parsing import models_from_dict


DEFAULT_CONFIG = Path("config") / "nostrcite.yaml"


class FollowSpec(BaseModel):
    """One entry of the ``follows`` list in a build-contacts file."""

    pubkey: str = Field(min_length=1)
    relay: str | None = None

    @field_validator("pubkey")
    @classmethod
    def _normalize_pubkey(cls, value: str) -> str:
        """Accept hex or npub1 keys and store them as hex."""
        try:
            return validate_public_key(value)
        except NostrSdkError as e:
            raise ValueError(f"invalid public key {value!r}: {e}") from e


class ContactListSpec(BaseModel):
    """Contents of a build-contacts YAML file."""

    follows: list[FollowSpec] = Field(default_factory=list)
    relays: dict[str, ReadWrite] | None = None


# =============================================================================
# Commands
# =============================================================================


def load_events(path: Path) -> list[Event]:
    """Read one event or an array of events from a JSON file.

    Raises:
        ProtocolError: If the file cannot be read or holds no valid event.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ProtocolError(f"cannot read events from {path}: {e}") from e

    if isinstance(data, dict):
        try:
            return [Event.from_dict(data)]
        except (ValueError, TypeError) as e:
            raise ProtocolError(f"{path} is not a valid event: {e}") from e
    if isinstance(data, list):
        return models_from_dict(data, Event.from_dict)
    raise ProtocolError(f"{path} must hold an event object or an array of events")


def references_report(event: Event) -> dict[str, Any]:
    """Summarize the references of *event* as a JSON-ready dict."""
    refs = NoteReferences(event)
    return {
        "id": event.id,
        "mentions": sorted(refs.mentions()),
        "reply_targets": refs.reply_targets(),
        "address_targets": refs.address_targets(),
        "cited_users": sorted(refs.cited_users()),
        "citations": sorted(refs.find_citations()),
        "tags_without_citations": refs.tags_without_citations(),
    }


def contacts_report(event: Event, *, verify: bool) -> dict[str, Any]:
    """Summarize a kind 3 contact list as a JSON-ready dict.

    Raises:
        ProtocolError: If *event* is not a contact list.
    """
    try:
        contacts = ContactList(event)
    except ValueError as e:
        raise ProtocolError(str(e)) from e

    follows = contacts.followed_identities(verify=verify)
    relays = contacts.relay_preferences()
    return {
        "id": event.id,
        "follows": sorted(follows) if verify else follows,
        "contacts": [
            {"pubkey": c.pubkey, "relay": c.relay_url} for c in contacts.follows_with_relay_hints()
        ],
        "relays": {url: rw.model_dump() for url, rw in relays.items()} if relays is not None else None,
    }


def build_contacts(spec_path: Path, config: CliConfig, created_at: int | None) -> Event:
    """Build and sign a contact list from a YAML description.

    Raises:
        ProtocolError: If the description is invalid.
        ConfigurationError: If the signing key cannot be loaded.
    """
    try:
        spec = ContactListSpec.model_validate(load_yaml(spec_path))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ProtocolError(f"invalid contact list file {spec_path}: {e}") from e

    try:
        keys = KeysConfig(keys_env=config.keys_env).keys
    except (ValidationError, NostrSdkError) as e:
        raise ConfigurationError(f"cannot load signing key from {config.keys_env}: {e}") from e

    contacts = ContactList.build(
        [Contact(f.pubkey, f.relay) for f in spec.follows],
        spec.relays,
        keys,
        created_at,
    )
    return contacts.event


# =============================================================================
# Entry Point
# =============================================================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="nostrcite",
        description="Resolve Nostr event references and contact lists",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides the config file)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    refs = commands.add_parser("refs", help="Report mentions, replies and citations")
    refs.add_argument("events", type=Path, help="JSON file with an event or an array of events")

    contacts = commands.add_parser("contacts", help="Decode a kind 3 contact list")
    contacts.add_argument("events", type=Path, help="JSON file with an event or an array of events")
    contacts.add_argument(
        "--no-verify",
        dest="verify",
        action="store_false",
        default=None,
        help="Return raw p tag values without validating public keys",
    )

    build = commands.add_parser("build-contacts", help="Build and sign a contact list")
    build.add_argument("spec", type=Path, help="YAML file with follows and relays")
    build.add_argument("--created-at", type=int, help="Unix timestamp (default: now)")

    return parser.parse_args(argv)


def load_config(path: Path) -> CliConfig:
    """Load the CLI config, falling back to defaults if the file does not exist."""
    if not path.exists():
        return CliConfig()
    return CliConfig.from_yaml(path)


def run(args: argparse.Namespace, config: CliConfig, logger: Logger) -> list[dict[str, Any]]:
    """Execute the selected command and return its JSON output documents."""
    if args.command == "refs":
        events = load_events(args.events)
        logger.info("refs_loaded", path=str(args.events), events=len(events))
        return [references_report(event) for event in events]

    if args.command == "contacts":
        verify = config.contacts.verify if args.verify is None else args.verify
        events = load_events(args.events)
        logger.info("contacts_loaded", path=str(args.events), events=len(events), verify=verify)
        return [contacts_report(event, verify=verify) for event in events]

    event = build_contacts(args.spec, config, args.created_at)
    logger.info("contacts_built", id=event.id, author=event.pubkey, follows=len(event.tags))
    return [event.to_dict()]


def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, configure logging, run the command."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"nostrcite: {e}", file=sys.stderr)  # noqa: T201
        return 1

    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    logger = Logger(
        "cli",
        json_output=config.logging.json_output,
        max_value_length=config.logging.max_value_length,
    )

    try:
        documents = run(args, config, logger)
    except NostrCiteError as e:
        logger.error(f"{args.command}_failed", error=str(e))
        return 1

    output = documents[0] if len(documents) == 1 else documents
    print(json.dumps(output, indent=2, ensure_ascii=False))  # noqa: T201
    return 0


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
