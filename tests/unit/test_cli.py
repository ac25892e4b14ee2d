"""
Unit tests for the nostrcite CLI (__main__ module).

Tests:
- Argument parsing
- refs / contacts / build-contacts commands end to end through main()
- Error exit codes for broken input and configuration
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import pytest
from nostr_sdk import Keys

from nostrcite.__main__ import load_config, load_events, main, parse_args
from nostrcite.core import CliConfig, ProtocolError
from nostrcite.core.logger import StructuredFormatter
from nostrcite.nips.nip19 import encode_note


if TYPE_CHECKING:
    from pathlib import Path


VALID_HEX_KEY = (
    "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"  # pragma: allowlist secret
)
FIATJAF_PUBKEY = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"
RELAY = "wss://relay.example.com"

E1 = "a1" * 32
E2 = "b2" * 32
U1 = "d4" * 32


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Remove handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def no_config(tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "missing.yaml")]


def _event(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "e" * 64,
        "pubkey": "f" * 64,
        "created_at": 1_700_000_000,
        "kind": 1,
        "tags": [],
        "content": "",
        "sig": "0" * 128,
    }
    data.update(overrides)
    return data


def _write_json(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# ============================================================================
# Argument parsing
# ============================================================================


class TestParseArgs:
    """Command-line parsing."""

    def test_refs(self) -> None:
        args = parse_args(["refs", "note.json"])
        assert args.command == "refs"
        assert str(args.events) == "note.json"
        assert args.log_level is None

    def test_contacts_verify_unset_by_default(self) -> None:
        assert parse_args(["contacts", "c.json"]).verify is None

    def test_contacts_no_verify(self) -> None:
        assert parse_args(["contacts", "c.json", "--no-verify"]).verify is False

    def test_build_contacts(self) -> None:
        args = parse_args(["--log-level", "DEBUG", "build-contacts", "f.yaml", "--created-at", "5"])
        assert args.log_level == "DEBUG"
        assert args.created_at == 5

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])

    def test_invalid_log_level(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "LOUD", "refs", "x.json"])


class TestLoadConfig:
    """Config file fallback."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "missing.yaml") == CliConfig()

    def test_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nostrcite.yaml"
        path.write_text("contacts:\n  verify: false\n")
        assert load_config(path).contacts.verify is False


class TestLoadEvents:
    """Event file reading."""

    def test_single_object(self, tmp_path: Path) -> None:
        events = load_events(_write_json(tmp_path / "e.json", _event(content="hi")))
        assert [e.content for e in events] == ["hi"]

    def test_array_skips_invalid(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "e.json", [_event(content="a"), {"id": "x"}, _event(content="b")])
        assert [e.content for e in load_events(path)] == ["a", "b"]

    def test_invalid_object(self, tmp_path: Path) -> None:
        with pytest.raises(ProtocolError, match="not a valid event"):
            load_events(_write_json(tmp_path / "e.json", {"id": "x"}))

    def test_scalar(self, tmp_path: Path) -> None:
        with pytest.raises(ProtocolError, match="must hold an event object"):
            load_events(_write_json(tmp_path / "e.json", 42))

    def test_not_json(self, tmp_path: Path) -> None:
        path = tmp_path / "e.json"
        path.write_text("{oops")
        with pytest.raises(ProtocolError, match="cannot read events"):
            load_events(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ProtocolError, match="cannot read events"):
            load_events(tmp_path / "missing.json")


# ============================================================================
# Commands
# ============================================================================


class TestRefsCommand:
    """refs command output."""

    def test_single_event(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        event = _event(
            tags=[["e", E1], ["e", E2], ["p", U1]],
            content=f"nostr:{encode_note(E1)} cc #[2]",
        )
        path = _write_json(tmp_path / "note.json", event)

        assert main([*no_config, "refs", str(path)]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report == {
            "id": "e" * 64,
            "mentions": [U1],
            "reply_targets": [E1, E2],
            "address_targets": [],
            "cited_users": [U1],
            "citations": [E1],
            "tags_without_citations": [E2],
        }

    def test_array(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _write_json(tmp_path / "dump.json", [_event(id="1" * 64), _event(id="2" * 64)])
        assert main([*no_config, "refs", str(path)]) == 0
        reports = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in reports] == ["1" * 64, "2" * 64]

    def test_missing_file(
        self, tmp_path: Path, no_config: list[str], caplog: pytest.LogCaptureFixture
    ) -> None:
        assert main([*no_config, "refs", str(tmp_path / "missing.json")]) == 1
        assert "refs_failed" in caplog.text


class TestContactsCommand:
    """contacts command output."""

    def _contacts_file(self, tmp_path: Path) -> Path:
        event = _event(
            kind=3,
            tags=[["p", FIATJAF_PUBKEY, RELAY], ["p", "abc"]],
            content=json.dumps({RELAY: {"read": True, "write": False}}),
        )
        return _write_json(tmp_path / "contacts.json", event)

    def test_verified(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([*no_config, "contacts", str(self._contacts_file(tmp_path))]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["follows"] == [FIATJAF_PUBKEY]
        assert report["contacts"] == [{"pubkey": FIATJAF_PUBKEY, "relay": RELAY}]
        assert report["relays"] == {RELAY: {"read": True, "write": False}}

    def test_no_verify(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = self._contacts_file(tmp_path)
        assert main([*no_config, "contacts", str(path), "--no-verify"]) == 0
        assert json.loads(capsys.readouterr().out)["follows"] == [FIATJAF_PUBKEY, "abc"]

    def test_config_disables_verify(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = tmp_path / "nostrcite.yaml"
        config.write_text("contacts:\n  verify: false\n")
        path = self._contacts_file(tmp_path)
        assert main(["--config", str(config), "contacts", str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["follows"] == [FIATJAF_PUBKEY, "abc"]

    def test_wrong_kind(self, tmp_path: Path, no_config: list[str]) -> None:
        path = _write_json(tmp_path / "note.json", _event(kind=1))
        assert main([*no_config, "contacts", str(path)]) == 1

    def test_empty_content(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _write_json(tmp_path / "c.json", _event(kind=3))
        assert main([*no_config, "contacts", str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["relays"] is None


class TestBuildContactsCommand:
    """build-contacts command output."""

    def _spec(self, tmp_path: Path, body: str) -> Path:
        path = tmp_path / "follows.yaml"
        path.write_text(body)
        return path

    def test_builds_signed_event(
        self,
        tmp_path: Path,
        no_config: list[str],
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", VALID_HEX_KEY)
        spec = self._spec(
            tmp_path,
            f"follows:\n"
            f"  - pubkey: {FIATJAF_PUBKEY}\n"
            f"    relay: {RELAY}\n"
            f"relays:\n"
            f"  {RELAY}:\n"
            f"    read: true\n"
            f"    write: true\n",
        )

        assert main([*no_config, "build-contacts", str(spec), "--created-at", "1700000000"]) == 0

        event = json.loads(capsys.readouterr().out)
        assert event["kind"] == 3
        assert event["pubkey"] == Keys.parse(VALID_HEX_KEY).public_key().to_hex()
        assert event["created_at"] == 1_700_000_000
        assert event["tags"] == [["p", FIATJAF_PUBKEY, RELAY]]
        assert event["content"] == f'{{"{RELAY}":{{"read":true,"write":true}}}}'

    def test_custom_key_env(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("NOSTRCITE_KEY", VALID_HEX_KEY)
        config = tmp_path / "nostrcite.yaml"
        config.write_text("keys_env: NOSTRCITE_KEY\n")
        spec = self._spec(tmp_path, "follows: []\n")
        assert main(["--config", str(config), "build-contacts", str(spec)]) == 0
        event = json.loads(capsys.readouterr().out)
        assert event["tags"] == []
        assert event["content"] == ""

    def test_missing_key(
        self,
        tmp_path: Path,
        no_config: list[str],
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        monkeypatch.delenv("PRIVATE_KEY", raising=False)
        spec = self._spec(tmp_path, "follows: []\n")
        assert main([*no_config, "build-contacts", str(spec)]) == 1
        assert "build-contacts_failed" in caplog.text

    def test_invalid_follow(
        self, tmp_path: Path, no_config: list[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", VALID_HEX_KEY)
        spec = self._spec(tmp_path, "follows:\n  - pubkey: abc\n")
        assert main([*no_config, "build-contacts", str(spec)]) == 1

    def test_non_string_keys_ignored(
        self,
        tmp_path: Path,
        no_config: list[str],
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", VALID_HEX_KEY)
        spec = self._spec(tmp_path, "1: one\nfollows: []\n")
        assert main([*no_config, "build-contacts", str(spec), "--created-at", "1700000000"]) == 0
        assert json.loads(capsys.readouterr().out)["tags"] == []

    def test_follow_not_a_mapping(
        self, tmp_path: Path, no_config: list[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", VALID_HEX_KEY)
        spec = self._spec(tmp_path, "follows:\n  - just-a-string\n")
        assert main([*no_config, "build-contacts", str(spec)]) == 1

    def test_invalid_relays(
        self, tmp_path: Path, no_config: list[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEY", VALID_HEX_KEY)
        spec = self._spec(tmp_path, "relays:\n  wss://r.example.com:\n    read: maybe\n")
        assert main([*no_config, "build-contacts", str(spec)]) == 1


class TestConfigErrors:
    """Broken configuration exits before any command runs."""

    def test_invalid_config(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = tmp_path / "nostrcite.yaml"
        config.write_text("logging:\n  level: LOUD\n")
        assert main(["--config", str(config), "refs", "unused.json"]) == 1
        assert "nostrcite:" in capsys.readouterr().err

    def test_log_level_override(
        self, tmp_path: Path, no_config: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _write_json(tmp_path / "note.json", _event())
        assert main([*no_config, "--log-level", "ERROR", "refs", str(path)]) == 0
        assert logging.getLogger().level == logging.ERROR
