"""
Unit tests for models.address module.

Tests:
- Address construction and validation
- parse() of a tag values, including malformed input
- to_tag() canonical rendering
"""

import pytest

from nostrcite.models import Address


PUBKEY = "b" * 64


class TestConstruction:
    """Address construction."""

    def test_valid(self):
        address = Address(30023, PUBKEY, "article")
        assert address.kind == 30023
        assert address.relay is None

    def test_kind_out_of_range(self):
        with pytest.raises(ValueError, match="kind"):
            Address(70_000, PUBKEY, "x")

    def test_empty_pubkey(self):
        with pytest.raises(ValueError, match="pubkey"):
            Address(30023, "", "x")


class TestParse:
    """Parsing a tag values."""

    def test_full(self):
        address = Address.parse(f"30023:{PUBKEY}:article", "wss://relay.example.com")
        assert address == Address(30023, PUBKEY, "article", "wss://relay.example.com")

    def test_d_tag_with_colons(self):
        address = Address.parse(f"30023:{PUBKEY}:a:b:c")
        assert address is not None
        assert address.d_tag == "a:b:c"

    def test_empty_d_tag(self):
        address = Address.parse(f"10002:{PUBKEY}:")
        assert address is not None
        assert address.d_tag == ""

    def test_missing_d_tag(self):
        address = Address.parse(f"10002:{PUBKEY}")
        assert address is not None
        assert address.d_tag == ""

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "article",
            f"abc:{PUBKEY}:x",
            f"-1:{PUBKEY}:x",
            "30023::x",
            f"99999:{PUBKEY}:x",
            f"\u00b2:{PUBKEY}:x",
            f"\u0663:{PUBKEY}:x",
        ],
    )
    def test_malformed(self, value):
        assert Address.parse(value) is None


class TestToTag:
    """Canonical rendering."""

    def test_roundtrip(self):
        value = f"30023:{PUBKEY}:article"
        address = Address.parse(value)
        assert address is not None
        assert address.to_tag() == value

    def test_relay_not_rendered(self):
        assert Address(1, PUBKEY, "", "wss://r").to_tag() == f"1:{PUBKEY}:"
