"""
Unit tests for text sanitization.
"""

import pytest

from nullfake.utils.text import sanitize_text, truncate_text

SAMPLES = [
    "plain text",
    "  padded  ",
    "null\x00byte",
    "sub\x1achar",
    "\x00\x01 leading controls then text",
    "tabs\tand\nnewlines\r\nkept",
    "emoji 👍 and accents café",
    "lone surrogate \udcff here",
    "high surrogate \ud800 alone",
    b"valid utf-8 caf\xc3\xa9",
    b"latin-1 caf\xe9 cr\xe8me br\xfbl\xe9e",
    b"\xff\xfe\xfd garbage \x00 bytes",
    b"",
    "",
    None,
    42,
]


@pytest.mark.parametrize("value", SAMPLES)
def test_sanitize_never_raises_and_yields_valid_utf8(value):
    result = sanitize_text(value)

    assert isinstance(result, str)
    result.encode("utf-8")
    assert "\x00" not in result
    assert "\x1a" not in result
    assert result == result.strip()


@pytest.mark.parametrize("value", SAMPLES)
def test_sanitize_is_idempotent(value):
    once = sanitize_text(value)

    assert sanitize_text(once) == once


def test_sanitize_strips_control_characters():
    assert sanitize_text("  a\x00b\x1ac\x07d  ") == "abcd"


def test_sanitize_keeps_valid_text():
    assert sanitize_text("Used it for 3 months - no issues 👍") == "Used it for 3 months - no issues 👍"


def test_sanitize_decodes_utf8_bytes():
    assert sanitize_text(b"caf\xc3\xa9") == "café"


def test_sanitize_recovers_surrogateescape_text():
    raw = "café".encode("utf-8").decode("utf-8", errors="surrogateescape")
    broken = "caf" + b"\xc3".decode("utf-8", errors="surrogateescape") + "\udca9"

    assert sanitize_text(raw) == "café"
    assert sanitize_text(broken) == "café"


def test_sanitize_none_and_objects():
    assert sanitize_text(None) == ""
    assert sanitize_text(5) == "5"


def test_truncate_cuts_after_sanitizing():
    assert truncate_text("\x00\x00abcdef", 3) == "abc"
    assert truncate_text("ab   cdef", 5) == "ab"
    assert truncate_text("👍" * 10, 4) == "👍" * 4


def test_truncate_is_idempotent():
    once = truncate_text(b"caf\xe9 " * 50, 100)

    assert truncate_text(once, 100) == once
    assert len(once) <= 100


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
