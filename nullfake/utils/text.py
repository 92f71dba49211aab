"""
Text sanitization utility.

Turns arbitrary user-submitted review text into well-formed UTF-8
before it is embedded in a request payload.
"""

import logging
import re
from typing import Any

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

# C0 controls except tab/newline/CR, plus DEL. Covers NUL and SUB (0x1A).
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _decode_bytes(raw: bytes) -> str:
    """
    Decode bytes as UTF-8, falling back to charset detection.

    Never raises: undecodable input ends up with replacement characters.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is not None:
        logger.debug(f"Re-decoded invalid UTF-8 input as {best.encoding}")
        return str(best)

    return raw.decode("utf-8", errors="replace")


def _repair_str(text: str) -> str:
    """Re-decode strings carrying lone surrogates from lossy decoding."""
    try:
        text.encode("utf-8")
        return text
    except UnicodeEncodeError:
        pass

    try:
        # Surrogates produced by errors="surrogateescape" map back to raw bytes
        raw = text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", errors="replace")

    return _decode_bytes(raw)


def sanitize_text(text: Any) -> str:
    """
    Normalize text to valid UTF-8 with control characters stripped.

    Args:
        text: str, bytes, None or any object with a str() form

    Returns:
        Clean, whitespace-trimmed string. sanitize_text(sanitize_text(x))
        equals sanitize_text(x).
    """
    if text is None:
        return ""

    if isinstance(text, (bytes, bytearray)):
        text = _decode_bytes(bytes(text))
    elif isinstance(text, str):
        text = _repair_str(text)
    else:
        text = _repair_str(str(text))

    text = _CONTROL_CHARS.sub("", text)
    return text.strip()


def truncate_text(text: Any, limit: int) -> str:
    """Sanitize, then cut to at most `limit` characters."""
    return sanitize_text(text)[:limit].rstrip()
