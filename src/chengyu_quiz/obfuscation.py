"""Reversible obfuscation of idiom text for ids and shareable quiz links.

The encoding keeps answers from being human-readable; it is not encryption. It
produces the same strings as the browser version of the game for text in the
Basic Multilingual Plane: XOR with a repeating key, ``encodeURIComponent``-style
percent encoding, then standard base64.
"""

from __future__ import annotations

import base64
from urllib.parse import quote, unquote

KEY = "idiom2026"
PREFIX = "[这样做是不对的]"

# Characters encodeURIComponent leaves alone in addition to quote's own set.
_URI_COMPONENT_SAFE = "!*'()"


def _xor_with_key(text: str) -> str:
    return "".join(chr(ord(char) ^ ord(KEY[idx % len(KEY)])) for idx, char in enumerate(text))


def encrypt_idiom(text: str) -> str:
    """Encode ``text`` into an opaque ASCII token.

    Args:
        text: Plain idiom (or any string).

    Returns:
        Base64 token; identical input always yields the identical token.
    """

    mixed = _xor_with_key(PREFIX + text)
    escaped = quote(mixed, safe=_URI_COMPONENT_SAFE, errors="surrogatepass")
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def decrypt_idiom(encoded: str) -> str:
    """Decode a token produced by :func:`encrypt_idiom`.

    Raises:
        ValueError: If ``encoded`` is not valid base64.
    """

    escaped = base64.b64decode(encoded.encode("ascii"), validate=True).decode("ascii")
    mixed = unquote(escaped, errors="surrogatepass")
    return _xor_with_key(mixed).replace(PREFIX, "", 1)
