"""Stable session identifiers and their storage keys."""

from __future__ import annotations

import hashlib
from typing import Sequence

from chengyu_quiz.config import SESSION_ID_LENGTH, STORAGE_KEY_PREFIX
from chengyu_quiz.obfuscation import encrypt_idiom


def derive_session_id(idioms: Sequence[str]) -> str:
    """Derive a deterministic id for an ordered idiom list.

    The idioms are obfuscated one by one, joined with commas and hashed with
    SHA-256; the id is the first 16 hex digits of the digest.

    Args:
        idioms: Ordered answers of one quiz.

    Returns:
        Lowercase hexadecimal id, identical for identical ordered input.
    """

    payload = ",".join(encrypt_idiom(idiom) for idiom in idioms)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:SESSION_ID_LENGTH]


def storage_key(session_id: str) -> str:
    """Return the storage key under which a session's progress is saved."""

    return f"{STORAGE_KEY_PREFIX}{session_id}"
