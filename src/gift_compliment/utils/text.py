"""Text normalisation and content addressing for compliments."""

from __future__ import annotations

import hashlib


def normalise_text(value: str) -> str:
    """Trim ``value`` and collapse internal whitespace runs to single spaces.

    Case is preserved: two compliments differing only in case are distinct.
    """
    return " ".join(value.split())


def sha256_hex(value: str) -> str:
    """Return the lowercase hex SHA-256 digest of ``value`` encoded as UTF-8."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def content_hash(text: str) -> str:
    """Return the stable identifier of ``text`` (hash of its normalised form)."""
    return sha256_hex(normalise_text(text))
