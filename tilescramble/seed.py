"""Passphrase to seed derivation."""

from __future__ import annotations

import hashlib
from typing import Optional

# Substituted when the digest prefix is zero; xorshift never leaves state 0.
ZERO_SEED_FALLBACK = 0x6D2B79F5


class SeedDerivationError(RuntimeError):
    """Raised when a passphrase cannot be turned into a seed."""


def _well_formed(text: str) -> str:
    """Pair up surrogates and replace lone ones with U+FFFD, as UTF-8 encoders do."""
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def derive_seed(text: Optional[str]) -> int:
    """Return a non-zero 32-bit seed from the SHA-256 digest of `text`.

    The first four digest bytes are read big-endian. ``None`` and the empty
    string are equivalent and always give the same seed.
    """
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise SeedDerivationError(f"passphrase must be text, got {type(text).__name__}")
    try:
        digest = hashlib.sha256(_well_formed(text).encode("utf-8")).digest()
    except (UnicodeError, ValueError) as exc:
        raise SeedDerivationError(f"failed to hash passphrase: {exc}") from exc

    seed = int.from_bytes(digest[:4], byteorder="big", signed=False)
    if seed == 0:
        seed = ZERO_SEED_FALLBACK
    return seed
