"""Deterministic pseudonyms for users without a known display name."""

import hashlib

STABLE_ID_PREFIX = "用户"
_ALPHABET_SIZE = 26


def stable_id(user_id: int) -> str:
    """Derive a two-letter pseudonym such as ``用户AB`` from a user id.

    The label is taken from the MD5 digest of the decimal id, so it is the
    same across calls and restarts. Only 676 labels exist, so distinct ids
    may share one.

    Args:
        user_id: Numeric user identity.

    Returns:
        Pseudonym label.
    """
    digest = hashlib.md5(str(user_id).encode("utf-8")).digest()
    first = ((digest[0] << 8) | digest[1]) % _ALPHABET_SIZE
    second = ((digest[2] << 8) | digest[3]) % _ALPHABET_SIZE
    return f"{STABLE_ID_PREFIX}{chr(ord('A') + first)}{chr(ord('A') + second)}"
