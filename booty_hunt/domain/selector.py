"""Deterministic weekly selection.

Every weekly choice is derived from ``sha256(week_key || domain_tag)`` so that
all server instances agree on it without coordination.
"""

import hashlib

REGATTA_TAG = "booty-hunt-regatta"
TIDE_TAG = "booty-hunt-tide"

INT64_MAX = 2**63 - 1


def select(week_key: str, domain_tag: str) -> bytes:
    """Stable 32-byte digest for a week key and a domain tag.

    Args:
        week_key (str): ISO week key, e.g. "2026-W43"
        domain_tag (str): Separates independent selections for the same week

    Returns:
        bytes: SHA-256 digest of the concatenation
    """
    hasher = hashlib.sha256()
    hasher.update(week_key.encode("utf-8"))
    hasher.update(domain_tag.encode("utf-8"))
    return hasher.digest()


def regatta_seed(week_key: str) -> int:
    """Non-negative signed 64-bit seed for the week's regatta."""
    digest = select(week_key, REGATTA_TAG)
    value = abs(int.from_bytes(digest[:8], "big", signed=True))
    # abs(-2**63) does not fit a signed 64-bit column
    return min(value, INT64_MAX)


def catalog_index(week_key: str, domain_tag: str, catalog_size: int) -> int:
    if catalog_size <= 0:
        raise ValueError("catalog_size must be positive")
    return select(week_key, domain_tag)[0] % catalog_size
