"""Input rules checked before any store access."""

import base64
import binascii
import math

from booty_hunt.errors import ValidationError

VALID_SHIP_CLASSES = ("sloop", "brigantine", "galleon")
VALID_AID_TYPES = ("supplies", "intel", "rep")

DEFAULT_PLAYER_NAME = "Anonymous"
MAX_PLAYER_NAME_LEN = 32
MAX_GHOST_TAPE_SIZE = 512 * 1024
MAX_ENCODED_TAPE_LEN = 4 * math.ceil(MAX_GHOST_TAPE_SIZE / 3)
MIN_AID_AMOUNT = 1
MAX_AID_AMOUNT = 100


def validate_ship_class(ship_class: str) -> None:
    if ship_class not in VALID_SHIP_CLASSES:
        raise ValidationError(f"Invalid ship class: {ship_class}")


def validate_score(score: int) -> None:
    if score < 0:
        raise ValidationError("Score cannot be negative")


def normalize_player_name(name: str) -> str:
    trimmed = name.strip()
    if not trimmed:
        return DEFAULT_PLAYER_NAME
    return trimmed[:MAX_PLAYER_NAME_LEN]


def decode_ghost_tape(encoded: str | None) -> bytes | None:
    """Decode a base64 ghost tape and enforce the size limit.

    Args:
        encoded (str | None): Tape as sent by the client, or None when absent

    Raises:
        ValidationError: The tape is not valid base64 or decodes past the limit

    Returns:
        bytes | None: Raw tape bytes
    """
    if encoded is None:
        return None
    if len(encoded) > MAX_ENCODED_TAPE_LEN:
        raise ValidationError("Ghost tape too large")
    try:
        tape = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid ghost tape encoding")
    if len(tape) > MAX_GHOST_TAPE_SIZE:
        raise ValidationError("Ghost tape too large")
    return tape


def validate_aid_type(aid_type: str) -> None:
    if aid_type not in VALID_AID_TYPES:
        raise ValidationError(f"Invalid aid type: {aid_type}")


def validate_aid_amount(amount: int) -> None:
    if amount < MIN_AID_AMOUNT or amount > MAX_AID_AMOUNT:
        raise ValidationError(f"Aid amount must be {MIN_AID_AMOUNT}-{MAX_AID_AMOUNT}")


def clamp_limit(limit: int, lower: int = 1, upper: int = 100) -> int:
    return max(lower, min(upper, limit))
