"""Signal fire code issuance rules."""

import random
from datetime import datetime, timedelta

# Uppercase letters and digits without I, O, 0 and 1.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8
CODE_TTL = timedelta(hours=72)
# Flat for every aid type and amount until pricing is decided.
HEAT_COST = 5.0


def generate_code(rng: random.Random) -> str:
    return "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def normalize_code(code: str) -> str:
    return code.strip().upper()


def expires_at(issued_at: datetime) -> datetime:
    return issued_at + CODE_TTL
