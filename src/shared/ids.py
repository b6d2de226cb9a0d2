"""Identifier and clock helpers."""

import secrets
import time
from datetime import UTC, datetime

ID_ALPHABET = "qwertyuiopasdfghjklzxcvbnm1234567890"
ID_LENGTH = 20


def random_string(length: int = ID_LENGTH) -> str:
    """Random string drawn from the lowercase alphanumeric id alphabet."""
    if length <= 0:
        raise ValueError("length must be a positive integer")
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def new_id() -> str:
    return random_string(ID_LENGTH)


def is_valid_id(value) -> bool:
    return isinstance(value, str) and len(value) == ID_LENGTH and all(c in ID_ALPHABET for c in value)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def ms_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)
