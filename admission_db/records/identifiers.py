"""
Identifier generation.

Both schemes are probabilistic. Neither checks the store for collisions, and
a collision surfaces as whatever the store does with a duplicate key (a
``ConstraintViolation`` for record ids, nothing at all for college ids).
"""

import random
import string
import time
from datetime import datetime, timezone

from ..constants import COLLEGE_ID_PREFIX, COLLEGE_ID_SERIAL_MAX

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_SUFFIX_LENGTH = 11


def to_base36(value: int) -> str:
    """Render a non-negative integer in base 36 (digits then lowercase letters)."""
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a record identifier.

    The millisecond clock in base 36 followed by a random base-36 suffix, so
    ids created close together share a prefix. Ordering beyond that rough
    grouping is not guaranteed.
    """
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=_RANDOM_SUFFIX_LENGTH))
    return timestamp + suffix


def generate_college_id(now: datetime | None = None) -> str:
    """
    Generate a human-facing college id: ``IC`` + year + 4-digit random serial.

    With only 10,000 serials per year, duplicates are expected at scale.
    """
    year = (now or datetime.now(timezone.utc)).year
    serial = random.randint(0, COLLEGE_ID_SERIAL_MAX)
    return f"{COLLEGE_ID_PREFIX}{year:04d}{serial:04d}"
