"""Issue ID generation with collision detection.

Ids look like ``bd-0mfz3k1q2a7k2``: a fixed-width base36 millisecond
timestamp followed by a random suffix, so plain string order follows
creation order.
"""

import logging
import secrets
import string
import threading
import time

from sqlalchemy.orm import Session

from ..models import Issue

logger = logging.getLogger(__name__)

# Digits sort before lowercase letters in ASCII, so fixed-width base36 sorts numerically
BASE36 = string.digits + string.ascii_lowercase
TIMESTAMP_WIDTH = 9
SUFFIX_LENGTH = 4
MAX_ATTEMPTS = 10

_clock_lock = threading.Lock()
_last_millis = 0


def to_base36(number: int, width: int = TIMESTAMP_WIDTH) -> str:
    """Encode a non-negative integer as zero-padded base36"""
    if number < 0:
        raise ValueError("number must be non-negative")
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits)).rjust(width, "0")


def next_timestamp_millis() -> int:
    """Wall-clock milliseconds, bumped so successive calls never repeat or go back"""
    global _last_millis
    with _clock_lock:
        now = int(time.time() * 1000)
        if now <= _last_millis:
            now = _last_millis + 1
        _last_millis = now
        return now


def generate_random_string(length: int = SUFFIX_LENGTH) -> str:
    """Generate random alphanumeric string"""
    return "".join(secrets.choice(BASE36) for _ in range(length))


def make_issue_id(prefix: str, suffix_length: int = SUFFIX_LENGTH) -> str:
    return f"{prefix}-{to_base36(next_timestamp_millis())}{generate_random_string(suffix_length)}"


def issue_exists(session: Session, issue_id: str) -> bool:
    """Check if issue ID is taken, soft-deleted rows included"""
    return session.query(Issue.id).filter(Issue.id == issue_id).first() is not None


def generate_issue_id(session: Session, prefix: str) -> str:
    """Generate unique issue ID with collision detection"""
    for _ in range(MAX_ATTEMPTS):
        candidate_id = make_issue_id(prefix)
        if not issue_exists(session, candidate_id):
            return candidate_id
        logger.warning("Issue id collision on %s, retrying", candidate_id)

    # Longer suffix after repeated collisions
    candidate_id = make_issue_id(prefix, suffix_length=SUFFIX_LENGTH * 2)
    if issue_exists(session, candidate_id):
        raise RuntimeError(f"Could not generate a unique issue id with prefix '{prefix}'")
    return candidate_id
