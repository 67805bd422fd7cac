"""
Identifier utilities.

Time-ordered UUID version 7 generation (RFC 9562) and lenient parsing of
identifiers taken from request paths.
"""

import os
import threading
import time
import uuid

_lock = threading.Lock()
_last_timestamp_ms = 0
_counter = 0

_COUNTER_MAX = 0xFFF


def uuid7() -> uuid.UUID:
    """
    Generate a version 7 UUID.

    The first 48 bits hold the Unix time in milliseconds; the 12 bit
    ``rand_a`` field is used as a counter so identifiers created within the
    same millisecond by this process still sort in creation order.

    Returns:
        A new time-ordered UUID
    """
    global _last_timestamp_ms, _counter

    with _lock:
        timestamp_ms = time.time_ns() // 1_000_000
        if timestamp_ms > _last_timestamp_ms:
            _counter = 0
        else:
            timestamp_ms = _last_timestamp_ms
            _counter += 1
            if _counter > _COUNTER_MAX:
                timestamp_ms += 1
                _counter = 0
        _last_timestamp_ms = timestamp_ms
        counter = _counter

    random_bits = int.from_bytes(os.urandom(8), "big") & ((1 << 62) - 1)

    value = (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76  # version
    value |= counter << 64
    value |= 0b10 << 62  # variant
    value |= random_bits
    return uuid.UUID(int=value)


def parse_identifier(raw: str | uuid.UUID | None) -> uuid.UUID | None:
    """
    Parse a textual identifier.

    Args:
        raw: Identifier as received from a client

    Returns:
        The UUID, or None when ``raw`` is not a valid UUID
    """
    if raw is None:
        return None
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        return None
