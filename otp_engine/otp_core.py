"""
otp_core.py — pure functions for HOTP (RFC 4226) and TOTP (RFC 6238).

Goals:
- Only stateless helpers: no file, clock or network access.
- Used directly by otp_generator.py (TOTP/HOTP value classes) and the
  Flask backend.
- Secrets and generated codes are never logged.

Pipeline:
    instant --derive_counter--> counter --generate_otp--> "287082"
"""

import hmac
import logging
import math
import numbers
import struct
from datetime import datetime, timedelta, timezone
from typing import Union

from .algorithms import Algorithm
from .errors import (
    CounterOutOfRange,
    InvalidDigitCount,
    InvalidTimeStep,
    OTPResult,
    PreEpochTime,
)

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # RFC 4226 minimum, what authenticator apps expect
MIN_DIGITS = 6
MAX_DIGITS = 8
DEFAULT_TIME_STEP = 30      # TOTP step (seconds), RFC 6238 recommendation
MAX_COUNTER = 2 ** 64 - 1   # moving factor is an unsigned 64-bit integer

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_SECOND = timedelta(seconds=1)

Instant = Union[int, float, datetime]


# --- Validation ------------------------------------------------------------
def validate_digits(digits: int) -> int:
    """
    Check the code length is in 6..8 (RFC 4226 §5.3 and common authenticators).

    Raises:
        InvalidDigitCount: for any other value, including non-integers
    """
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidDigitCount(digits)
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigitCount(digits)
    return digits


def validate_time_step(time_step: int) -> int:
    """
    Check the TOTP step is a positive whole number of seconds.

    Raises:
        InvalidTimeStep: zero, negative or non-integer steps
    """
    if isinstance(time_step, bool) or not isinstance(time_step, int):
        raise InvalidTimeStep(time_step)
    if time_step <= 0:
        raise InvalidTimeStep(time_step)
    return time_step


def coerce_secret(secret) -> bytes:
    """
    Take an immutable copy of the caller's key bytes.

    A zero-length key is accepted: HMAC defines it, even if it is almost
    always a caller mistake.
    """
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    raise TypeError(f"secret must be bytes, not {type(secret).__name__}")


def validate_counter(counter: int) -> int:
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise TypeError(f"counter must be an int, not {type(counter).__name__}")
    if not 0 <= counter <= MAX_COUNTER:
        raise CounterOutOfRange(counter)
    return counter


# --- Counter derivation (RFC 6238 §4.2) ----------------------------------
def epoch_seconds(instant: Instant) -> int:
    """
    Whole seconds since 1970-01-01T00:00:00Z, floored (may be negative).

    - int / float / other real numbers: floor(instant)
    - datetime: aware values are converted, naive values are taken as UTC
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        # timedelta floor division is exact, no float rounding
        return (instant - EPOCH) // _ONE_SECOND
    if isinstance(instant, bool) or not isinstance(instant, numbers.Real):
        raise TypeError(f"instant must be a number of seconds or a datetime, not {type(instant).__name__}")
    if isinstance(instant, float) and not math.isfinite(instant):
        raise ValueError(f"instant must be finite, got {instant!r}")
    return math.floor(instant)


def counter_from_seconds(seconds: int, time_step: int = DEFAULT_TIME_STEP) -> int:
    """
    counter = seconds // time_step, for seconds the caller already knows are >= 0.

    This is the trusted path: no epoch check is done, so a negative value is a
    programming error rather than a recoverable result.

    Raises:
        TypeError: seconds is not an int
        ValueError: seconds is negative
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise TypeError(f"seconds must be an int, not {type(seconds).__name__}")
    if seconds < 0:
        raise ValueError("seconds must be a non-negative integer")
    validate_time_step(time_step)
    # exact integer division, stable at step boundaries for any epoch value
    counter = seconds // time_step
    if counter > MAX_COUNTER:
        raise CounterOutOfRange(counter)
    return counter


def derive_counter(instant: Instant, time_step: int = DEFAULT_TIME_STEP) -> OTPResult[int]:
    """
    Map a point in time to the TOTP moving factor.

    Arguments:
        instant: seconds since the Unix epoch (int/float) or a datetime
        time_step: X in RFC 6238, seconds each counter value stays valid

    Returns:
        OTPResult with the counter, or with PreEpochTime when the floored
        instant is before 1970.
    """
    validate_time_step(time_step)
    seconds = epoch_seconds(instant)
    if seconds < 0:
        return OTPResult.failure(PreEpochTime(seconds))
    return OTPResult.success(counter_from_seconds(seconds, time_step))


def seconds_remaining(instant: Instant, time_step: int = DEFAULT_TIME_STEP) -> OTPResult[int]:
    """
    Whole seconds left before the counter for ``instant`` rolls over (1..time_step).
    """
    validate_time_step(time_step)
    seconds = epoch_seconds(instant)
    if seconds < 0:
        return OTPResult.failure(PreEpochTime(seconds))
    return OTPResult.success(time_step - seconds % time_step)


# --- RFC 4226 helpers ------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Counter as the 8-byte big-endian message RFC 4226 feeds to HMAC.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 §5.3 dynamic truncation.

    - offset = low nibble of the last byte (0..15)
    - read 4 bytes from offset as a big-endian integer
    - clear the top bit, leaving a 31-bit non-negative value

    offset + 4 <= 19 fits every supported digest (20, 32 or 64 bytes).
    """
    offset = hmac_digest[-1] & 0x0F
    (p,) = struct.unpack_from(">I", hmac_digest, offset)
    return p & 0x7FFFFFFF


def generate_otp(secret: bytes, algorithm: Algorithm, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    HOTP value for one counter.

    Steps:
    1. message = 8-byte big-endian counter
    2. HMAC-<algorithm>(key=secret, message)
    3. dynamic truncation -> 31-bit binary code
    4. binary code mod 10^digits
    5. zero-pad to exactly ``digits`` characters

    Arguments:
        secret: raw key bytes
        algorithm: Algorithm member (or its name)
        counter: moving factor, 0 <= counter < 2**64
        digits: code length, 6..8

    Returns:
        str: the zero-padded code
    """
    algorithm = Algorithm.parse(algorithm)
    validate_digits(digits)
    validate_counter(counter)
    key = coerce_secret(secret)

    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, algorithm.digest).digest()
    dbc = dynamic_truncate(digest)
    logger.debug("HOTP-%s counter=%d digits=%d", algorithm.value, counter, digits)
    return str(dbc % 10 ** digits).zfill(digits)
