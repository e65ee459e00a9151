"""
otp_generator.py — immutable TOTP / HOTP configurations built on otp_core.

Usage examples:
  >>> totp = TOTP(b"12345678901234567890", digits=8)
  >>> totp.generate(59).unwrap()
  '94287082'
  >>> totp.generate(-1).ok
  False

  >>> hotp = HOTP(b"12345678901234567890")
  >>> hotp.generate(1)
  '287082'
  >>> hotp.verify("287082", counter=0, look_ahead=2)
  (True, 2)

Both classes are frozen value objects: the same instance can be shared
between threads, and two instances built from equal arguments compare equal
and produce the same codes.
"""

import hmac
import time
from dataclasses import dataclass, field
from typing import Callable, Tuple

from . import otp_core
from .algorithms import Algorithm
from .errors import CounterOutOfRange, OTPError, OTPResult
from .otp_core import DEFAULT_DIGITS, DEFAULT_TIME_STEP, MAX_COUNTER, Instant


def _codes_equal(expected: str, code) -> bool:
    # compare_digest on str only accepts ASCII, so compare the encoded forms
    return hmac.compare_digest(expected.encode("utf-8"), str(code).encode("utf-8"))


def _build(cls, *args, **kwargs) -> OTPResult:
    try:
        return OTPResult.success(cls(*args, **kwargs))
    except OTPError as e:
        return OTPResult.failure(e)


@dataclass(frozen=True)
class HOTP:
    """
    Event-based one-time password configuration (RFC 4226).

    Arguments:
        secret: raw key bytes (copied, never shown in repr)
        digits: code length, 6..8
        algorithm: Algorithm member or name, default SHA1

    Raises:
        InvalidDigitCount, InvalidAlgorithm
    """

    secret: bytes = field(repr=False)
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = Algorithm.SHA1

    def __post_init__(self):
        object.__setattr__(self, "secret", otp_core.coerce_secret(self.secret))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))
        otp_core.validate_digits(self.digits)

    @classmethod
    def create(cls, *args, **kwargs) -> "OTPResult[HOTP]":
        """Like the constructor, but hands back the failure instead of raising."""
        return _build(cls, *args, **kwargs)

    def generate(self, counter: int) -> str:
        return otp_core.generate_otp(self.secret, self.algorithm, counter, self.digits)

    def verify(self, code: str, counter: int, look_ahead: int = 0) -> Tuple[bool, int]:
        """
        Check ``code`` against counters counter..counter+look_ahead.

        MAX_COUNTER itself is never accepted: a match there would leave no
        next counter to store, so the key is exhausted once the stored
        counter reaches it and every further check fails.

        Returns:
            (True, matched_counter + 1) on success, (False, counter) otherwise.
            The caller stores the returned counter; nothing is kept here.
        """
        if look_ahead < 0:
            raise ValueError("look_ahead must be >= 0")
        otp_core.validate_counter(counter)
        for candidate in range(counter, min(counter + look_ahead, MAX_COUNTER - 1) + 1):
            if _codes_equal(self.generate(candidate), code):
                return True, candidate + 1
        return False, counter


@dataclass(frozen=True)
class TOTP:
    """
    Time-based one-time password configuration (RFC 6238).

    Arguments:
        secret: raw key bytes (copied, never shown in repr)
        digits: code length, 6..8
        time_step: seconds each code stays valid, > 0
        algorithm: Algorithm member or name, default SHA1

    Raises:
        InvalidDigitCount, InvalidTimeStep, InvalidAlgorithm
    """

    secret: bytes = field(repr=False)
    digits: int = DEFAULT_DIGITS
    time_step: int = DEFAULT_TIME_STEP
    algorithm: Algorithm = Algorithm.SHA1

    def __post_init__(self):
        object.__setattr__(self, "secret", otp_core.coerce_secret(self.secret))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))
        otp_core.validate_digits(self.digits)
        otp_core.validate_time_step(self.time_step)

    @classmethod
    def create(cls, *args, **kwargs) -> "OTPResult[TOTP]":
        """Like the constructor, but hands back the failure instead of raising."""
        return _build(cls, *args, **kwargs)

    def counter(self, instant: Instant) -> OTPResult[int]:
        return otp_core.derive_counter(instant, self.time_step)

    def remaining(self, instant: Instant) -> OTPResult[int]:
        return otp_core.seconds_remaining(instant, self.time_step)

    def generate(self, instant: Instant) -> OTPResult[str]:
        """
        Code for a point in time.

        Returns:
            OTPResult with the code, or with PreEpochTime for instants before 1970.
        """
        counter = self.counter(instant)
        if not counter.ok:
            return OTPResult.failure(counter.error)
        return OTPResult.success(
            otp_core.generate_otp(self.secret, self.algorithm, counter.value, self.digits)
        )

    def generate_from_seconds(self, seconds: int) -> str:
        """Code for whole, non-negative seconds since the epoch (no epoch check)."""
        counter = otp_core.counter_from_seconds(seconds, self.time_step)
        return otp_core.generate_otp(self.secret, self.algorithm, counter, self.digits)

    def now(self, clock: Callable[[], float] = time.time) -> str:
        return self.generate(clock()).unwrap()

    def verify(self, code: str, instant: Instant, window: int = 0) -> bool:
        """
        Check ``code`` against the step for ``instant`` and ``window`` steps either side.

        Pre-epoch instants, instants past the last 64-bit counter and
        out-of-range neighbours never match.
        """
        if window < 0:
            raise ValueError("window must be >= 0")
        try:
            counter = self.counter(instant)
        except CounterOutOfRange:
            return False
        if not counter.ok:
            return False
        for offset in range(-window, window + 1):
            candidate = counter.value + offset
            if candidate < 0 or candidate > MAX_COUNTER:
                continue
            expected = otp_core.generate_otp(self.secret, self.algorithm, candidate, self.digits)
            if _codes_equal(expected, code):
                return True
        return False
