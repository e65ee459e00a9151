"""
errors.py — failure kinds of the OTP engine and the explicit result type.

Every rejected precondition maps to one named error class. Construction
raises them (the object never exists); time-based generation hands them
back inside an ``OTPResult`` instead of raising.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_DIGIT_COUNT = "invalid_digit_count"
    INVALID_TIME_STEP = "invalid_time_step"
    INVALID_ALGORITHM = "invalid_algorithm"
    PRE_EPOCH_TIME = "pre_epoch_time"
    COUNTER_OUT_OF_RANGE = "counter_out_of_range"


class OTPError(ValueError):
    """Base class for all OTP validation failures."""

    kind: ErrorKind


class InvalidDigitCount(OTPError):
    kind = ErrorKind.INVALID_DIGIT_COUNT

    def __init__(self, digits):
        super().__init__(f"digits must be between 6 and 8, got {digits!r}")
        self.digits = digits


class InvalidTimeStep(OTPError):
    kind = ErrorKind.INVALID_TIME_STEP

    def __init__(self, time_step):
        super().__init__(f"time step must be a positive number of seconds, got {time_step!r}")
        self.time_step = time_step


class InvalidAlgorithm(OTPError):
    kind = ErrorKind.INVALID_ALGORITHM

    def __init__(self, name):
        super().__init__(f"unsupported algorithm {name!r}, must be SHA1, SHA256 or SHA512")
        self.name = name


class PreEpochTime(OTPError):
    kind = ErrorKind.PRE_EPOCH_TIME

    def __init__(self, seconds):
        super().__init__(f"time must be at or after the Unix epoch, got {seconds!r}s")
        self.seconds = seconds


class CounterOutOfRange(OTPError):
    kind = ErrorKind.COUNTER_OUT_OF_RANGE

    def __init__(self, counter):
        super().__init__(f"counter must fit in an unsigned 64-bit integer, got {counter!r}")
        self.counter = counter


@dataclass(frozen=True)
class OTPResult(Generic[T]):
    """
    Either a value or the error that prevented computing it.

    >>> res = totp.generate(-1)
    >>> res.ok, res.error.kind
    (False, <ErrorKind.PRE_EPOCH_TIME: 'pre_epoch_time'>)
    """

    value: Optional[T] = None
    error: Optional[OTPError] = None

    @classmethod
    def success(cls, value: T) -> "OTPResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: OTPError) -> "OTPResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def __bool__(self) -> bool:
        return self.ok
