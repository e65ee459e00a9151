"""
otp_engine package
==================

HOTP/TOTP code generation per RFC 4226 & RFC 6238.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits
  → counter is advanced by the caller (event-based tokens).

- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(unix_seconds / time_step)
  → default time_step = 30s, 6 digits, SHA-1.

- Dynamic truncation:
  4 bytes of the HMAC starting at (last byte & 0x0F), top bit cleared.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from otp_engine import TOTP, Algorithm
>>> totp = TOTP(b"12345678901234567890", digits=8, algorithm=Algorithm.SHA1)
>>> totp.generate(1111111109).unwrap()
'07081804'
"""

from .algorithms import Algorithm
from .errors import (
    CounterOutOfRange,
    ErrorKind,
    InvalidAlgorithm,
    InvalidDigitCount,
    InvalidTimeStep,
    OTPError,
    OTPResult,
    PreEpochTime,
)
from .otp_core import (
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    counter_from_seconds,
    derive_counter,
    generate_otp,
    seconds_remaining,
)
from .otp_generator import HOTP, TOTP

__all__ = [
    "Algorithm",
    "CounterOutOfRange",
    "DEFAULT_DIGITS",
    "DEFAULT_TIME_STEP",
    "ErrorKind",
    "HOTP",
    "InvalidAlgorithm",
    "InvalidDigitCount",
    "InvalidTimeStep",
    "OTPError",
    "OTPResult",
    "PreEpochTime",
    "TOTP",
    "counter_from_seconds",
    "derive_counter",
    "generate_otp",
    "seconds_remaining",
]
