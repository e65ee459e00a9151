"""Cross-check codes against pyotp, an independent RFC 4226/6238 implementation."""
import base64
import hashlib
import os
from datetime import datetime, timezone

import pyotp
import pytest

from otp_engine import HOTP, TOTP, Algorithm

HASHLIB = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


@pytest.fixture(params=[10, 20, 32, 64])
def secret(request):
    return os.urandom(request.param)


@pytest.mark.parametrize("algorithm", list(Algorithm))
@pytest.mark.parametrize("digits", [6, 7, 8])
def test_totp_matches_pyotp(secret, algorithm, digits):
    ours = TOTP(secret, digits=digits, time_step=30, algorithm=algorithm)
    theirs = pyotp.TOTP(base64.b32encode(secret).decode("ascii"),
                        digits=digits, digest=HASHLIB[algorithm], interval=30)
    for instant in (0, 29, 30, 59, 1111111109, 1234567890, 2000000000, 1700000000):
        assert ours.generate(instant).unwrap() == theirs.at(datetime.fromtimestamp(instant, tz=timezone.utc))


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_hotp_matches_pyotp(secret, algorithm):
    ours = HOTP(secret, digits=6, algorithm=algorithm)
    theirs = pyotp.HOTP(base64.b32encode(secret).decode("ascii"), digest=HASHLIB[algorithm])
    for counter in list(range(20)) + [2 ** 31, 2 ** 40 + 7]:
        assert ours.generate(counter) == theirs.at(counter)
