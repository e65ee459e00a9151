"""
algorithms.py — hash functions allowed inside the HOTP HMAC (RFC 6238 §1.2).
"""

import hashlib
from enum import Enum
from typing import Union

from .errors import InvalidAlgorithm


class Algorithm(str, Enum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self):
        """hashlib constructor passed to ``hmac.new``."""
        return _DIGESTS[self]

    @property
    def digest_size(self) -> int:
        return _DIGEST_SIZES[self]

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Accept an Algorithm member or its name in any case ("sha256", "SHA-256").

        Raises:
            InvalidAlgorithm: for anything outside SHA1/SHA256/SHA512
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidAlgorithm(value)
        name = value.strip().upper().replace("-", "")
        try:
            return cls(name)
        except ValueError as e:
            raise InvalidAlgorithm(value) from e


_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}

_DIGEST_SIZES = {
    Algorithm.SHA1: 20,
    Algorithm.SHA256: 32,
    Algorithm.SHA512: 64,
}
