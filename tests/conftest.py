import pytest

from otp_backend import create_app
from otp_engine import Algorithm

# RFC 6238 Appendix B seeds, one per hash function
RFC_SEEDS = {
    Algorithm.SHA1: b"12345678901234567890",
    Algorithm.SHA256: b"12345678901234567890123456789012",
    Algorithm.SHA512: b"1234567890123456789012345678901234567890123456789012345678901234",
}

# base64.b32encode(b"12345678901234567890")
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture()
def rfc_secret():
    return RFC_SEEDS[Algorithm.SHA1]


@pytest.fixture()
def app():
    app = create_app({"TESTING": True})
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()
