"""
OTP BACKEND API ROUTES - FLASK BLUEPRINT

Stateless JSON endpoints over otp_engine. The client sends the Base32
secret with every request; nothing is stored server side and secrets are
never logged.

EXAMPLES:
curl -X POST http://localhost:5000/api/totp -H "Content-Type: application/json" \
     -d '{"secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", "timestamp": 59, "digits": 8}'
curl -X POST http://localhost:5000/api/hotp -H "Content-Type: application/json" \
     -d '{"secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", "counter": 1}'
"""

import base64
import binascii
import logging
import math
import time

from flask import Blueprint, current_app, jsonify, request

from otp_engine import HOTP, TOTP, OTPError, PreEpochTime
from otp_engine.otp_core import DEFAULT_DIGITS, DEFAULT_TIME_STEP

logger = logging.getLogger(__name__)

otp_bp = Blueprint('otp', __name__, url_prefix='/api')


class RequestError(ValueError):
    """Malformed request body (missing field, wrong type, bad Base32)."""


def decode_secret(secret_b32) -> bytes:
    """
    Base32-decode the secret sent by the client (case-insensitive, padding optional).

    Raises:
        RequestError: if the value is not valid Base32
    """
    if not isinstance(secret_b32, str) or not secret_b32.strip():
        raise RequestError("Secret is required")
    secret = secret_b32.strip().replace(" ", "")
    missing_padding = len(secret) % 8
    if missing_padding:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        # b32decode raises a plain ValueError for non-ASCII input
        raise RequestError("Invalid Base32 secret") from e


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestError("JSON body required")
    return data


def _int_field(data: dict, name: str, default=None, required: bool = False) -> int:
    value = data.get(name, default)
    if value is None:
        if required:
            raise RequestError(f"{name.capitalize()} is required")
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise RequestError(f"{name} must be an integer")
    return value


def _timestamp(data: dict):
    value = data.get('timestamp')
    if value is None:
        return time.time()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RequestError("timestamp must be a number of seconds since the Unix epoch")
    if isinstance(value, float) and not math.isfinite(value):
        raise RequestError("timestamp must be a number of seconds since the Unix epoch")
    return value


def _code_field(data: dict) -> str:
    code = data.get('code')
    if not isinstance(code, str) or not code:
        raise RequestError("Code is required")
    return code


def _bounded(value: int, name: str, limit_key: str) -> int:
    limit = current_app.config[limit_key]
    if value < 0 or value > limit:
        raise RequestError(f"{name} must be between 0 and {limit}")
    return value


def _build_totp(data: dict) -> TOTP:
    return TOTP(
        decode_secret(data.get('secret')),
        digits=_int_field(data, 'digits', DEFAULT_DIGITS),
        time_step=_int_field(data, 'period', DEFAULT_TIME_STEP),
        algorithm=data.get('algorithm') or 'SHA1',
    )


def _build_hotp(data: dict) -> HOTP:
    return HOTP(
        decode_secret(data.get('secret')),
        digits=_int_field(data, 'digits', DEFAULT_DIGITS),
        algorithm=data.get('algorithm') or 'SHA1',
    )


@otp_bp.errorhandler(RequestError)
def handle_request_error(e):
    logger.warning("Rejected %s %s: %s", request.method, request.path, e)
    return jsonify({"error": str(e), "kind": "bad_request"}), 400


@otp_bp.errorhandler(OTPError)
def handle_otp_error(e):
    logger.warning("Rejected %s %s: %s", request.method, request.path, e)
    status = 422 if isinstance(e, PreEpochTime) else 400
    return jsonify({"error": str(e), "kind": e.kind.value}), status


@otp_bp.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})


@otp_bp.route('/totp', methods=['POST'])
def get_totp():
    """
    TOTP CODE FOR A POINT IN TIME

    Input (JSON body):
      {
        "secret": "GEZD...",    # REQUIRED - Base32 secret
        "timestamp": 59,        # seconds since epoch (default: server clock)
        "digits": 6,            # 6..8
        "period": 30,           # time step in seconds
        "algorithm": "SHA1"     # SHA1 / SHA256 / SHA512
      }

    Output:
      {"code": "287082", "counter": 1, "remaining": 1, "period": 30}
    """
    data = _json_body()
    totp = _build_totp(data)
    timestamp = _timestamp(data)

    result = totp.generate(timestamp)
    if not result.ok:
        raise result.error

    return jsonify({
        "code": result.value,
        "counter": totp.counter(timestamp).value,
        "remaining": totp.remaining(timestamp).value,
        "period": totp.time_step,
    })


@otp_bp.route('/hotp', methods=['POST'])
def get_hotp():
    """
    HOTP CODE FOR A COUNTER

    Input: {"secret": "GEZD...", "counter": 1, "digits": 6, "algorithm": "SHA1"}
    Output: {"code": "287082", "counter": 1}
    """
    data = _json_body()
    hotp = _build_hotp(data)
    counter = _int_field(data, 'counter', required=True)

    return jsonify({"code": hotp.generate(counter), "counter": counter})


@otp_bp.route('/verify_totp', methods=['POST'])
def verify_totp_route():
    """
    VERIFY A TOTP CODE

    Input: {"secret": "GEZD...", "code": "94287082", "timestamp": 59, "window": 1, ...}
    Output: {"valid": true} or {"valid": false}

    window=1 also accepts the previous and the next time step.
    """
    data = _json_body()
    code = _code_field(data)
    totp = _build_totp(data)
    window = _bounded(_int_field(data, 'window', 0), 'window', 'OTP_MAX_WINDOW')

    valid = totp.verify(code, _timestamp(data), window=window)
    return jsonify({"valid": valid})


@otp_bp.route('/verify_hotp', methods=['POST'])
def verify_hotp_route():
    """
    VERIFY A HOTP CODE

    Input: {"secret": "GEZD...", "code": "287082", "counter": 0, "look_ahead": 1, ...}
    Output:
      {"valid": true, "new_counter": 2}   # counter to store for the next attempt
      {"valid": false, "new_counter": 0}
    """
    data = _json_body()
    code = _code_field(data)
    hotp = _build_hotp(data)
    counter = _int_field(data, 'counter', required=True)
    look_ahead = _bounded(_int_field(data, 'look_ahead', 0), 'look_ahead', 'OTP_MAX_LOOK_AHEAD')

    valid, new_counter = hotp.verify(code, counter, look_ahead=look_ahead)
    return jsonify({"valid": valid, "new_counter": new_counter})
