"""
FLASK APP ENTRY POINT - OTP BACKEND SERVER
==========================================

Builds the Flask app, enables CORS and registers the OTP blueprint.

MAIN FEATURES
- Application factory so tests can build isolated apps
- CORS enabled for frontend integration
- Stateless: secrets arrive with each request and are never stored
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .routes import otp_bp

DEFAULT_CONFIG = {
    # largest +/- step window accepted by /api/verify_totp
    "OTP_MAX_WINDOW": 10,
    # largest counter look-ahead accepted by /api/verify_hotp
    "OTP_MAX_LOOK_AHEAD": 100,
}


def create_app(config=None) -> Flask:
    """
    Create the OTP API app.

    Arguments:
        config: optional mapping applied over DEFAULT_CONFIG
    """
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    if config:
        app.config.from_mapping(config)

    if app.debug and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")

    # Allow a frontend served from another origin to call the API
    CORS(app)

    app.register_blueprint(otp_bp)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "otp-engine",
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if str(rule).startswith("/api/")
            ),
        })

    return app


if __name__ == '__main__':
    create_app({"DEBUG": True}).run(host='127.0.0.1', port=5000)
