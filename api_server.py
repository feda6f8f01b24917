"""
api_server.py — Flask JSON API for the Wallet Court.

Run with:  python api_server.py
Call:      curl -X POST localhost:5000/api/investigate \
                -H 'Content-Type: application/json' \
                -d '{"walletAddress": "0x..."}'
"""

import logging
import os

from flask import Flask, jsonify, request

from chainkit.alerts import build_alert, deliver_alert
from chainkit.config import configure_logging
from chainkit.json_export import generate_court_report
from chainkit.sample_data import SCENARIOS, generate_scenario
from chainkit.validation import validate_address
from forensics.pipeline import investigate_wallet

logger = logging.getLogger(__name__)


def create_app(investigate=investigate_wallet) -> Flask:
    """Build the Flask app; *investigate* is injectable for tests."""
    app = Flask(__name__)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/investigate", methods=["POST"])
    def investigate_endpoint():
        body = request.get_json(silent=True) or {}
        address = body.get("walletAddress")

        is_valid, errors = validate_address(address)
        if not is_valid:
            return jsonify({"error": True, "errors": errors}), 400

        kwargs = {}
        sample = body.get("sample")
        if sample:
            if sample not in SCENARIOS:
                return jsonify({"error": True, "errors": [f"Unknown sample '{sample}'."]}), 400
            scenario = generate_scenario(sample, target=address.strip())
            kwargs = {
                "source": scenario.chain_source(),
                "reputation_sources": scenario.reputation_sources(),
            }

        case = investigate(address.strip(), **kwargs)
        if body.get("alert"):
            deliver_alert(build_alert(case))
        return jsonify(generate_court_report(case))

    @app.errorhandler(500)
    def internal_error(exc):
        logger.error("Investigation failed: %s", getattr(exc, "original_exception", exc))
        return jsonify({"error": True, "errors": ["Investigation failed."]}), 500

    return app


app = create_app()


if __name__ == "__main__":
    configure_logging()
    print("\n  Wallet Court — JSON API")
    print("  POST http://localhost:5000/api/investigate\n")
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_ENV") != "production"
    app.run(debug=debug, host="0.0.0.0", port=port)
