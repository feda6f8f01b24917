"""
config.py — Central configuration for the wallet court.

Values come from the process environment (optionally seeded from a ``.env``
file) and are read once at import time.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Chain data source ────────────────────────────────────────────────────────
ETHERSCAN_API_KEY = os.environ.get("ETHERSCAN_API_KEY", "")
ETHERSCAN_API_URL = os.environ.get("ETHERSCAN_API_URL", "https://api.etherscan.io/v2/api")
CHAIN_ID = int(os.environ.get("CHAIN_ID", "1"))
CHAIN_NAME = os.environ.get("CHAIN_NAME", "Ethereum Mainnet")

# ── Reputation sources ───────────────────────────────────────────────────────
ETHERSCAN_ADDRESS_URL = os.environ.get("ETHERSCAN_ADDRESS_URL", "https://etherscan.io/address")
CHAINABUSE_API_URL = os.environ.get("CHAINABUSE_API_URL", "https://www.chainabuse.com/api/address")
CHAINABUSE_REPORT_URL = os.environ.get("CHAINABUSE_REPORT_URL", "https://www.chainabuse.com/address")

# Every external fetch is bounded by this many seconds
FETCH_TIMEOUT_SECONDS = float(os.environ.get("FETCH_TIMEOUT_SECONDS", "15"))

# ── Static classification tables ─────────────────────────────────────────────
DEFAULT_ADDRESS_BOOK = Path(__file__).resolve().parent / "data" / "known_addresses.json"
KNOWN_ADDRESSES_PATH = Path(os.environ.get("KNOWN_ADDRESSES_PATH", str(DEFAULT_ADDRESS_BOOK)))

# ── Alerting ─────────────────────────────────────────────────────────────────
ALERT_WEBHOOK_URL = os.environ.get("ALERT_WEBHOOK_URL", "")

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler used by the CLI and the API server."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
