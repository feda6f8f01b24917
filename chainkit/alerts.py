"""
alerts.py — Short verdict alerts for chat / webhook delivery.

Delivery is best-effort: a failed POST is logged and reported as ``False``,
never raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from chainkit import config
from forensics.models import CourtCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alert:
    wallet_short: str
    verdict_upper: str
    risk_score_percent: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wallet": self.wallet_short,
            "verdict": self.verdict_upper,
            "riskScore": self.risk_score_percent,
        }


def shorten_address(address: str) -> str:
    """``0x1234...abcd`` form: first 6 and last 4 characters."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def build_alert(case: CourtCase) -> Alert:
    return Alert(
        wallet_short=shorten_address(case.wallet),
        verdict_upper=case.verdict.verdict.value.upper(),
        risk_score_percent=f"{case.verdict.risk_score:g}%",
    )


def format_alert(alert: Alert) -> str:
    return (
        f"Wallet Court verdict for {alert.wallet_short}: "
        f"{alert.verdict_upper} (risk {alert.risk_score_percent})"
    )


def deliver_alert(
    alert: Alert,
    webhook_url: Optional[str] = None,
    timeout: float = config.FETCH_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> bool:
    """POST *alert* to the configured webhook.

    Returns
    -------
    bool
        True when the webhook accepted the alert; False when no webhook is
        configured or the delivery failed.
    """
    url = webhook_url if webhook_url is not None else config.ALERT_WEBHOOK_URL
    if not url:
        logger.debug("No alert webhook configured; skipping delivery")
        return False

    payload = {"text": format_alert(alert), **alert.to_dict()}
    http = session or requests
    try:
        resp = http.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Alert delivery to %s failed: %s", url, exc)
        return False

    logger.info("Alert delivered for %s", alert.wallet_short)
    return True
