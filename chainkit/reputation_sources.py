"""
reputation_sources.py — Independent wallet reputation lookups.

Each source answers ``check(address) -> ReputationResult | None``.  ``None``
means "no evidence".  Network sources raise on transport errors; the
investigation pipeline bounds every call with a timeout and treats any
failure as no evidence.

Sources
-------
- EtherscanLabelSource : public address page, scanned for warning labels
- ChainAbuseSource     : community abuse-report database
- AddressPatternSource : local vanity / scam-prefix heuristic
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

import requests

from chainkit import config
from forensics.models import ReputationResult

logger = logging.getLogger(__name__)

# Label strings that the explorer shows on flagged addresses
SCAM_LABELS: Sequence[str] = (
    "Fake_Phishing",
    "Phish / Hack",
    "Scam",
    "MEV Bot",
    "Tornado.Cash",
    "Sanctioned",
    "Heist",
    "Exploiter",
)

# Address-pattern thresholds, stricter than the vanity rule in forensics.patterns
PATTERN_MIN_ZEROS: int = 10
PATTERN_MIN_REPEAT: int = 7
KNOWN_SCAM_PREFIXES: Sequence[str] = ("0x00000", "0xdead", "0x0000000000")

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}


class ReputationSource:
    """Base class; subclasses implement ``check``."""

    name: str = "reputation source"

    def check(self, address: str) -> Optional[ReputationResult]:
        raise NotImplementedError


class EtherscanLabelSource(ReputationSource):
    name = "Etherscan Labels"

    def __init__(
        self,
        base_url: str = config.ETHERSCAN_ADDRESS_URL,
        timeout: float = config.FETCH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    def check(self, address: str) -> Optional[ReputationResult]:
        url = f"{self.base_url}/{address}"
        http = self.session or requests
        resp = http.get(url, headers=BROWSER_HEADERS, timeout=self.timeout)
        if not resp.ok:
            logger.info("%s returned HTTP %s for %s", self.name, resp.status_code, address)
            return None

        found = [label for label in SCAM_LABELS if label in resp.text]
        if not found:
            return None
        return ReputationResult(
            source=self.name,
            is_scam=True,
            details=f"Flagged as: {', '.join(found)}",
            url=url,
        )


class ChainAbuseSource(ReputationSource):
    name = "ChainAbuse Community Reports"

    def __init__(
        self,
        api_url: str = config.CHAINABUSE_API_URL,
        report_url: str = config.CHAINABUSE_REPORT_URL,
        timeout: float = config.FETCH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.report_url = report_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    def check(self, address: str) -> Optional[ReputationResult]:
        http = self.session or requests
        resp = http.get(
            f"{self.api_url}/{address}",
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        if not resp.ok:
            logger.info("%s returned HTTP %s for %s", self.name, resp.status_code, address)
            return None

        data = resp.json() or {}
        reports = data.get("reports") or []
        if not reports:
            return None

        categories = ", ".join(str(r.get("category", "unknown")) for r in reports)
        return ReputationResult(
            source=self.name,
            is_scam=True,
            details=f"{len(reports)} scam report(s) filed. Categories: {categories}",
            url=f"{self.report_url}/{address}",
        )


class AddressPatternSource(ReputationSource):
    name = "Pattern Analysis"

    def check(self, address: str) -> Optional[ReputationResult]:
        # zeros are counted over the whole address, prefix included
        lowered = address.lower()
        zero_count = lowered.count("0")
        has_repeat = re.search(r"(.)\1{%d,}" % (PATTERN_MIN_REPEAT - 1), lowered) is not None
        has_prefix = any(lowered.startswith(p) for p in KNOWN_SCAM_PREFIXES)

        if zero_count >= PATTERN_MIN_ZEROS or has_repeat or has_prefix:
            return ReputationResult(
                source=self.name,
                is_scam=True,
                details=(
                    "Suspicious vanity address pattern detected. "
                    f"{zero_count} zeros, repeating chars: {has_repeat}, "
                    f"known scam prefix: {has_prefix}"
                ),
            )
        return None


def default_sources(session: Optional[requests.Session] = None) -> List[ReputationSource]:
    """The three sources queried for every investigation."""
    return [
        EtherscanLabelSource(session=session),
        ChainAbuseSource(session=session),
        AddressPatternSource(),
    ]
