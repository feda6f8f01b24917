"""
chain_source.py — Chain data source for wallet investigations.

``EtherscanSource`` talks to the Etherscan V2 account API.  Every read
returns an empty result (``[]`` / ``"0"``) on any transport or parse
failure, so an unreachable explorer degrades the investigation instead of
aborting it.

``StaticChainSource`` serves pre-built transaction lists (sample data,
tests, offline replays).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from chainkit import config
from chainkit.validation import (
    normalize_token_transfers,
    normalize_transactions,
    parse_wei,
)
from forensics.models import WEI_PER_ETH, TokenTransfer, Transaction

logger = logging.getLogger(__name__)

START_BLOCK: int = 0
END_BLOCK: int = 99999999


class ChainDataSource:
    """Read-only view of one chain, by address."""

    def list_transactions(self, address: str) -> List[Transaction]:
        raise NotImplementedError

    def list_token_transfers(self, address: str) -> List[TokenTransfer]:
        raise NotImplementedError

    def get_balance(self, address: str) -> str:
        raise NotImplementedError


class EtherscanSource(ChainDataSource):
    def __init__(
        self,
        api_key: str = config.ETHERSCAN_API_KEY,
        api_url: str = config.ETHERSCAN_API_URL,
        chain_id: int = config.CHAIN_ID,
        timeout: float = config.FETCH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.chain_id = chain_id
        self.timeout = timeout
        self.session = session
        if not api_key:
            logger.warning("ETHERSCAN_API_KEY is not set; requests will be rate limited")

    # ── Reads ────────────────────────────────────────────────────────────

    def list_transactions(self, address: str) -> List[Transaction]:
        rows = self._account_list("txlist", address)
        logger.info("Etherscan: %d transactions for %s", len(rows), address)
        return normalize_transactions(rows)

    def list_token_transfers(self, address: str) -> List[TokenTransfer]:
        rows = self._account_list("tokentx", address)
        return normalize_token_transfers(rows)

    def get_balance(self, address: str) -> str:
        try:
            data = self._get({"action": "balance", "address": address, "tag": "latest"})
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Etherscan balance lookup failed for %s: %s", address, exc)
            return "0"

        if data.get("status") == "1" and data.get("result") is not None:
            return f"{parse_wei(data['result']) / WEI_PER_ETH:.4f}"
        return "0"

    # ── Internal helpers ─────────────────────────────────────────────────

    def _account_list(self, action: str, address: str) -> List[Dict[str, Any]]:
        params = {
            "action": action,
            "address": address,
            "startblock": START_BLOCK,
            "endblock": END_BLOCK,
            "sort": "asc",
        }
        try:
            data = self._get(params)
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Etherscan %s failed for %s: %s", action, address, exc)
            return []

        result = data.get("result")
        if data.get("status") == "1" and isinstance(result, list):
            return result

        logger.info(
            "Etherscan %s returned no rows for %s (%s)",
            action, address, data.get("message", "no message"),
        )
        return []

    def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {
            "chainid": self.chain_id,
            "module": "account",
            "apikey": self.api_key,
            **params,
        }
        http = self.session or requests
        resp = http.get(self.api_url, params=query, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()


class StaticChainSource(ChainDataSource):
    """In-memory source keyed by lowercase address."""

    def __init__(
        self,
        transactions: Optional[Dict[str, Sequence[Transaction]]] = None,
        token_transfers: Optional[Dict[str, Sequence[TokenTransfer]]] = None,
        balances: Optional[Dict[str, str]] = None,
    ) -> None:
        self._transactions = {k.lower(): list(v) for k, v in (transactions or {}).items()}
        self._token_transfers = {k.lower(): list(v) for k, v in (token_transfers or {}).items()}
        self._balances = {k.lower(): v for k, v in (balances or {}).items()}

    def list_transactions(self, address: str) -> List[Transaction]:
        return list(self._transactions.get(address.lower(), []))

    def list_token_transfers(self, address: str) -> List[TokenTransfer]:
        return list(self._token_transfers.get(address.lower(), []))

    def get_balance(self, address: str) -> str:
        return self._balances.get(address.lower(), "0")
