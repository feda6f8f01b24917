"""
validation.py — Input validation for wallet investigations.

Validates the target address before any fetch runs, and normalises raw
explorer rows into typed ``Transaction`` / ``TokenTransfer`` records.
Malformed numeric fields never propagate: they default to zero.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd

from forensics.models import TokenTransfer, Transaction

# ── Required schema ──────────────────────────────────────────────────────────
ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")

TRANSACTION_COLUMNS = {
    "hash": "string",
    "from": "string",
    "to": "string",
    "value": "wei",
    "timeStamp": "epoch seconds",
    "input": "hex string",
    "isError": "'0' | '1'",
}

TOKEN_TRANSFER_COLUMNS = (
    "hash", "from", "to", "value", "tokenName", "tokenSymbol",
    "contractAddress", "timeStamp",
)


class InvalidAddressError(ValueError):
    """The investigation target is not a well-formed 0x address."""


# ── Public API ───────────────────────────────────────────────────────────────

def validate_address(address: Any) -> Tuple[bool, List[str]]:
    """Check that *address* is a 20-byte hex address with ``0x`` prefix.

    Returns
    -------
    is_valid : bool
    errors : list[str]
        Human-readable error messages (empty when valid).
    """
    errors: List[str] = []

    if not isinstance(address, str) or not address.strip():
        errors.append("Wallet address is required.")
        return False, errors

    candidate = address.strip()
    if not candidate.lower().startswith("0x"):
        errors.append("Wallet address must start with '0x'.")
    elif len(candidate) != 42:
        errors.append(
            f"Wallet address must be 42 characters long (got {len(candidate)})."
        )
    elif not ADDRESS_PATTERN.match(candidate):
        errors.append("Wallet address contains non-hexadecimal characters.")

    return not errors, errors


def require_address(address: Any) -> str:
    """Return the trimmed address or raise ``InvalidAddressError``."""
    is_valid, errors = validate_address(address)
    if not is_valid:
        raise InvalidAddressError("; ".join(errors))
    return address.strip()


def normalize_transactions(rows: Iterable[Dict[str, Any]]) -> List[Transaction]:
    """Convert raw explorer rows into ``Transaction`` records.

    Row order is preserved; downstream heuristics reason about "the
    immediately preceding transaction" in list order.
    """
    df = pd.DataFrame(list(rows))
    if df.empty:
        return []

    for col in TRANSACTION_COLUMNS:
        if col not in df.columns:
            df[col] = None

    cleaned = df.copy()

    for col in ("hash", "from", "to", "input"):
        cleaned[col] = cleaned[col].fillna("").astype(str).str.strip()
    cleaned.loc[cleaned["input"] == "", "input"] = "0x"

    # Wei values overflow int64, so they are parsed one by one
    cleaned["value"] = cleaned["value"].map(parse_wei)

    cleaned["timeStamp"] = (
        pd.to_numeric(cleaned["timeStamp"], errors="coerce").fillna(0).astype("int64")
    )
    cleaned["isError"] = cleaned["isError"].fillna("0").astype(str).str.strip() == "1"

    return [
        Transaction(
            hash=r["hash"],
            from_address=r["from"],
            to_address=r["to"],
            value_wei=int(r["value"]),
            timestamp=int(r["timeStamp"]),
            input_data=r["input"],
            is_error=bool(r["isError"]),
        )
        for r in cleaned[list(TRANSACTION_COLUMNS)].to_dict(orient="records")
    ]


def normalize_token_transfers(rows: Iterable[Dict[str, Any]]) -> List[TokenTransfer]:
    """Convert raw ERC-20 transfer rows into ``TokenTransfer`` records."""
    df = pd.DataFrame(list(rows))
    if df.empty:
        return []

    for col in TOKEN_TRANSFER_COLUMNS:
        if col not in df.columns:
            df[col] = None

    cleaned = df[list(TOKEN_TRANSFER_COLUMNS)].copy()
    for col in TOKEN_TRANSFER_COLUMNS[:-1]:
        cleaned[col] = cleaned[col].fillna("").astype(str).str.strip()
    cleaned["timeStamp"] = (
        pd.to_numeric(cleaned["timeStamp"], errors="coerce").fillna(0).astype("int64")
    )

    return [
        TokenTransfer(
            hash=r["hash"],
            from_address=r["from"],
            to_address=r["to"],
            value=r["value"] or "0",
            token_name=r["tokenName"],
            token_symbol=r["tokenSymbol"],
            contract_address=r["contractAddress"],
            timestamp=int(r["timeStamp"]),
        )
        for r in cleaned.to_dict(orient="records")
    ]


def parse_wei(value: Any) -> int:
    """Parse a base-unit integer; anything unparsable becomes 0."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return int(value) if value == value and value > 0 else 0
    text = str(value).strip()
    if not text:
        return 0
    try:
        parsed = int(text, 16) if text.lower().startswith("0x") else int(text)
    except ValueError:
        try:
            parsed = int(float(text))
        except (ValueError, OverflowError):
            return 0
    return max(parsed, 0)


def quick_stats(target: str, transactions: List[Transaction]) -> dict:
    """Return a small summary dict for the CLI header.

    Keys: total_transactions, incoming, outgoing, failed, date_range.
    """
    if not transactions:
        return {
            "total_transactions": 0,
            "incoming": 0,
            "outgoing": 0,
            "failed": 0,
            "date_range": ("Unknown", "Unknown"),
        }

    df = pd.DataFrame(
        {
            "to": [tx.to_address.lower() for tx in transactions],
            "timestamp": pd.to_datetime([tx.timestamp for tx in transactions], unit="s"),
            "failed": [tx.is_error for tx in transactions],
        }
    )
    incoming = int((df["to"] == target.lower()).sum())
    return {
        "total_transactions": len(df),
        "incoming": incoming,
        "outgoing": len(df) - incoming,
        "failed": int(df["failed"].sum()),
        "date_range": (str(df["timestamp"].min()), str(df["timestamp"].max())),
    }
