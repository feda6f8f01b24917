"""
patterns.py — Deterministic rule engine over a wallet's transaction list.

Six independent heuristics, always all evaluated against the same inputs:

Heuristic          | Trigger                                              | Indicator
1. Vanity address  | ≥ 8 zero digits, or a character repeated ≥ 6 times   | exploit_contract_interaction
2. New-wallet burst| active span < 7 days AND > 50 transactions           | new_wallet_pattern
3. Volume spike    | total in > 100 ETH OR total out > 100 ETH            | high_volume_spike
4. Dust attack     | > 20 incoming transfers valued in (0, 0.001) ETH     | -
5. Rapid drain     | > 5 outgoing txs ≤ 300 s after the previous tx       | -
6. Honeypot        | total in > 0.1 ETH AND total out == 0                | -
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np
import pandas as pd

from forensics.models import (
    DetectedPattern,
    PatternKind,
    RiskIndicatorSet,
    Transaction,
)

# ── Configurable thresholds ──────────────────────────────────────────────────
VANITY_MIN_ZEROS: int = 8
VANITY_MIN_REPEAT: int = 6
NEW_WALLET_MAX_DAYS: float = 7.0
NEW_WALLET_MIN_TXN: int = 50            # strictly more than this
HIGH_VOLUME_ETH: float = 100.0
DUST_MAX_ETH: float = 0.001
DUST_MIN_COUNT: int = 20                # strictly more than this
RAPID_DRAIN_SECONDS: float = 300.0
RAPID_DRAIN_MIN_COUNT: int = 5          # strictly more than this
HONEYPOT_MIN_IN_ETH: float = 0.1

SECONDS_PER_DAY: int = 86400


@dataclass
class PatternReport:
    patterns: List[DetectedPattern] = field(default_factory=list)
    indicators: RiskIndicatorSet = field(default_factory=RiskIndicatorSet)

    @property
    def kinds(self) -> List[PatternKind]:
        return [p.kind for p in self.patterns]


# ── Public API ───────────────────────────────────────────────────────────────

def detect_patterns(
    target: str,
    transactions: Sequence[Transaction],
    total_in: float,
    total_out: float,
) -> PatternReport:
    """Run all six heuristics and collect pattern strings and indicator flags.

    Parameters
    ----------
    target : str
        Address under investigation.
    transactions : sequence of Transaction
        Ordered transaction list (the same list the graph was built from).
    total_in, total_out : float
        Direction totals in ETH, as accumulated by the graph builder.

    Returns
    -------
    PatternReport
        Patterns in heuristic order; indicators raised by triggered rules.
    """
    report = PatternReport()
    frame = transaction_frame(target, transactions)

    _check_vanity(target, report)
    _check_new_wallet_burst(frame, report)
    _check_volume_spike(total_in, total_out, report)
    _check_dust_attack(frame, report)
    _check_rapid_drain(frame, report)
    _check_honeypot(total_in, total_out, report)

    return report


def transaction_frame(target: str, transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Tabulate the transaction list, preserving list order.

    Columns: incoming (bool), value_eth (float), timestamp (int).
    """
    target_id = target.lower()
    return pd.DataFrame(
        {
            "incoming": [tx.to_address.lower() == target_id for tx in transactions],
            "value_eth": [tx.value_eth for tx in transactions],
            "timestamp": [tx.timestamp for tx in transactions],
        },
        columns=["incoming", "value_eth", "timestamp"],
    ).astype({"incoming": bool, "value_eth": float, "timestamp": "int64"})


def count_zero_digits(address: str) -> int:
    """Number of ``'0'`` digits in the hex body (the ``0x`` prefix is ignored)."""
    return _hex_body(address).count("0")


def longest_run(address: str) -> int:
    """Length of the longest run of one repeated character in the hex body."""
    body = _hex_body(address)
    if not body:
        return 0
    best = run = 1
    for prev, cur in zip(body, body[1:]):
        run = run + 1 if cur == prev else 1
        best = max(best, run)
    return best


# ── Heuristics ───────────────────────────────────────────────────────────────

def _check_vanity(target: str, report: PatternReport) -> None:
    zeros = count_zero_digits(target)
    repeat = re.search(r"(.)\1{%d,}" % (VANITY_MIN_REPEAT - 1), _hex_body(target))
    if zeros >= VANITY_MIN_ZEROS or repeat:
        report.indicators.raise_flag("exploit_contract_interaction")
        report.patterns.append(
            DetectedPattern(
                PatternKind.VANITY_ADDRESS,
                f"Address contains {zeros} zero digits and a longest repeated "
                f"run of {longest_run(target)} characters",
            )
        )


def _check_new_wallet_burst(frame: pd.DataFrame, report: PatternReport) -> None:
    if frame.empty:
        return
    span = int(frame["timestamp"].iloc[-1] - frame["timestamp"].iloc[0])
    age_days = span / SECONDS_PER_DAY
    if age_days < NEW_WALLET_MAX_DAYS and len(frame) > NEW_WALLET_MIN_TXN:
        report.indicators.raise_flag("new_wallet_pattern")
        report.patterns.append(
            DetectedPattern(
                PatternKind.NEW_WALLET_BURST,
                f"{len(frame)} transactions within {age_days:.1f} days of first activity",
            )
        )


def _check_volume_spike(total_in: float, total_out: float, report: PatternReport) -> None:
    if total_in > HIGH_VOLUME_ETH or total_out > HIGH_VOLUME_ETH:
        report.indicators.raise_flag("high_volume_spike")
        report.patterns.append(
            DetectedPattern(
                PatternKind.HIGH_VOLUME_SPIKE,
                f"{total_in:.2f} ETH in, {total_out:.2f} ETH out",
            )
        )


def _check_dust_attack(frame: pd.DataFrame, report: PatternReport) -> None:
    if frame.empty:
        return
    dust_mask = (
        frame["incoming"]
        & (frame["value_eth"] > 0)
        & (frame["value_eth"] < DUST_MAX_ETH)
    )
    dust_count = int(np.count_nonzero(dust_mask.to_numpy()))
    if dust_count > DUST_MIN_COUNT:
        report.patterns.append(
            DetectedPattern(
                PatternKind.DUST_ATTACK,
                f"{dust_count} incoming transfers below {DUST_MAX_ETH} ETH",
            )
        )


def _check_rapid_drain(frame: pd.DataFrame, report: PatternReport) -> None:
    if len(frame) < 2:
        return
    # Gap to the immediately preceding transaction, in list order
    gaps = frame["timestamp"].diff().abs()
    rapid_mask = (~frame["incoming"]) & (gaps <= RAPID_DRAIN_SECONDS)
    rapid_count = int(rapid_mask.sum())
    if rapid_count > RAPID_DRAIN_MIN_COUNT:
        report.patterns.append(
            DetectedPattern(
                PatternKind.RAPID_DRAIN,
                f"{rapid_count} outgoing transfers within "
                f"{int(RAPID_DRAIN_SECONDS)} seconds of the previous transaction",
            )
        )


def _check_honeypot(total_in: float, total_out: float, report: PatternReport) -> None:
    if total_in > HONEYPOT_MIN_IN_ETH and total_out == 0:
        report.patterns.append(
            DetectedPattern(
                PatternKind.HONEYPOT,
                f"{total_in:.4f} ETH received and nothing ever sent",
            )
        )


def _hex_body(address: str) -> str:
    lowered = address.lower()
    return lowered[2:] if lowered.startswith("0x") else lowered
