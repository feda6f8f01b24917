"""
evidence.py — Evidence stage: assemble the summary that every court stage
reads, plus derived wallet metrics and the evidence-stage conclusion.

Evidence Conclusion Weights
---------------------------
Factor                    | Effect
Baseline                  | 50 pts (no evidence either way)
Each detected pattern     | + half its prosecution weight
Mixer usage               | + 15 pts
Scam reports              | + 20 pts each, capped at 40
Exchange interaction      | − 10 pts
Wallet older than 180 days| − 10 pts
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np

from chainkit.address_book import AddressBook
from chainkit.graph_builder import build_evidence_graph, to_evidence_graph
from forensics.models import (
    EvidenceConclusion,
    EvidenceSummary,
    ReputationSummary,
    TokenTransfer,
    Transaction,
    WalletMetrics,
    clamp_score,
)
from forensics.patterns import SECONDS_PER_DAY, detect_patterns
from forensics.weights import classify_score, weight_for

logger = logging.getLogger(__name__)

CONCLUSION_BASELINE: float = 50.0
CONCLUSION_PATTERN_FACTOR: float = 0.5
CONCLUSION_MIXER: float = 15.0
CONCLUSION_REPORT_EACH: float = 20.0
CONCLUSION_REPORT_CAP: float = 40.0
CONCLUSION_CEX_DISCOUNT: float = 10.0
CONCLUSION_AGE_DISCOUNT: float = 10.0
ESTABLISHED_WALLET_DAYS: int = 180


# ── Public API ───────────────────────────────────────────────────────────────

def assemble_evidence(
    target: str,
    transactions: Sequence[Transaction],
    address_book: AddressBook,
    chain: str,
    token_transfers: Sequence[TokenTransfer] = (),
    balance_eth: str = "0",
    reputation: Optional[ReputationSummary] = None,
) -> EvidenceSummary:
    """Build the graph, run the pattern detector and package the evidence.

    Graph Builder and Pattern Detector run over the same transaction list.
    Mixer-interaction patterns come from the graph scan and precede the six
    heuristic patterns in the summary.
    """
    built = build_evidence_graph(target, transactions, address_book)
    report = detect_patterns(target, transactions, built.total_in, built.total_out)

    evidence = EvidenceSummary(
        wallet=target,
        chain=chain,
        first_seen=transactions[0].timestamp if transactions else None,
        last_seen=transactions[-1].timestamp if transactions else None,
        total_in=built.total_in,
        total_out=built.total_out,
        tx_count=len(transactions),
        unique_counterparties=len(built.counterparties),
        patterns=built.patterns + report.patterns,
        graph=to_evidence_graph(built.graph),
        indicators=built.indicators.merge(report.indicators),
        token_transfer_count=len(token_transfers),
        balance_eth=balance_eth,
        reputation=reputation,
        metrics=compute_metrics(transactions, built.total_in, built.total_out),
    )
    evidence.conclusion = conclude_evidence(evidence)

    logger.info(
        "Evidence for %s: %d transactions, %d counterparties, %d pattern(s)",
        target, evidence.tx_count, evidence.unique_counterparties, len(evidence.patterns),
    )
    return evidence


def compute_metrics(
    transactions: Sequence[Transaction],
    total_in: float,
    total_out: float,
) -> WalletMetrics:
    """Derived metrics: age, average / largest / smallest value, frequency."""
    if not transactions:
        return WalletMetrics(net_flow=total_in - total_out)

    values = np.array([tx.value_eth for tx in transactions], dtype=float)
    positive = values[values > 0]
    span = transactions[-1].timestamp - transactions[0].timestamp
    age_days = int(math.floor(span / SECONDS_PER_DAY))

    return WalletMetrics(
        wallet_age_days=age_days,
        average_tx_value=(total_in + total_out) / len(transactions),
        net_flow=total_in - total_out,
        transaction_frequency=len(transactions) / max(1, age_days),
        largest_transaction=float(values.max()),
        smallest_transaction=float(positive.min()) if positive.size else 0.0,
    )


def conclude_evidence(evidence: EvidenceSummary) -> Optional[EvidenceConclusion]:
    """Evidence-stage score and verdict; None when there is nothing to judge."""
    if evidence.tx_count == 0:
        return None

    score = CONCLUSION_BASELINE
    for pattern in evidence.patterns:
        weight = weight_for(pattern.kind)
        if weight is not None:
            score += weight.prosecution * CONCLUSION_PATTERN_FACTOR

    if evidence.indicators.mixer_usage:
        score += CONCLUSION_MIXER
    if evidence.scam_reports > 0:
        score += min(evidence.scam_reports * CONCLUSION_REPORT_EACH, CONCLUSION_REPORT_CAP)
    if evidence.indicators.cex_interaction:
        score -= CONCLUSION_CEX_DISCOUNT
    if evidence.metrics and evidence.metrics.wallet_age_days > ESTABLISHED_WALLET_DAYS:
        score -= CONCLUSION_AGE_DISCOUNT

    score = round(clamp_score(score), 2)
    return EvidenceConclusion(verdict=classify_score(score), risk_score=score)
