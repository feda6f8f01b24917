"""
prosecution.py — The case for fraud.

Scoring Weights
---------------
Factor                     | Weight
Detected patterns          | per ``forensics.weights.PATTERN_WEIGHTS``
Mixer usage                | 25 pts
Scam reports (any)         | 40 pts
|Net flow| > 50 ETH        | 15 pts
Frequency > 10 tx/day      | 15 pts

The sum is clamped to [0, 100].
"""

from __future__ import annotations

from typing import Callable, Dict, List

from forensics.models import (
    EvidenceSummary,
    NodeKind,
    PatternKind,
    ProsecutionCase,
    clamp_score,
)
from forensics.weights import (
    FREQUENCY_THRESHOLD,
    NET_FLOW_THRESHOLD,
    WEIGHT_FREQUENCY,
    WEIGHT_MIXER,
    WEIGHT_NET_FLOW,
    WEIGHT_SCAM_REPORT,
    weight_for,
)

TEMPORAL_WINDOW_DAYS: int = 30

KEY_POINTS: Dict[PatternKind, Callable[[EvidenceSummary], str]] = {
    PatternKind.VANITY_ADDRESS: lambda ev: (
        "VANITY ADDRESS DECEPTION: The wallet uses a vanity address pattern, a common "
        "way to impersonate legitimate contracts and mislead victims."
    ),
    PatternKind.RAPID_DRAIN: lambda ev: (
        "RAPID FUND DRAINAGE: Funds leave within minutes of arriving, the signature of "
        "phishing operations and wallet drainers."
    ),
    PatternKind.HONEYPOT: lambda ev: (
        "HONEYPOT ACCUMULATION: The wallet only ever receives funds, consistent with a "
        "scam collection address."
    ),
    PatternKind.DUST_ATTACK: lambda ev: (
        "DUST ATTACK PATTERN: Many near-zero transfers were received, a technique used "
        "for wallet tracking and fake airdrop setups."
    ),
    PatternKind.NEW_WALLET_BURST: lambda ev: (
        "SUSPICIOUS BURST ACTIVITY: Heavy activity right after wallet creation points "
        "to automated bot operations typical of pump-and-dump schemes."
    ),
    PatternKind.HIGH_VOLUME_SPIKE: lambda ev: (
        f"EXTREME VOLUME MOVEMENT: {ev.total_in:.4f} ETH received and {ev.total_out:.4f} "
        "ETH sent, volumes consistent with laundering operations."
    ),
}


# ── Public API ───────────────────────────────────────────────────────────────

def build_prosecution(evidence: EvidenceSummary) -> ProsecutionCase:
    """Score the evidence for fraud and write the prosecution's narrative.

    Parameters
    ----------
    evidence : EvidenceSummary
        Completed evidence stage output.

    Returns
    -------
    ProsecutionCase
        Key points (one sentence per triggered factor, reused verbatim by
        the judge), highlighted node ids, narrative and clamped severity.
    """
    key_points: List[str] = []
    highlighted: List[str] = []
    severity = 0.0

    # ── 1. Detected patterns ─────────────────────────────────────────────
    for pattern in evidence.patterns:
        weight = weight_for(pattern.kind)
        if weight is None:
            continue
        key_points.append(KEY_POINTS[pattern.kind](evidence))
        severity += weight.prosecution
        if pattern.kind is PatternKind.VANITY_ADDRESS:
            _highlight(highlighted, evidence.wallet.lower())

    # ── 2. Mixer usage ───────────────────────────────────────────────────
    if evidence.indicators.mixer_usage:
        key_points.append(
            "MIXER CONCEALMENT: The wallet interacted with known mixers, showing intent "
            "to obscure where funds came from and where they went."
        )
        for node in evidence.graph.nodes_of_kind(NodeKind.MIXER):
            _highlight(highlighted, node.id)
        severity += WEIGHT_MIXER

    # ── 3. Community reports ─────────────────────────────────────────────
    if evidence.scam_reports > 0:
        key_points.append(
            f"COMMUNITY-VERIFIED FRAUD: {evidence.scam_reports} independent scam "
            "report(s) are on file against this wallet in public databases."
        )
        severity += WEIGHT_SCAM_REPORT

    # ── 4. Flow and frequency ────────────────────────────────────────────
    if evidence.metrics is not None:
        net_flow = evidence.metrics.net_flow
        if abs(net_flow) > NET_FLOW_THRESHOLD:
            key_points.append(
                f"SIGNIFICANT FUND FLOW: A net flow of {net_flow:.2f} ETH shows "
                "substantial financial operations through this address."
            )
            severity += WEIGHT_NET_FLOW

        frequency = evidence.metrics.transaction_frequency
        if frequency > FREQUENCY_THRESHOLD:
            key_points.append(
                f"AUTOMATED OPERATIONS: {frequency:.1f} transactions per day suggests "
                "bot-driven activity rather than organic use."
            )
            severity += WEIGHT_FREQUENCY

    severity = clamp_score(severity)

    return ProsecutionCase(
        key_points=key_points,
        narrative=_narrative(evidence, key_points, severity),
        highlighted_node_ids=highlighted,
        severity_score=severity,
    )


# ── Internal helpers ─────────────────────────────────────────────────────────

def _highlight(highlighted: List[str], node_id: str) -> None:
    if node_id not in highlighted:
        highlighted.append(node_id)


def _narrative(evidence: EvidenceSummary, key_points: List[str], severity: float) -> str:
    parts = ["THE PROSECUTION'S CASE:", ""]

    if not key_points:
        parts.append(
            f"No direct high-risk pattern was found for wallet {evidence.wallet}. "
            "The absence of obvious red flags does not rule out careful concealment."
        )
    else:
        parts.append(
            f"The investigation of wallet {evidence.wallet} uncovered "
            f"{len(key_points)} indicator(s) of fraudulent intent:"
        )
        parts.append("")
        parts.extend(f"{i}. {point}" for i, point in enumerate(key_points, 1))
    parts.append("")

    metrics = evidence.metrics
    if metrics is not None and evidence.tx_count and metrics.wallet_age_days < TEMPORAL_WINDOW_DAYS:
        parts.append(
            f"TEMPORAL ANALYSIS: The wallet has been active for only "
            f"{metrics.wallet_age_days} day(s). Short-lived wallets are typical of "
            "single-campaign scams."
        )
        parts.append("")

    if evidence.reputation is not None and evidence.scam_reports > 0:
        parts.append("COMMUNITY INTELLIGENCE:")
        parts.append(evidence.reputation.summary)
        parts.append("")

    parts.append("CONCLUSION OF PROSECUTION:")
    if severity >= 70:
        parts.append(
            f"At a severity of {severity:g}/100 the evidence points clearly to malicious "
            "activity. The prosecution asks for a HIGH RISK classification."
        )
    elif severity >= 40:
        parts.append(
            f"A severity of {severity:g}/100 reflects substantial suspicious behaviour. "
            "The prosecution urges extreme caution."
        )
    else:
        parts.append(
            f"At a severity of {severity:g}/100 direct evidence of fraud is limited. "
            "Standard precautions and continued monitoring are advised."
        )

    return "\n".join(parts)
