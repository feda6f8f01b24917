"""
weights.py — Shared pattern weight table for the three court stages.

Pattern Kind        | Prosecution | Defense offset | Benign framing
VANITY ADDRESS      |   25 pts    |    +10 pts     | Project branding
RAPID DRAIN         |   30 pts    |    +15 pts     | Automated trading
HONEYPOT            |   35 pts    |    +10 pts     | Cold storage / treasury
DUST ATTACK         |   20 pts    |    +15 pts     | Received airdrops
NEW WALLET BURST    |   25 pts    |    +10 pts     | Token launch activity
HIGH VOLUME SPIKE   |   20 pts    |    +10 pts     | Exchange / whale flows

Mixer interaction is scored through the ``mixer_usage`` indicator rather
than through this table, so it has no entry here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from forensics.models import PatternKind, Verdict


@dataclass(frozen=True)
class PatternWeight:
    prosecution: float
    defense: float


PATTERN_WEIGHTS: Dict[PatternKind, PatternWeight] = {
    PatternKind.VANITY_ADDRESS: PatternWeight(prosecution=25.0, defense=10.0),
    PatternKind.RAPID_DRAIN: PatternWeight(prosecution=30.0, defense=15.0),
    PatternKind.HONEYPOT: PatternWeight(prosecution=35.0, defense=10.0),
    PatternKind.DUST_ATTACK: PatternWeight(prosecution=20.0, defense=15.0),
    PatternKind.NEW_WALLET_BURST: PatternWeight(prosecution=25.0, defense=10.0),
    PatternKind.HIGH_VOLUME_SPIKE: PatternWeight(prosecution=20.0, defense=10.0),
}

# Indicator / reputation weights
WEIGHT_MIXER: float = 25.0
WEIGHT_SCAM_REPORT: float = 40.0
WEIGHT_NET_FLOW: float = 15.0
WEIGHT_FREQUENCY: float = 15.0

NET_FLOW_THRESHOLD: float = 50.0     # |net flow| in ETH
FREQUENCY_THRESHOLD: float = 10.0    # transactions per day

# Verdict cut-offs (inclusive on both ends)
FRAUD_THRESHOLD: float = 70.0
CLEAN_THRESHOLD: float = 40.0


def weight_for(kind: PatternKind) -> Optional[PatternWeight]:
    """Return the table entry for *kind*, or None for unweighted kinds."""
    return PATTERN_WEIGHTS.get(kind)


def classify_score(score: float) -> Verdict:
    """Map a [0, 100] score onto exactly one verdict using the 70/40 cut-offs."""
    if score >= FRAUD_THRESHOLD:
        return Verdict.LIKELY_FRAUD
    if score <= CLEAN_THRESHOLD:
        return Verdict.LIKELY_CLEAN
    return Verdict.INCONCLUSIVE
