"""
defense.py — The case for innocence.

Starts from a neutral 50 and adds plausibility for every benign
explanation the evidence supports.

Plausibility Offsets
--------------------
Factor                          | Effect
Each detected pattern           | + defense offset from PATTERN_WEIGHTS
Mixer usage / no mixer          | + 5 / + 15
Exchange interaction            | + 20
Scam reports / none             | − 10 / + 25
Wallet age > 180 / > 30 days    | + 20 / + 10
|Net flow| < 10 ETH             | + 15
Prosecution severity < 40 / 70  | + 20 / + 10
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from forensics.models import (
    DefenseCase,
    EvidenceSummary,
    PatternKind,
    ProsecutionCase,
    clamp_score,
)
from forensics.weights import weight_for

BASELINE: float = 50.0
MIXER_PRESENT_OFFSET: float = 5.0
NO_MIXER_OFFSET: float = 15.0
CEX_OFFSET: float = 20.0
REPORTED_PENALTY: float = 10.0
NO_REPORTS_OFFSET: float = 25.0
ESTABLISHED_DAYS: int = 180
ESTABLISHED_OFFSET: float = 20.0
MATURE_DAYS: int = 30
MATURE_OFFSET: float = 10.0
BALANCED_FLOW_ETH: float = 10.0
BALANCED_FLOW_OFFSET: float = 15.0
WEAK_PROSECUTION: float = 40.0
WEAK_PROSECUTION_OFFSET: float = 20.0
MODERATE_PROSECUTION: float = 70.0
MODERATE_PROSECUTION_OFFSET: float = 10.0

# Benign explanation offered for each heuristic
ALTERNATIVES: Dict[PatternKind, Tuple[str, str]] = {
    PatternKind.VANITY_ADDRESS: (
        "PROJECT BRANDING",
        "Vanity addresses are also generated by legitimate projects and collectors "
        "for branding."
    ),
    PatternKind.RAPID_DRAIN: (
        "AUTOMATED TRADING",
        "Fast in-and-out movement matches arbitrage bots, DEX routing and "
        "exchange hot-wallet sweeps."
    ),
    PatternKind.HONEYPOT: (
        "COLD STORAGE",
        "A receive-only wallet may simply be cold storage or a long-term savings "
        "address."
    ),
    PatternKind.DUST_ATTACK: (
        "RECEIVED AIRDROPS",
        "Dust is sent TO a wallet by third parties; receiving it says nothing about "
        "the owner's intent."
    ),
    PatternKind.NEW_WALLET_BURST: (
        "TOKEN LAUNCH ACTIVITY",
        "Burst activity on a fresh wallet fits airdrop farming, testing or a newly "
        "launched trading strategy."
    ),
    PatternKind.HIGH_VOLUME_SPIKE: (
        "WHALE FLOWS",
        "High volume is typical of market makers, funds and institutional desks."
    ),
}


# ── Public API ───────────────────────────────────────────────────────────────

def build_defense(evidence: EvidenceSummary, prosecution: ProsecutionCase) -> DefenseCase:
    """Score how plausibly the evidence has an innocent explanation.

    Parameters
    ----------
    evidence : EvidenceSummary
        Completed evidence stage output.
    prosecution : ProsecutionCase
        Used only for its severity score.

    Returns
    -------
    DefenseCase
        Key points, mitigating factors, narrative and clamped plausibility.
    """
    key_points: List[str] = []
    mitigating: List[str] = []
    plausibility = BASELINE

    # ── 1. Alternative explanations per pattern ──────────────────────────
    for pattern in evidence.patterns:
        weight = weight_for(pattern.kind)
        if weight is None:
            continue
        headline, explanation = ALTERNATIVES[pattern.kind]
        key_points.append(f"{headline}: {explanation}")
        plausibility += weight.defense

    # ── 2. Privacy tools ─────────────────────────────────────────────────
    if evidence.indicators.mixer_usage:
        key_points.append(
            "PRIVACY RIGHTS: Mixer use alone is not proof of crime; privacy tools "
            "have legitimate users."
        )
        mitigating.append("Mixer use reflects privacy awareness, not necessarily criminal intent")
        plausibility += MIXER_PRESENT_OFFSET
    else:
        mitigating.append("No interaction with known mixers")
        plausibility += NO_MIXER_OFFSET

    # ── 3. Exchanges ─────────────────────────────────────────────────────
    if evidence.indicators.cex_interaction:
        key_points.append(
            "REGULATED ACTIVITY: The wallet transacts with centralized exchanges that "
            "enforce KYC and AML controls."
        )
        mitigating.append("Interacts with regulated exchanges")
        plausibility += CEX_OFFSET

    # ── 4. Community reports ─────────────────────────────────────────────
    if evidence.scam_reports > 0:
        key_points.append(
            "UNVERIFIED REPORTS: Community reports can be mistaken or malicious and "
            "have not been adjudicated."
        )
        plausibility -= REPORTED_PENALTY
    else:
        mitigating.append("No scam reports in public databases")
        plausibility += NO_REPORTS_OFFSET

    # ── 5. Wallet history ────────────────────────────────────────────────
    if evidence.metrics is not None:
        age = evidence.metrics.wallet_age_days
        if age > ESTABLISHED_DAYS:
            key_points.append(
                f"ESTABLISHED HISTORY: The wallet has been active for {age} days; "
                "scam wallets are rarely kept this long."
            )
            mitigating.append(f"Established wallet ({age} days)")
            plausibility += ESTABLISHED_OFFSET
        elif age > MATURE_DAYS:
            mitigating.append(f"Wallet active for {age} days")
            plausibility += MATURE_OFFSET

        if abs(evidence.metrics.net_flow) < BALANCED_FLOW_ETH:
            key_points.append(
                f"BALANCED FLOWS: A net flow of {evidence.metrics.net_flow:.2f} ETH is "
                "consistent with ordinary personal use."
            )
            mitigating.append("Balanced inflow and outflow")
            plausibility += BALANCED_FLOW_OFFSET

    # ── 6. Strength of the prosecution ───────────────────────────────────
    if prosecution.severity_score < WEAK_PROSECUTION:
        key_points.append(
            f"WEAK PROSECUTION CASE: A severity of {prosecution.severity_score:g}/100 "
            "shows limited evidence of fraud."
        )
        mitigating.append("Prosecution evidence is weak")
        plausibility += WEAK_PROSECUTION_OFFSET
    elif prosecution.severity_score < MODERATE_PROSECUTION:
        key_points.append(
            f"AMBIGUOUS EVIDENCE: A severity of {prosecution.severity_score:g}/100 is "
            "not conclusive; ambiguity favors the presumption of innocence."
        )
        mitigating.append("Prosecution evidence is circumstantial")
        plausibility += MODERATE_PROSECUTION_OFFSET

    plausibility = clamp_score(plausibility)

    return DefenseCase(
        key_points=key_points,
        narrative=_narrative(evidence, key_points, mitigating, plausibility),
        mitigating_factors=mitigating,
        plausibility_score=plausibility,
    )


def _narrative(
    evidence: EvidenceSummary,
    key_points: List[str],
    mitigating: List[str],
    plausibility: float,
) -> str:
    parts = ["THE DEFENSE'S CASE:", ""]
    parts.append(
        f"Every flag raised against wallet {evidence.wallet} deserves an honest "
        "look at its innocent explanations."
    )
    parts.append("")

    if key_points:
        parts.extend(f"{i}. {point}" for i, point in enumerate(key_points, 1))
        parts.append("")

    if mitigating:
        parts.append("MITIGATING FACTORS:")
        parts.extend(f"- {factor}" for factor in mitigating)
        parts.append("")

    parts.append("CONCLUSION OF DEFENSE:")
    if plausibility >= 70:
        parts.append(
            f"With a plausibility of {plausibility:g}/100 the activity is well explained "
            "by legitimate use. The defense asks for a LOW RISK classification."
        )
    elif plausibility >= 40:
        parts.append(
            f"A plausibility of {plausibility:g}/100 leaves reasonable doubt. The "
            "evidence is circumstantial and open to interpretation."
        )
    else:
        parts.append(
            f"At a plausibility of {plausibility:g}/100 the defense concedes that "
            "legitimate explanations are hard to sustain."
        )

    return "\n".join(parts)
