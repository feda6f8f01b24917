"""
judge.py — Final verdict: weigh the evidence conclusion, both sides'
scores and the raw findings into one risk score.

Verdict Formula
---------------
seed   = evidence conclusion score (50 when absent)
       + min(scam reports × 20, 40)
score  = 0.4 × seed + 0.6 × prosecution severity
       − (plausibility − 50) × 0.2   only if plausibility > 50 and severity < 60
       + 8 × detected pattern count
       + 15 if mixer usage
       − 5  if exchange interaction and severity < 50

Clamped to [0, 100], rounded to 2 decimals, then mapped with
``classify_score`` (≥ 70 fraud, ≤ 40 clean, otherwise inconclusive).
"""

from __future__ import annotations

import logging
from typing import List

from forensics.models import (
    DefenseCase,
    EvidenceSummary,
    JudgeVerdict,
    ProsecutionCase,
    Verdict,
    clamp_score,
)
from forensics.weights import classify_score

logger = logging.getLogger(__name__)

NEUTRAL_SEED: float = 50.0
REPORT_SEED_EACH: float = 20.0
REPORT_SEED_CAP: float = 40.0
SEED_SHARE: float = 0.4
SEVERITY_SHARE: float = 0.6
DOUBT_FACTOR: float = 0.2
DOUBT_MAX_SEVERITY: float = 60.0
PATTERN_BONUS: float = 8.0
MIXER_BONUS: float = 15.0
CEX_DISCOUNT: float = 5.0
CEX_MAX_SEVERITY: float = 50.0

# Evaluation bands used in the written reasoning
OVERWHELMING_SEVERITY: float = 80.0
COMPELLING_SEVERITY: float = 70.0
CONCERNING_SEVERITY: float = 40.0
CREDIBLE_PLAUSIBILITY: float = 70.0
REASONABLE_PLAUSIBILITY: float = 40.0

ALWAYS_RECOMMEND: List[str] = [
    "NEVER SHARE PRIVATE KEYS: Legitimate projects never ask for your private keys "
    "or seed phrases.",
    "USE HARDWARE WALLETS: For significant holdings, always use hardware wallet security.",
]


# ── Public API ───────────────────────────────────────────────────────────────

def render_verdict(
    evidence: EvidenceSummary,
    prosecution: ProsecutionCase,
    defense: DefenseCase,
) -> JudgeVerdict:
    """Combine all stage outputs into the final verdict.

    Parameters
    ----------
    evidence : EvidenceSummary
    prosecution : ProsecutionCase
    defense : DefenseCase

    Returns
    -------
    JudgeVerdict
        Verdict, risk score (2 decimals), reasoning text and
        recommendations.
    """
    score = compute_risk_score(evidence, prosecution, defense)
    verdict = classify_score(score)

    logger.info(
        "Verdict for %s: %s (risk %.2f, severity %.1f, plausibility %.1f)",
        evidence.wallet, verdict.value, score,
        prosecution.severity_score, defense.plausibility_score,
    )
    return JudgeVerdict(
        verdict=verdict,
        risk_score=score,
        reasoning=_reasoning(evidence, prosecution, defense, verdict, score),
        recommendations=_recommendations(evidence, verdict),
    )


def compute_risk_score(
    evidence: EvidenceSummary,
    prosecution: ProsecutionCase,
    defense: DefenseCase,
) -> float:
    seed = evidence.conclusion.risk_score if evidence.conclusion else NEUTRAL_SEED
    if evidence.scam_reports > 0:
        seed += min(evidence.scam_reports * REPORT_SEED_EACH, REPORT_SEED_CAP)

    severity = prosecution.severity_score
    plausibility = defense.plausibility_score

    score = SEED_SHARE * seed + SEVERITY_SHARE * severity
    if plausibility > 50 and severity < DOUBT_MAX_SEVERITY:
        score -= (plausibility - 50) * DOUBT_FACTOR
    score += len(evidence.patterns) * PATTERN_BONUS
    if evidence.indicators.mixer_usage:
        score += MIXER_BONUS
    if evidence.indicators.cex_interaction and severity < CEX_MAX_SEVERITY:
        score -= CEX_DISCOUNT

    return round(clamp_score(score), 2)


# ── Reasoning ────────────────────────────────────────────────────────────────

def _reasoning(
    evidence: EvidenceSummary,
    prosecution: ProsecutionCase,
    defense: DefenseCase,
    verdict: Verdict,
    score: float,
) -> str:
    parts = ["JUDICIAL ANALYSIS AND VERDICT", ""]

    parts.append("PROSECUTION EVALUATION:")
    parts.append(_prosecution_band(prosecution.severity_score))
    if prosecution.key_points:
        parts.append(
            f"The prosecution presented {len(prosecution.key_points)} point(s) with a "
            f"severity of {prosecution.severity_score:g}/100:"
        )
        parts.extend(f"- {point}" for point in prosecution.key_points)
    else:
        parts.append("The prosecution presented no specific fraud indicators.")
    parts.append("")

    parts.append("DEFENSE EVALUATION:")
    parts.append(_defense_band(evidence, prosecution, defense))
    parts.append(
        f"The defense offered a plausibility of {defense.plausibility_score:g}/100 "
        f"with {len(defense.mitigating_factors)} mitigating factor(s)."
    )
    parts.extend(f"- {factor}" for factor in defense.mitigating_factors)
    parts.append("")

    parts.append("CRITICAL EVIDENCE:")
    parts.append(f"- Transactions analysed: {evidence.tx_count}")
    parts.append(f"- Unique counterparties: {evidence.unique_counterparties}")
    parts.append(f"- Detected patterns: {len(evidence.patterns)}")
    parts.extend(f"  * {pattern}" for pattern in evidence.high_risk_patterns)
    parts.append(f"- Mixer usage: {'YES' if evidence.indicators.mixer_usage else 'NO'}")
    parts.append(
        f"- Exchange interaction: {'YES' if evidence.indicators.cex_interaction else 'NO'}"
    )
    parts.append(f"- Scam reports: {evidence.scam_reports}")
    parts.append("")

    parts.append("DETERMINATION:")
    if verdict is Verdict.LIKELY_FRAUD:
        parts.append(
            f"With a risk score of {score:g}/100 the court finds this wallet LIKELY "
            "FRAUDULENT. The weight of evidence exceeds reasonable doubt."
        )
    elif verdict is Verdict.LIKELY_CLEAN:
        parts.append(
            f"With a risk score of {score:g}/100 the court finds this wallet LIKELY "
            "CLEAN. No substantial evidence of fraudulent activity was established."
        )
    else:
        parts.append(
            f"With a risk score of {score:g}/100 the court cannot reach a definitive "
            "verdict. The case is INCONCLUSIVE and warrants caution."
        )

    return "\n".join(parts)


def _prosecution_band(severity: float) -> str:
    if severity >= OVERWHELMING_SEVERITY:
        return (
            "The court finds the prosecution's evidence OVERWHELMING, with multiple "
            "verified indicators of fraudulent activity."
        )
    if severity >= COMPELLING_SEVERITY:
        return (
            "The court finds the prosecution's evidence compelling, with corroborating "
            "red flags that make a strong case for fraudulent activity."
        )
    if severity >= CONCERNING_SEVERITY:
        return (
            "The court acknowledges legitimate concerns, though the evidence is not "
            "overwhelming."
        )
    return "The court finds the prosecution's case weak and insufficient to support fraud."


def _defense_band(
    evidence: EvidenceSummary,
    prosecution: ProsecutionCase,
    defense: DefenseCase,
) -> str:
    if prosecution.severity_score >= OVERWHELMING_SEVERITY and evidence.scam_reports > 0:
        return (
            "The court finds the defense INSUFFICIENT to overcome verified scam reports. "
            "Alternative explanations are implausible against community-verified fraud."
        )
    if defense.plausibility_score >= CREDIBLE_PLAUSIBILITY:
        return (
            "The court finds the defense's alternative explanations credible and "
            "supported by legitimate activity patterns."
        )
    if defense.plausibility_score >= REASONABLE_PLAUSIBILITY:
        return (
            "The defense offered reasonable alternative explanations that create doubt "
            "about the prosecution's claims."
        )
    return (
        "The court finds the defense's explanations unconvincing given the weight of "
        "suspicious patterns."
    )


def _recommendations(evidence: EvidenceSummary, verdict: Verdict) -> List[str]:
    recs: List[str] = []

    if verdict is Verdict.LIKELY_FRAUD:
        recs.append(
            "AVOID ALL INTERACTION: Do not send funds to or approve contracts for this wallet."
        )
        recs.append(
            "REPORT: File a report with ChainAbuse and the relevant exchange compliance teams."
        )
        if evidence.graph.edges:
            recs.append(
                "CHECK CONNECTIONS: Review your own history for transfers with this "
                "wallet's counterparties."
            )
        recs.append("MONITOR: Watch this address for further movement of funds.")
        if evidence.indicators.mixer_usage:
            recs.append(
                "TRACE OBFUSCATION: Mixer use detected; professional chain analysis may "
                "be needed to follow the funds."
            )
    elif verdict is Verdict.LIKELY_CLEAN:
        recs.append("STANDARD PRECAUTIONS: Apply normal due diligence before transacting.")
        recs.append("VERIFY CONTRACTS: Check any contract addresses against official sources.")
        recs.append(
            "STAY VIGILANT: A clean history does not guarantee future behaviour."
        )
        if evidence.indicators.cex_interaction:
            recs.append(
                "EXCHANGE ACTIVITY: Interaction with regulated exchanges supports "
                "legitimate use."
            )
    else:
        recs.append("EXTREME CAUTION: Treat this wallet as potentially risky.")
        recs.append("LIMITED EXPOSURE: Start with small amounts if you must transact.")
        recs.append(
            "INDEPENDENT VERIFICATION: Confirm the counterparty's identity through "
            "another channel."
        )
        recs.append(
            "RISK THRESHOLD: Only proceed if the potential loss is within your tolerance."
        )
        recs.append(
            "SECOND OPINION: Consult another analysis tool or a security professional."
        )

    recs.extend(ALWAYS_RECOMMEND)
    return recs
