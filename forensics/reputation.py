"""
reputation.py — Reduce independent reputation lookups to a scam-report count
and a human-readable summary.

Absent sources simply contribute nothing; an empty result set means "no
evidence", not "clean".
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from forensics.models import ReputationResult, ReputationSummary

NO_DATA_SUMMARY = (
    "No public scam reports found in databases. "
    "However, this does not guarantee legitimacy."
)
CLEAN_SUMMARY = "Wallet appears clean in public databases."


def aggregate_reputation(
    results: Iterable[Optional[ReputationResult]],
) -> ReputationSummary:
    """Count scam verdicts across sources and build the summary text.

    ``None`` entries (sources with nothing to say, or that failed) are
    dropped before counting.
    """
    kept: List[ReputationResult] = [r for r in results if r is not None]
    scam = [r for r in kept if r.is_scam]
    return ReputationSummary(
        scam_reports=len(scam),
        summary=_summarize(kept, scam),
        results=kept,
    )


def _summarize(kept: List[ReputationResult], scam: List[ReputationResult]) -> str:
    if not kept:
        return NO_DATA_SUMMARY
    if not scam:
        return CLEAN_SUMMARY

    lines = [f"SCAM ALERTS FOUND ({len(scam)} source(s)):", ""]
    for report in scam:
        lines.append(f"- {report.source}: {report.details}")
        if report.url:
            lines.append(f"  Reference: {report.url}")
    return "\n".join(lines)
