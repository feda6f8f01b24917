"""
json_export.py — Generate the court report document consumed by the UI and
by downstream tooling.

Output Schema
-------------
{
  "wallet": "0x...",
  "chain": "Ethereum Mainnet",
  "timestamp": "2025-06-01T08:00:00Z",
  "evidence": { ..., "graph": {"nodes": [...], "edges": [...]} },
  "prosecutorCase": { "keyPoints", "narrative", "highlightedNodes", "severityScore" },
  "defenderCase": { "keyPoints", "narrative", "mitigatingFactors", "plausibilityScore" },
  "judgeVerdict": { "verdict", "riskScore", "reasoning", "recommendations" }
}
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from forensics.models import CourtCase


def generate_court_report(case: CourtCase) -> Dict[str, Any]:
    """Build the JSON-serialisable report dictionary for one investigation.

    Parameters
    ----------
    case : CourtCase
        Output of ``forensics.pipeline.investigate_wallet``.

    Returns
    -------
    dict
        The complete report matching the schema above.
    """
    return {
        "wallet": case.wallet,
        "chain": case.chain,
        "timestamp": case.timestamp,
        "evidence": case.evidence.to_dict(),
        "prosecutorCase": case.prosecution.to_dict(),
        "defenderCase": case.defense.to_dict(),
        "judgeVerdict": case.verdict.to_dict(),
    }


def report_to_json_string(report: Dict[str, Any], indent: int = 2) -> str:
    """Serialise the report dict to a pretty-printed JSON string."""
    return json.dumps(report, indent=indent, default=str)


def build_counterparty_table(report: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Rows for a counterparty summary table, highest volume first.

    Columns: Address, Type, Risk, Transactions, ETH Volume, Highlighted
    """
    highlighted = set(report.get("prosecutorCase", {}).get("highlightedNodes", []))
    nodes = report.get("evidence", {}).get("graph", {}).get("nodes", [])

    rows: List[Dict[str, Any]] = []
    for node in nodes:
        if node["type"] == "target":
            continue
        rows.append(
            {
                "Address": node["id"],
                "Type": node["type"],
                "Risk": node["riskLevel"],
                "Transactions": node["txCount"],
                "ETH Volume": node["ethVolume"],
                "Highlighted": node["id"] in highlighted,
            }
        )
    rows.sort(key=lambda r: -float(r["ETH Volume"]))
    return rows
