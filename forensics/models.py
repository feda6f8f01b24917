"""
models.py — Typed data model for a wallet investigation.

Every entity here is created fresh per investigation and handed by value to
the next stage.  ``to_dict`` methods produce the camelCase document consumed
by the UI / alerting collaborators (see ``chainkit.json_export``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

WEI_PER_ETH: float = 1e18


# ── Enums ────────────────────────────────────────────────────────────────────

class NodeKind(str, Enum):
    TARGET = "target"
    WALLET = "wallet"
    EXCHANGE = "exchange"
    MIXER = "mixer"
    CONTRACT = "contract"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PatternKind(Enum):
    """Named heuristics.  ``label`` is the greppable prefix of the pattern string."""

    VANITY_ADDRESS = "VANITY ADDRESS"
    RAPID_DRAIN = "RAPID DRAIN"
    HONEYPOT = "HONEYPOT"
    DUST_ATTACK = "DUST ATTACK"
    NEW_WALLET_BURST = "NEW WALLET BURST"
    HIGH_VOLUME_SPIKE = "HIGH VOLUME SPIKE"
    MIXER_INTERACTION = "MIXER INTERACTION"

    @property
    def label(self) -> str:
        return self.value


class Verdict(str, Enum):
    LIKELY_FRAUD = "Likely Fraud"
    LIKELY_CLEAN = "Likely Clean"
    INCONCLUSIVE = "Inconclusive"


# ── Chain data ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Transaction:
    hash: str
    from_address: str
    to_address: str
    value_wei: int
    timestamp: int
    input_data: str = "0x"
    is_error: bool = False

    @property
    def value_eth(self) -> float:
        return self.value_wei / WEI_PER_ETH


@dataclass(frozen=True)
class TokenTransfer:
    hash: str
    from_address: str
    to_address: str
    value: str
    token_name: str = ""
    token_symbol: str = ""
    contract_address: str = ""
    timestamp: int = 0


# ── Graph ────────────────────────────────────────────────────────────────────

@dataclass
class CounterpartyAggregate:
    address: str
    tx_count: int = 0
    total_value_eth: float = 0.0


@dataclass
class GraphNode:
    """Evidence-graph node.  Summary metadata defaults to zero until attached."""

    id: str
    kind: NodeKind
    risk_level: RiskLevel = RiskLevel.LOW
    label: str = ""
    tx_count: int = 0
    eth_volume: float = 0.0
    connection_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "label": self.label,
            "riskLevel": self.risk_level.value,
            "txCount": self.tx_count,
            "ethVolume": f"{self.eth_volume:.4f}",
            "connections": self.connection_count,
        }


@dataclass
class GraphEdge:
    source: str
    target: str
    tx_count: int
    total_value_eth: float
    risk: RiskLevel = RiskLevel.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "txCount": self.tx_count,
            "totalValue": f"{self.total_value_eth:.4f}",
            "risk": self.risk.value,
        }


@dataclass
class EvidenceGraph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    @property
    def target_node(self) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.kind is NodeKind.TARGET), None)

    def nodes_of_kind(self, kind: NodeKind) -> List[GraphNode]:
        return [n for n in self.nodes if n.kind is kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


# ── Indicators & patterns ────────────────────────────────────────────────────

@dataclass
class RiskIndicatorSet:
    """Independent boolean flags.  Flags are raised, never cleared."""

    mixer_usage: bool = False
    new_wallet_pattern: bool = False
    high_volume_spike: bool = False
    cex_interaction: bool = False
    exploit_contract_interaction: bool = False

    def raise_flag(self, name: str) -> None:
        if not hasattr(self, name):
            raise AttributeError(f"Unknown risk indicator: {name}")
        setattr(self, name, True)

    def merge(self, other: "RiskIndicatorSet") -> "RiskIndicatorSet":
        """Return a new set with every flag raised in either operand."""
        return RiskIndicatorSet(
            mixer_usage=self.mixer_usage or other.mixer_usage,
            new_wallet_pattern=self.new_wallet_pattern or other.new_wallet_pattern,
            high_volume_spike=self.high_volume_spike or other.high_volume_spike,
            cex_interaction=self.cex_interaction or other.cex_interaction,
            exploit_contract_interaction=(
                self.exploit_contract_interaction or other.exploit_contract_interaction
            ),
        )

    def to_dict(self) -> Dict[str, bool]:
        return {
            "mixerUsage": self.mixer_usage,
            "newWalletPattern": self.new_wallet_pattern,
            "highVolumeSpike": self.high_volume_spike,
            "cexInteraction": self.cex_interaction,
            "exploitContractInteraction": self.exploit_contract_interaction,
        }


@dataclass(frozen=True)
class DetectedPattern:
    kind: PatternKind
    detail: str

    def __str__(self) -> str:
        return f"{self.kind.label}: {self.detail}"


# ── Reputation ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReputationResult:
    source: str
    is_scam: bool
    details: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source": self.source,
            "isScam": self.is_scam,
            "details": self.details,
        }
        if self.url:
            data["url"] = self.url
        return data


@dataclass
class ReputationSummary:
    scam_reports: int
    summary: str
    results: List[ReputationResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scamReports": self.scam_reports,
            "summary": self.summary,
            "results": [r.to_dict() for r in self.results],
        }


# ── Evidence ─────────────────────────────────────────────────────────────────

@dataclass
class WalletMetrics:
    wallet_age_days: int = 0
    average_tx_value: float = 0.0
    net_flow: float = 0.0
    transaction_frequency: float = 0.0
    largest_transaction: float = 0.0
    smallest_transaction: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "walletAge": self.wallet_age_days,
            "averageTxValue": f"{self.average_tx_value:.4f}",
            "netFlow": f"{self.net_flow:.4f}",
            "transactionFrequency": f"{self.transaction_frequency:.2f}",
            "largestTransaction": f"{self.largest_transaction:.4f}",
            "smallestTransaction": f"{self.smallest_transaction:.4f}",
        }


@dataclass
class EvidenceConclusion:
    verdict: Verdict
    risk_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"verdict": self.verdict.value, "riskScore": self.risk_score}


@dataclass
class EvidenceSummary:
    wallet: str
    chain: str
    first_seen: Optional[int]
    last_seen: Optional[int]
    total_in: float
    total_out: float
    tx_count: int
    unique_counterparties: int
    patterns: List[DetectedPattern]
    graph: EvidenceGraph
    indicators: RiskIndicatorSet
    token_transfer_count: int = 0
    balance_eth: str = "0"
    reputation: Optional[ReputationSummary] = None
    metrics: Optional[WalletMetrics] = None
    conclusion: Optional[EvidenceConclusion] = None

    @property
    def net_flow(self) -> float:
        return self.total_in - self.total_out

    @property
    def high_risk_patterns(self) -> List[str]:
        return [str(p) for p in self.patterns]

    @property
    def scam_reports(self) -> int:
        return self.reputation.scam_reports if self.reputation else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wallet": self.wallet,
            "chain": self.chain,
            "firstSeen": _iso(self.first_seen),
            "lastSeen": _iso(self.last_seen),
            "totalIn": f"{self.total_in:.4f}",
            "totalOut": f"{self.total_out:.4f}",
            "netFlow": f"{self.net_flow:.4f}",
            "txCount": self.tx_count,
            "tokenTransferCount": self.token_transfer_count,
            "balance": self.balance_eth,
            "uniqueCounterparties": self.unique_counterparties,
            "highRiskPatterns": self.high_risk_patterns,
            "graph": self.graph.to_dict(),
            "riskIndicators": self.indicators.to_dict(),
            "webReputation": self.reputation.to_dict() if self.reputation else None,
            "detailedAnalysis": self.metrics.to_dict() if self.metrics else None,
            "conclusion": self.conclusion.to_dict() if self.conclusion else None,
        }


# ── Court stages ─────────────────────────────────────────────────────────────

@dataclass
class ProsecutionCase:
    key_points: List[str]
    narrative: str
    highlighted_node_ids: List[str]
    severity_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyPoints": list(self.key_points),
            "narrative": self.narrative,
            "highlightedNodes": list(self.highlighted_node_ids),
            "severityScore": self.severity_score,
        }


@dataclass
class DefenseCase:
    key_points: List[str]
    narrative: str
    mitigating_factors: List[str]
    plausibility_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyPoints": list(self.key_points),
            "narrative": self.narrative,
            "mitigatingFactors": list(self.mitigating_factors),
            "plausibilityScore": self.plausibility_score,
        }


@dataclass
class JudgeVerdict:
    verdict: Verdict
    risk_score: float
    reasoning: str
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "riskScore": self.risk_score,
            "reasoning": self.reasoning,
            "recommendations": list(self.recommendations),
        }


@dataclass
class CourtCase:
    wallet: str
    chain: str
    timestamp: str
    evidence: EvidenceSummary
    prosecution: ProsecutionCase
    defense: DefenseCase
    verdict: JudgeVerdict


# ── Helpers ──────────────────────────────────────────────────────────────────

def clamp_score(value: float) -> float:
    """Clamp *value* into the closed score range [0, 100]."""
    return float(min(100.0, max(0.0, value)))


def _iso(ts: Optional[int]) -> str:
    if ts is None:
        return "Unknown"
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")
