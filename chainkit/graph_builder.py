"""
graph_builder.py — Construct the directed evidence star graph for a target
wallet from its transaction list.

The target is the single hub node.  Every counterparty gets exactly one node
(keyed by lowercase address) and exactly one edge from the target, carrying
the aggregated transaction count and ETH value for that counterparty.

Node attributes
----------------
- kind : NodeKind (target, wallet, exchange, mixer or contract)
- risk_level : RiskLevel, ``high`` only for mixers
- label : str
- tx_count, eth_volume, connection_count : summary metadata

Edge attributes
----------------
- tx_count : int
- total_value_eth : float
- risk : RiskLevel, mirrors the counterparty node
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import networkx as nx

from chainkit.address_book import AddressBook
from forensics.models import (
    CounterpartyAggregate,
    DetectedPattern,
    EvidenceGraph,
    GraphEdge,
    GraphNode,
    NodeKind,
    PatternKind,
    RiskIndicatorSet,
    RiskLevel,
    Transaction,
)

logger = logging.getLogger(__name__)

# Call data longer than a bare selector marks the counterparty as a contract
MIN_CONTRACT_INPUT_LENGTH: int = 10


@dataclass
class GraphBuildResult:
    graph: nx.DiGraph
    total_in: float
    total_out: float
    counterparties: Dict[str, CounterpartyAggregate]
    patterns: List[DetectedPattern] = field(default_factory=list)
    indicators: RiskIndicatorSet = field(default_factory=RiskIndicatorSet)


# ── Public API ───────────────────────────────────────────────────────────────

def build_evidence_graph(
    target: str,
    transactions: Sequence[Transaction],
    address_book: AddressBook,
) -> GraphBuildResult:
    """Build the star graph around *target* in a single pass.

    Parameters
    ----------
    target : str
        Address under investigation (any case).
    transactions : sequence of Transaction
        Ordered transaction list for the target.
    address_book : AddressBook
        Mixer / exchange classification tables.

    Returns
    -------
    GraphBuildResult
        The ``nx.DiGraph`` (node insertion order = first-seen order), the
        in/out totals, per-counterparty aggregates, mixer-interaction
        patterns and the indicators raised while classifying counterparties.
    """
    target_id = target.lower()
    G = nx.DiGraph()
    G.add_node(
        target_id,
        kind=NodeKind.TARGET,
        risk_level=RiskLevel.LOW,
        label="Target Wallet",
        tx_count=0,
        eth_volume=0.0,
        connection_count=0,
    )

    total_in = 0.0
    total_out = 0.0
    counterparties: Dict[str, CounterpartyAggregate] = {}
    patterns: List[DetectedPattern] = []
    indicators = RiskIndicatorSet()

    for tx in transactions:
        is_incoming = tx.to_address.lower() == target_id
        counterparty = (tx.from_address if is_incoming else tx.to_address).lower()
        value = tx.value_eth

        if is_incoming:
            total_in += value
        else:
            total_out += value

        # Self-transfers and contract creations have no distinct counterparty
        if not counterparty or counterparty == target_id:
            continue

        if counterparty not in counterparties:
            counterparties[counterparty] = CounterpartyAggregate(address=counterparty)
            kind = _classify_counterparty(counterparty, tx, address_book)
            risk = RiskLevel.HIGH if kind is NodeKind.MIXER else RiskLevel.LOW

            if kind is NodeKind.MIXER:
                indicators.raise_flag("mixer_usage")
                patterns.append(
                    DetectedPattern(
                        PatternKind.MIXER_INTERACTION,
                        f"Interaction detected with known mixer {counterparty}"
                        + _label_suffix(address_book, counterparty),
                    )
                )
            elif kind is NodeKind.EXCHANGE:
                indicators.raise_flag("cex_interaction")

            G.add_node(
                counterparty,
                kind=kind,
                risk_level=risk,
                label=f"{kind.value.upper()} {counterparty[:8]}...",
                tx_count=0,
                eth_volume=0.0,
                connection_count=0,
            )

        agg = counterparties[counterparty]
        agg.tx_count += 1
        agg.total_value_eth += value

    # ── Edges, one per counterparty, in first-seen order ─────────────────
    for address, agg in counterparties.items():
        node_risk = G.nodes[address]["risk_level"]
        G.add_edge(
            target_id,
            address,
            tx_count=agg.tx_count,
            total_value_eth=agg.total_value_eth,
            risk=RiskLevel.HIGH if node_risk is RiskLevel.HIGH else RiskLevel.LOW,
        )
        G.nodes[address].update(
            {
                "tx_count": agg.tx_count,
                "eth_volume": agg.total_value_eth,
                "connection_count": 1,
            }
        )

    G.nodes[target_id].update(
        {
            "tx_count": len(transactions),
            "eth_volume": total_in + total_out,
            "connection_count": len(counterparties),
        }
    )

    logger.debug(
        "Built evidence graph for %s: %d nodes, %d edges",
        target_id, G.number_of_nodes(), G.number_of_edges(),
    )

    return GraphBuildResult(
        graph=G,
        total_in=total_in,
        total_out=total_out,
        counterparties=counterparties,
        patterns=patterns,
        indicators=indicators,
    )


def to_evidence_graph(G: nx.DiGraph) -> EvidenceGraph:
    """Convert the networkx star graph into the typed evidence contract."""
    nodes = [
        GraphNode(
            id=node,
            kind=data["kind"],
            risk_level=data["risk_level"],
            label=data.get("label", ""),
            tx_count=data.get("tx_count", 0),
            eth_volume=data.get("eth_volume", 0.0),
            connection_count=data.get("connection_count", 0),
        )
        for node, data in G.nodes(data=True)
    ]
    edges = [
        GraphEdge(
            source=u,
            target=v,
            tx_count=data["tx_count"],
            total_value_eth=data["total_value_eth"],
            risk=data["risk"],
        )
        for u, v, data in G.edges(data=True)
    ]
    return EvidenceGraph(nodes=nodes, edges=edges)


# ── Internal helpers ─────────────────────────────────────────────────────────

def _classify_counterparty(
    address: str,
    tx: Transaction,
    address_book: AddressBook,
) -> NodeKind:
    if address_book.is_mixer(address):
        return NodeKind.MIXER
    if address_book.is_exchange(address):
        return NodeKind.EXCHANGE
    if tx.input_data != "0x" and len(tx.input_data) > MIN_CONTRACT_INPUT_LENGTH:
        return NodeKind.CONTRACT
    return NodeKind.WALLET


def _label_suffix(address_book: AddressBook, address: str) -> str:
    label = address_book.label_for(address)
    return f" ({label})" if label else ""
