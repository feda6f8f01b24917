"""
Tests for the evidence star graph: totals, node / edge invariants and
counterparty classification.
"""

import pytest

from chainkit.graph_builder import build_evidence_graph, to_evidence_graph
from forensics.models import NodeKind, PatternKind, RiskLevel
from factories import BASE_TS, EXCHANGE, MIXER, TARGET, incoming, outgoing, peer, tx


class TestTotals:
    def test_totals_split_by_direction(self, book):
        txs = [
            incoming(peer(1), 1.5),
            incoming(peer(2), 2.0),
            outgoing(peer(3), 0.5),
        ]
        built = build_evidence_graph(TARGET, txs, book)
        assert built.total_in == pytest.approx(3.5)
        assert built.total_out == pytest.approx(0.5)

    def test_empty_history(self, book):
        built = build_evidence_graph(TARGET, [], book)
        assert built.total_in == 0
        assert built.total_out == 0
        assert built.graph.number_of_nodes() == 1
        assert built.graph.number_of_edges() == 0

    def test_self_transfer_counts_but_adds_no_node(self, book):
        built = build_evidence_graph(TARGET, [tx(TARGET, TARGET, 1.0)], book)
        assert built.total_in == pytest.approx(1.0)
        assert built.counterparties == {}
        assert built.graph.number_of_nodes() == 1

    def test_target_match_is_case_insensitive(self, book):
        built = build_evidence_graph(TARGET.upper().replace("0X", "0x"), [incoming(peer(1), 1.0)], book)
        assert built.total_in == pytest.approx(1.0)
        assert built.total_out == 0


class TestStructure:
    def test_one_node_per_counterparty(self, book):
        txs = [
            incoming(peer(1), 1.0, BASE_TS),
            outgoing(peer(1), 0.5, BASE_TS + 10),
            incoming(peer(2), 1.0, BASE_TS + 20),
            outgoing(peer(3), 0.2, BASE_TS + 30),
        ]
        built = build_evidence_graph(TARGET, txs, book)
        graph = to_evidence_graph(built.graph)

        assert len(graph.nodes_of_kind(NodeKind.TARGET)) == 1
        assert len(graph.nodes) == 1 + 3
        assert len(graph.edges) == 3
        assert all(edge.source == TARGET for edge in graph.edges)

    def test_edge_aggregates(self, book):
        txs = [incoming(peer(1), 1.0), outgoing(peer(1), 0.5, BASE_TS + 60)]
        built = build_evidence_graph(TARGET, txs, book)
        data = built.graph.edges[TARGET, peer(1)]
        assert data["tx_count"] == 2
        assert data["total_value_eth"] == pytest.approx(1.5)

    def test_target_metadata(self, book):
        txs = [incoming(peer(1), 1.0), outgoing(peer(2), 0.25, BASE_TS + 60)]
        graph = to_evidence_graph(build_evidence_graph(TARGET, txs, book).graph)
        target = graph.target_node
        assert target.label == "Target Wallet"
        assert target.tx_count == 2
        assert target.connection_count == 2
        assert target.eth_volume == pytest.approx(1.25)


class TestClassification:
    def test_mixer_counterparty(self, book):
        built = build_evidence_graph(TARGET, [incoming(MIXER, 1.0)], book)
        node = built.graph.nodes[MIXER]

        assert node["kind"] is NodeKind.MIXER
        assert node["risk_level"] is RiskLevel.HIGH
        assert built.graph.edges[TARGET, MIXER]["risk"] is RiskLevel.HIGH
        assert built.indicators.mixer_usage
        assert [p.kind for p in built.patterns] == [PatternKind.MIXER_INTERACTION]
        assert "MIXER INTERACTION" in str(built.patterns[0])

    def test_mixer_match_ignores_case(self, book):
        built = build_evidence_graph(TARGET, [incoming(MIXER.upper().replace("0X", "0x"), 1.0)], book)
        assert built.indicators.mixer_usage

    def test_exchange_counterparty(self, book):
        built = build_evidence_graph(TARGET, [outgoing(EXCHANGE, 1.0)], book)
        assert built.graph.nodes[EXCHANGE]["kind"] is NodeKind.EXCHANGE
        assert built.indicators.cex_interaction
        assert not built.indicators.mixer_usage
        assert built.patterns == []

    def test_contract_counterparty(self, book):
        call = outgoing(peer(7), 0.0, input_data="0xa9059cbb000000000000000000000000")
        built = build_evidence_graph(TARGET, [call], book)
        assert built.graph.nodes[peer(7)]["kind"] is NodeKind.CONTRACT

    def test_plain_wallet_counterparty(self, book):
        built = build_evidence_graph(TARGET, [incoming(peer(4), 1.0)], book)
        assert built.graph.nodes[peer(4)]["kind"] is NodeKind.WALLET
        assert built.graph.nodes[peer(4)]["risk_level"] is RiskLevel.LOW
