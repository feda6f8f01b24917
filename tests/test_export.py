"""
Tests for the court report document and verdict alerts.
"""

import json
from unittest import mock

import pytest
import requests

from chainkit.alerts import build_alert, deliver_alert, format_alert, shorten_address
from chainkit.chain_source import StaticChainSource
from chainkit.json_export import (
    build_counterparty_table,
    generate_court_report,
    report_to_json_string,
)
from forensics.pipeline import investigate_wallet
from factories import MIXER, TARGET, incoming, peer


@pytest.fixture
def case(book):
    source = StaticChainSource(
        transactions={TARGET: [incoming(MIXER, 2.0), incoming(peer(1), 0.5, 1_700_000_600)]},
        balances={TARGET: "2.5000"},
    )
    return investigate_wallet(TARGET, source=source, reputation_sources=[], address_book=book)


class TestCourtReport:
    def test_top_level_keys(self, case):
        report = generate_court_report(case)
        assert list(report) == [
            "wallet", "chain", "timestamp", "evidence",
            "prosecutorCase", "defenderCase", "judgeVerdict",
        ]

    def test_stage_documents(self, case):
        report = generate_court_report(case)
        assert report["prosecutorCase"]["highlightedNodes"] == [MIXER]
        assert set(report["defenderCase"]) == {
            "keyPoints", "narrative", "mitigatingFactors", "plausibilityScore",
        }
        assert report["judgeVerdict"]["verdict"] == case.verdict.verdict.value
        assert report["evidence"]["balance"] == "2.5000"

    def test_graph_nodes(self, case):
        nodes = generate_court_report(case)["evidence"]["graph"]["nodes"]
        mixer = next(n for n in nodes if n["id"] == MIXER)
        assert mixer["type"] == "mixer"
        assert mixer["riskLevel"] == "high"
        assert mixer["ethVolume"] == "2.0000"

    def test_json_string_round_trips(self, case):
        text = report_to_json_string(generate_court_report(case))
        assert json.loads(text)["wallet"] == TARGET

    def test_counterparty_table(self, case):
        rows = build_counterparty_table(generate_court_report(case))
        assert [r["Address"] for r in rows] == [MIXER, peer(1)]
        assert rows[0]["Highlighted"] is True
        assert rows[1]["Highlighted"] is False


class TestAlerts:
    def test_shorten_address(self):
        assert shorten_address(TARGET) == "0x7a3b...8a9b"

    def test_build_alert(self, case):
        alert = build_alert(case)
        assert alert.wallet_short == "0x7a3b...8a9b"
        assert alert.verdict_upper == case.verdict.verdict.value.upper()
        assert alert.risk_score_percent.endswith("%")
        assert alert.verdict_upper in format_alert(alert)

    def test_no_webhook_configured(self, case):
        assert deliver_alert(build_alert(case), webhook_url="") is False

    def test_delivery(self, case):
        session = mock.Mock()
        assert deliver_alert(build_alert(case), webhook_url="https://hooks.example.org/x", session=session)
        payload = session.post.call_args.kwargs["json"]
        assert payload["wallet"] == "0x7a3b...8a9b"

    def test_delivery_failure_is_not_raised(self, case):
        session = mock.Mock()
        session.post.side_effect = requests.ConnectionError("refused")
        assert deliver_alert(build_alert(case), webhook_url="https://hooks.example.org/x", session=session) is False
