"""
Tests for the Flask JSON API.
"""

import pytest

from api_server import create_app
from chainkit.chain_source import StaticChainSource
from forensics.pipeline import investigate_wallet
from factories import MIXER, TARGET, incoming


@pytest.fixture
def client(book):
    source = StaticChainSource(transactions={TARGET: [incoming(MIXER, 1.0)]})

    def investigate(address, **kwargs):
        kwargs.setdefault("source", source)
        kwargs.setdefault("reputation_sources", [])
        return investigate_wallet(address, address_book=book, **kwargs)

    app = create_app(investigate=investigate)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_investigate(client):
    resp = client.post("/api/investigate", json={"walletAddress": TARGET})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["wallet"] == TARGET
    assert body["prosecutorCase"]["highlightedNodes"] == [MIXER]
    assert body["judgeVerdict"]["verdict"] in {"Likely Fraud", "Likely Clean", "Inconclusive"}


@pytest.mark.parametrize("payload", [{}, {"walletAddress": "0x123"}, {"walletAddress": "hello"}])
def test_invalid_address(client, payload):
    resp = client.post("/api/investigate", json=payload)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] is True
    assert body["errors"]


def test_sample_history(client):
    resp = client.post("/api/investigate", json={"walletAddress": TARGET, "sample": "rapid_drain"})
    assert resp.status_code == 200
    patterns = resp.get_json()["evidence"]["highRiskPatterns"]
    assert any(p.startswith("RAPID DRAIN") for p in patterns)


def test_unknown_sample(client):
    resp = client.post("/api/investigate", json={"walletAddress": TARGET, "sample": "nope"})
    assert resp.status_code == 400
