"""
sample_data.py — Generate realistic synthetic wallet histories that contain
known fraud patterns, for demonstration and offline investigations.

Scenarios:
- clean        : light, balanced personal use over three months
- burst        : 60 transactions within 3 days of first activity
- honeypot     : receive-only wallet funded partly through a mixer, with a
                 community scam report on file
- mixer        : funds withdrawn from a mixer and moved to an exchange
- dust         : dozens of near-zero incoming transfers
- rapid_drain  : a deposit drained in quick successive outgoing transfers
- established  : wallet active for over a year, funded from an exchange
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from chainkit.chain_source import StaticChainSource
from chainkit.reputation_sources import ReputationSource
from forensics.models import WEI_PER_ETH, ReputationResult, Transaction

SAMPLE_TARGET = "0x7a3b9c1d2e4f5a6b7c8d9e1f2a3b4c5d6e7f8a9b"
SAMPLE_MIXER = "0x910cbd523d972eb0a6f4cae4618ad62622b39dbf"       # Tornado Cash: 1 ETH
SAMPLE_EXCHANGE = "0x28c6c06298d514db089934071355e5743bf21d60"    # Binance

BASE_TIME = datetime(2025, 6, 1, 8, 0, 0, tzinfo=timezone.utc)
HEX_DIGITS = "123456789abcdef"


@dataclass
class Scenario:
    name: str
    target: str
    transactions: List[Transaction]
    reputation_results: List[ReputationResult] = field(default_factory=list)
    balance_eth: str = "0"

    def chain_source(self) -> StaticChainSource:
        return StaticChainSource(
            transactions={self.target: self.transactions},
            balances={self.target: self.balance_eth},
        )

    def reputation_sources(self) -> List[ReputationSource]:
        return [StaticReputationSource(r) for r in self.reputation_results]


class StaticReputationSource(ReputationSource):
    """Replays one canned reputation result."""

    def __init__(self, result: Optional[ReputationResult]) -> None:
        self.result = result
        self.name = result.source if result else "static"

    def check(self, address: str) -> Optional[ReputationResult]:
        return self.result


class _History:
    """Accumulates transactions for one target in chronological order."""

    def __init__(self, target: str, rng: random.Random) -> None:
        self.target = target
        self.rng = rng
        self.rows: List[Transaction] = []

    def address(self) -> str:
        return "0x" + "".join(self.rng.choice(HEX_DIGITS) for _ in range(40))

    def receive(self, sender: str, eth: float, ts: datetime) -> None:
        self._add(sender, self.target, eth, ts)

    def send(self, receiver: str, eth: float, ts: datetime) -> None:
        self._add(self.target, receiver, eth, ts)

    def _add(self, sender: str, receiver: str, eth: float, ts: datetime) -> None:
        self.rows.append(
            Transaction(
                hash="0x" + "".join(self.rng.choice(HEX_DIGITS) for _ in range(64)),
                from_address=sender,
                to_address=receiver,
                value_wei=int(round(eth, 8) * WEI_PER_ETH),
                timestamp=int(ts.timestamp()),
            )
        )


# ── Scenario builders ────────────────────────────────────────────────────────

def _clean(h: _History) -> None:
    friends = [h.address() for _ in range(4)]
    t = BASE_TIME
    for _ in range(6):
        h.receive(h.rng.choice(friends), h.rng.uniform(0.2, 1.5), t)
        t += timedelta(days=h.rng.randint(3, 8))
        h.send(h.rng.choice(friends), h.rng.uniform(0.2, 1.5), t)
        t += timedelta(days=h.rng.randint(3, 8))


def _burst(h: _History) -> None:
    peers = [h.address() for _ in range(15)]
    t = BASE_TIME
    for i in range(60):
        amount = h.rng.uniform(0.05, 0.2)
        if i % 2 == 0:
            h.receive(h.rng.choice(peers), amount, t)
        else:
            h.send(h.rng.choice(peers), amount, t)
        t += timedelta(minutes=70)


def _honeypot(h: _History) -> Scenario:
    t = BASE_TIME
    h.receive(SAMPLE_MIXER, 1.0, t)
    for _ in range(4):
        t += timedelta(days=h.rng.randint(1, 4))
        h.receive(h.address(), 1.0, t)
    return Scenario(
        name="honeypot",
        target=h.target,
        transactions=h.rows,
        reputation_results=[
            ReputationResult(
                source="ChainAbuse Community Reports",
                is_scam=True,
                details="1 scam report(s) filed. Categories: phishing",
            )
        ],
        balance_eth="5.0000",
    )


def _mixer(h: _History) -> None:
    t = BASE_TIME
    for _ in range(3):
        h.receive(SAMPLE_MIXER, 1.0, t)
        t += timedelta(hours=h.rng.randint(6, 30))
    h.send(SAMPLE_EXCHANGE, 2.9, t)


def _dust(h: _History) -> None:
    t = BASE_TIME
    h.receive(SAMPLE_EXCHANGE, 0.8, t)
    for _ in range(25):
        t += timedelta(hours=h.rng.randint(2, 12))
        h.receive(h.address(), h.rng.uniform(0.00001, 0.0009), t)
    t += timedelta(days=1)
    h.send(h.address(), 0.5, t)


def _rapid_drain(h: _History) -> None:
    t = BASE_TIME
    h.receive(h.address(), 10.0, t)
    for _ in range(8):
        t += timedelta(seconds=h.rng.randint(20, 120))
        h.send(h.address(), 1.2, t)


def _established(h: _History) -> None:
    friends = [h.address() for _ in range(3)]
    t = BASE_TIME
    for _ in range(10):
        h.receive(SAMPLE_EXCHANGE, 1.0, t)
        t += timedelta(days=20)
        h.send(h.rng.choice(friends), 0.9, t)
        t += timedelta(days=20)


SCENARIOS: Dict[str, Callable[[_History], Optional[Scenario]]] = {
    "clean": _clean,
    "burst": _burst,
    "honeypot": _honeypot,
    "mixer": _mixer,
    "dust": _dust,
    "rapid_drain": _rapid_drain,
    "established": _established,
}


def generate_scenario(name: str, target: str = SAMPLE_TARGET, seed: int = 42) -> Scenario:
    """Build one named scenario for *target*.

    Parameters
    ----------
    name : str
        Key of ``SCENARIOS``.
    target : str
        Wallet address that owns the history.
    seed : int
        Random seed for reproducibility.

    Raises
    ------
    KeyError
        If *name* is not a known scenario.
    """
    if name not in SCENARIOS:
        raise KeyError(f"Unknown scenario '{name}'. Choose from: {', '.join(SCENARIOS)}")

    history = _History(target.lower(), random.Random(seed))
    built = SCENARIOS[name](history)
    if built is not None:
        return built
    return Scenario(name=name, target=history.target, transactions=history.rows)
