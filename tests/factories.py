"""Transaction builders shared by the test modules."""

from __future__ import annotations

import itertools
from typing import List

from forensics.models import Transaction

TARGET = "0x7a3b9c1d2e4f5a6b7c8d9e1f2a3b4c5d6e7f8a9b"
VANITY_TARGET = "0x0000000012ab34cd56ef78ab9c1d2e3f4a5b6c7d"
MIXER = "0x910cbd523d972eb0a6f4cae4618ad62622b39dbf"
EXCHANGE = "0x28c6c06298d514db089934071355e5743bf21d60"
BASE_TS = 1_700_000_000
DAY = 86_400

_hashes = itertools.count(1)


def peer(i: int) -> str:
    """Deterministic counterparty address number *i*."""
    return "0x" + f"{i:x}".rjust(40, "b")


def tx(sender: str, receiver: str, eth: float, ts: int = BASE_TS, **kwargs) -> Transaction:
    return Transaction(
        hash=f"0x{next(_hashes):064x}",
        from_address=sender,
        to_address=receiver,
        value_wei=int(round(eth * 10**18)),
        timestamp=ts,
        **kwargs,
    )


def incoming(sender: str, eth: float, ts: int = BASE_TS, target: str = TARGET, **kwargs) -> Transaction:
    return tx(sender, target, eth, ts, **kwargs)


def outgoing(receiver: str, eth: float, ts: int = BASE_TS, target: str = TARGET, **kwargs) -> Transaction:
    return tx(target, receiver, eth, ts, **kwargs)


def burst_history(count: int = 60, spacing: int = 4_000) -> List[Transaction]:
    """*count* alternating small transfers, *spacing* seconds apart."""
    rows = []
    for i in range(count):
        ts = BASE_TS + i * spacing
        if i % 2 == 0:
            rows.append(incoming(peer(i % 10), 0.1, ts))
        else:
            rows.append(outgoing(peer(i % 10), 0.1, ts))
    return rows


def aged_exchange_history(days: int = 400) -> List[Transaction]:
    """Balanced history with an exchange, spanning *days* days."""
    return [
        incoming(EXCHANGE, 2.0, BASE_TS),
        outgoing(peer(1), 1.5, BASE_TS + 100 * DAY),
        incoming(EXCHANGE, 1.0, BASE_TS + 200 * DAY),
        outgoing(EXCHANGE, 1.0, BASE_TS + days * DAY),
    ]
