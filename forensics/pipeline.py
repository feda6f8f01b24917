"""
pipeline.py — Run one wallet investigation end to end.

Data gathering fans out: transactions, token transfers, balance and every
reputation source run concurrently inside one ``asyncio.TaskGroup``, each
blocking call in a worker thread bounded by a timeout.  Any fetch that
fails or times out degrades to its empty default and is logged.  The court
stages then run strictly in sequence:

    Evidence → Prosecution → Defense → Judge
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence

from chainkit import config
from chainkit.address_book import AddressBook, default_address_book
from chainkit.chain_source import ChainDataSource, EtherscanSource
from chainkit.reputation_sources import ReputationSource, default_sources
from chainkit.validation import quick_stats, require_address
from forensics.defense import build_defense
from forensics.evidence import assemble_evidence
from forensics.judge import render_verdict
from forensics.models import (
    CourtCase,
    ReputationResult,
    TokenTransfer,
    Transaction,
)
from forensics.prosecution import build_prosecution
from forensics.reputation import aggregate_reputation

logger = logging.getLogger(__name__)


@dataclass
class ChainData:
    """Everything fetched for one address before the court convenes."""

    transactions: List[Transaction] = field(default_factory=list)
    token_transfers: List[TokenTransfer] = field(default_factory=list)
    balance_eth: str = "0"
    reputation_results: List[Optional[ReputationResult]] = field(default_factory=list)


# ── Fetching ─────────────────────────────────────────────────────────────────

async def _bounded(
    executor: ThreadPoolExecutor,
    name: str,
    call: Callable[..., Any],
    *args: Any,
    default: Any,
    timeout: float,
) -> Any:
    """Run blocking *call* on *executor*; return *default* on failure or timeout."""
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(loop.run_in_executor(executor, call, *args), timeout=timeout)
    except TimeoutError:
        logger.warning("%s timed out after %.1fs; continuing without it", name, timeout)
    except Exception as exc:  # noqa: BLE001
        logger.warning("%s failed: %s; continuing without it", name, exc)
    return default


async def gather_chain_data(
    address: str,
    source: ChainDataSource,
    reputation_sources: Sequence[ReputationSource],
    timeout: float = config.FETCH_TIMEOUT_SECONDS,
) -> ChainData:
    """Fetch chain data and reputation for *address* concurrently.

    The task group is the join barrier: this returns only after every
    fetch has completed, failed or timed out.  Calls that outlive their
    timeout are abandoned on the private executor rather than awaited.
    """
    executor = ThreadPoolExecutor(
        max_workers=3 + len(reputation_sources),
        thread_name_prefix="wallet-court-fetch",
    )
    try:
        async with asyncio.TaskGroup() as tg:
            txs = tg.create_task(_bounded(
                executor, "transaction list", source.list_transactions, address,
                default=[], timeout=timeout,
            ))
            tokens = tg.create_task(_bounded(
                executor, "token transfers", source.list_token_transfers, address,
                default=[], timeout=timeout,
            ))
            balance = tg.create_task(_bounded(
                executor, "balance", source.get_balance, address,
                default="0", timeout=timeout,
            ))
            checks = [
                tg.create_task(_bounded(
                    executor, rep.name, rep.check, address,
                    default=None, timeout=timeout,
                ))
                for rep in reputation_sources
            ]
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return ChainData(
        transactions=list(txs.result()),
        token_transfers=list(tokens.result()),
        balance_eth=balance.result(),
        reputation_results=[c.result() for c in checks],
    )


# ── Investigation ────────────────────────────────────────────────────────────

async def investigate_wallet_async(
    address: str,
    source: Optional[ChainDataSource] = None,
    reputation_sources: Optional[Sequence[ReputationSource]] = None,
    address_book: Optional[AddressBook] = None,
    chain: str = config.CHAIN_NAME,
    timeout: float = config.FETCH_TIMEOUT_SECONDS,
) -> CourtCase:
    """Investigate *address* and return the full court case.

    Raises
    ------
    InvalidAddressError
        If *address* is not a 0x-prefixed 40-hex-digit address.  Nothing
        is fetched in that case.
    """
    target = require_address(address)
    source = source if source is not None else EtherscanSource()
    if reputation_sources is None:
        reputation_sources = default_sources()
    book = address_book if address_book is not None else default_address_book()

    logger.info("Investigating %s on %s", target, chain)
    data = await gather_chain_data(target, source, reputation_sources, timeout=timeout)
    stats = quick_stats(target, data.transactions)
    logger.info(
        "Fetched %d transactions for %s (%d in, %d out, %d failed)",
        stats["total_transactions"], target,
        stats["incoming"], stats["outgoing"], stats["failed"],
    )
    reputation = aggregate_reputation(data.reputation_results)

    evidence = assemble_evidence(
        target,
        data.transactions,
        book,
        chain,
        token_transfers=data.token_transfers,
        balance_eth=data.balance_eth,
        reputation=reputation,
    )
    prosecution = build_prosecution(evidence)
    defense = build_defense(evidence, prosecution)
    verdict = render_verdict(evidence, prosecution, defense)

    return CourtCase(
        wallet=target,
        chain=chain,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        evidence=evidence,
        prosecution=prosecution,
        defense=defense,
        verdict=verdict,
    )


def investigate_wallet(address: str, **kwargs: Any) -> CourtCase:
    """Synchronous wrapper around :func:`investigate_wallet_async`."""
    return asyncio.run(investigate_wallet_async(address, **kwargs))
