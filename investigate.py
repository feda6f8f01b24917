"""
investigate.py — Command-line interface for the Wallet Court.

Run with:  python investigate.py <address>
           python investigate.py <address> --json report.json
           python investigate.py --sample honeypot    (offline sample history)
"""

import argparse
import sys
from pathlib import Path

from chainkit.alerts import build_alert, deliver_alert, format_alert
from chainkit.config import configure_logging
from chainkit.json_export import (
    build_counterparty_table,
    generate_court_report,
    report_to_json_string,
)
from chainkit.sample_data import SAMPLE_TARGET, SCENARIOS, generate_scenario
from chainkit.validation import InvalidAddressError
from forensics.models import CourtCase
from forensics.pipeline import investigate_wallet


def print_separator(title: str = "") -> None:
    """Print a visual separator."""
    if title:
        print(f"\n{'='*60}\n  {title}\n{'='*60}")
    else:
        print("-" * 60)


def print_case(case: CourtCase) -> None:
    """Print the four court stages to the console."""
    evidence = case.evidence

    # ── Evidence ─────────────────────────────────────────────────────────
    print_separator("EVIDENCE")
    print(f"  Wallet:          {case.wallet}")
    print(f"  Chain:           {case.chain}")
    print(f"  Balance:         {evidence.balance_eth} ETH")
    print(f"  Transactions:    {evidence.tx_count}")
    print(f"  Token transfers: {evidence.token_transfer_count}")
    print(f"  Counterparties:  {evidence.unique_counterparties}")
    print(f"  Total in:        {evidence.total_in:.4f} ETH")
    print(f"  Total out:       {evidence.total_out:.4f} ETH")
    if evidence.metrics is not None:
        print(f"  Wallet age:      {evidence.metrics.wallet_age_days} day(s)")
        print(f"  Tx frequency:    {evidence.metrics.transaction_frequency:.2f} / day")
    if evidence.reputation is not None:
        print(f"  Scam reports:    {evidence.scam_reports}")
    if evidence.conclusion is not None:
        print(
            f"  Evidence score:  {evidence.conclusion.risk_score:g} "
            f"({evidence.conclusion.verdict.value})"
        )

    print("\n  Detected patterns:")
    if evidence.patterns:
        for pattern in evidence.high_risk_patterns:
            print(f"  - {pattern}")
    else:
        print("  None.")

    flags = [name for name, raised in evidence.indicators.to_dict().items() if raised]
    print(f"\n  Risk indicators: {', '.join(flags) if flags else 'none'}")

    rows = build_counterparty_table(generate_court_report(case))
    if rows:
        print(f"\n  {'Counterparty':<44} {'Type':<9} {'Txns':>5} {'ETH':>12}")
        for row in rows[:10]:
            mark = " *" if row["Highlighted"] else ""
            print(
                f"  {row['Address']:<44} {row['Type']:<9} "
                f"{row['Transactions']:>5} {row['ETH Volume']:>12}{mark}"
            )

    # ── Prosecution / Defense ────────────────────────────────────────────
    print_separator(f"PROSECUTION (severity {case.prosecution.severity_score:g}/100)")
    print(case.prosecution.narrative)

    print_separator(f"DEFENSE (plausibility {case.defense.plausibility_score:g}/100)")
    print(case.defense.narrative)

    # ── Judge ────────────────────────────────────────────────────────────
    print_separator(f"VERDICT: {case.verdict.verdict.value.upper()} ({case.verdict.risk_score:g}/100)")
    print(case.verdict.reasoning)
    print("\n  Recommendations:")
    for rec in case.verdict.recommendations:
        print(f"  - {rec}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Investigate an Ethereum wallet for fraud.")
    parser.add_argument("address", nargs="?", help="0x-prefixed wallet address")
    parser.add_argument("--json", metavar="PATH", help="write the court report to PATH")
    parser.add_argument(
        "--sample",
        metavar="NAME",
        choices=sorted(SCENARIOS),
        help="investigate a built-in sample history instead of live chain data",
    )
    parser.add_argument("--alert", action="store_true", help="post the verdict to ALERT_WEBHOOK_URL")
    args = parser.parse_args(argv)
    if not args.address and not args.sample:
        parser.error("an address is required unless --sample is given")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()
    print_separator("Wallet Court")

    kwargs = {}
    address = args.address
    if args.sample:
        scenario = generate_scenario(args.sample, target=address or SAMPLE_TARGET)
        address = scenario.target
        kwargs = {
            "source": scenario.chain_source(),
            "reputation_sources": scenario.reputation_sources(),
        }
        print(f"[INFO] Using built-in '{args.sample}' sample history")

    print(f"[...] Investigating {address}")
    try:
        case = investigate_wallet(address, **kwargs)
    except InvalidAddressError as exc:
        print(f"\n[ERROR] {exc}")
        return 1

    print_case(case)

    alert = build_alert(case)
    print_separator("ALERT")
    print(f"  {format_alert(alert)}")
    if args.alert:
        delivered = deliver_alert(alert)
        print(f"[{'OK' if delivered else 'WARN'}] Alert {'delivered' if delivered else 'not delivered'}")

    if args.json:
        output_path = Path(args.json)
        output_path.write_text(report_to_json_string(generate_court_report(case)))
        print(f"\n[OK] JSON report saved to: {output_path}")

    print("\n" + "=" * 60)
    print("  Investigation complete!")
    print("=" * 60 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
