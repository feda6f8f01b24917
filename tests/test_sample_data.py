"""
Tests for the built-in sample histories and the command-line interface.
"""

import json

import pytest

from chainkit.sample_data import SAMPLE_TARGET, SCENARIOS, generate_scenario
from forensics.evidence import assemble_evidence
from forensics.models import PatternKind
import investigate

EXPECTED = {
    "burst": PatternKind.NEW_WALLET_BURST,
    "honeypot": PatternKind.HONEYPOT,
    "mixer": PatternKind.MIXER_INTERACTION,
    "dust": PatternKind.DUST_ATTACK,
    "rapid_drain": PatternKind.RAPID_DRAIN,
}


@pytest.mark.parametrize("name, kind", sorted(EXPECTED.items()))
def test_scenario_triggers_its_pattern(book, name, kind):
    scenario = generate_scenario(name)
    evidence = assemble_evidence(scenario.target, scenario.transactions, book, "test")
    assert kind in [p.kind for p in evidence.patterns]


@pytest.mark.parametrize("name", ["clean", "established"])
def test_benign_scenarios_have_no_patterns(book, name):
    scenario = generate_scenario(name)
    evidence = assemble_evidence(scenario.target, scenario.transactions, book, "test")
    assert evidence.patterns == []


def test_scenarios_are_reproducible():
    first = generate_scenario("burst", seed=7)
    second = generate_scenario("burst", seed=7)
    assert first.transactions == second.transactions


def test_scenarios_are_chronological():
    for name in SCENARIOS:
        stamps = [t.timestamp for t in generate_scenario(name).transactions]
        assert stamps == sorted(stamps)


def test_unknown_scenario():
    with pytest.raises(KeyError):
        generate_scenario("nope")


def test_cli_sample_writes_report(tmp_path, capsys):
    out = tmp_path / "report.json"
    assert investigate.main(["--sample", "honeypot", "--json", str(out)]) == 0

    printed = capsys.readouterr().out
    assert "VERDICT: LIKELY FRAUD" in printed
    report = json.loads(out.read_text())
    assert report["wallet"] == SAMPLE_TARGET
    assert report["evidence"]["webReputation"]["scamReports"] == 1


def test_cli_rejects_bad_address(capsys):
    assert investigate.main(["0xnothex"]) == 1
    assert "[ERROR]" in capsys.readouterr().out
