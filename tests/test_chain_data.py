"""
Tests for address validation, explorer row normalisation, the Etherscan
source and the address book.
"""

import json
from unittest import mock

import pytest
import requests

from chainkit.address_book import AddressBook, default_address_book, load_address_book
from chainkit.chain_source import EtherscanSource, StaticChainSource
from chainkit.validation import (
    InvalidAddressError,
    normalize_token_transfers,
    normalize_transactions,
    parse_wei,
    quick_stats,
    require_address,
    validate_address,
)
from factories import EXCHANGE, MIXER, TARGET, incoming, outgoing, peer


def row(**overrides):
    base = {
        "hash": "0xabc",
        "from": peer(1),
        "to": TARGET,
        "value": "1500000000000000000",
        "timeStamp": "1700000000",
        "input": "0x",
        "isError": "0",
    }
    base.update(overrides)
    return base


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

class TestValidateAddress:
    def test_valid(self):
        assert validate_address(TARGET) == (True, [])

    @pytest.mark.parametrize(
        "address",
        [None, "", "   ", "7a3b9c1d2e4f5a6b7c8d9e1f2a3b4c5d6e7f8a9b", "0x1234", "0x" + "g" * 40],
    )
    def test_invalid(self, address):
        is_valid, errors = validate_address(address)
        assert not is_valid
        assert errors

    def test_require_address_trims(self):
        assert require_address(f"  {TARGET} ") == TARGET

    def test_require_address_raises(self):
        with pytest.raises(InvalidAddressError):
            require_address("0x1234")


class TestParseWei:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1000", 1000),
            ("0x10", 16),
            ("", 0),
            (None, 0),
            ("garbage", 0),
            ("-5", 0),
            (7, 7),
            ("115792089237316195423570985008687907853269984665640564039457584007913129639935",
             2**256 - 1),
        ],
    )
    def test_values(self, value, expected):
        assert parse_wei(value) == expected


class TestNormalizeTransactions:
    def test_row_fields(self):
        [tx] = normalize_transactions([row()])
        assert tx.from_address == peer(1)
        assert tx.value_wei == 1_500_000_000_000_000_000
        assert tx.value_eth == pytest.approx(1.5)
        assert tx.timestamp == 1_700_000_000
        assert tx.is_error is False

    def test_malformed_numbers_become_zero(self):
        [tx] = normalize_transactions([row(value="n/a", timeStamp="soon")])
        assert tx.value_wei == 0
        assert tx.timestamp == 0

    def test_missing_columns(self):
        [tx] = normalize_transactions([{"hash": "0x1", "from": peer(1), "to": TARGET}])
        assert tx.input_data == "0x"
        assert tx.value_wei == 0

    def test_order_preserved(self):
        rows = [row(hash="0x2", timeStamp="20"), row(hash="0x1", timeStamp="10")]
        assert [t.hash for t in normalize_transactions(rows)] == ["0x2", "0x1"]

    def test_failed_flag(self):
        [tx] = normalize_transactions([row(isError="1")])
        assert tx.is_error is True

    def test_empty(self):
        assert normalize_transactions([]) == []

    def test_token_transfers(self):
        [transfer] = normalize_token_transfers(
            [{"hash": "0x1", "from": peer(1), "to": TARGET, "value": "10",
              "tokenSymbol": "USDT", "timeStamp": "5"}]
        )
        assert transfer.token_symbol == "USDT"
        assert transfer.timestamp == 5


class TestQuickStats:
    def test_counts(self):
        txs = [incoming(peer(1), 1.0), outgoing(peer(2), 1.0, 1_700_000_100, is_error=True)]
        stats = quick_stats(TARGET, txs)
        assert stats["incoming"] == 1
        assert stats["outgoing"] == 1
        assert stats["failed"] == 1

    def test_empty(self):
        assert quick_stats(TARGET, [])["total_transactions"] == 0


# -----------------------------------------------------------------------------
# Chain sources
# -----------------------------------------------------------------------------

def api_response(payload):
    resp = mock.Mock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


class TestEtherscanSource:
    def test_list_transactions(self):
        session = mock.Mock()
        session.get.return_value = api_response({"status": "1", "message": "OK", "result": [row()]})
        source = EtherscanSource(api_key="k", session=session)

        [tx] = source.list_transactions(TARGET)
        assert tx.value_eth == pytest.approx(1.5)
        params = session.get.call_args.kwargs["params"]
        assert params["action"] == "txlist"
        assert params["sort"] == "asc"
        assert params["chainid"] == 1

    def test_no_transactions_found(self):
        session = mock.Mock()
        session.get.return_value = api_response(
            {"status": "0", "message": "No transactions found", "result": []}
        )
        assert EtherscanSource(api_key="k", session=session).list_transactions(TARGET) == []

    def test_transport_error_is_empty(self):
        session = mock.Mock()
        session.get.side_effect = requests.Timeout("slow")
        source = EtherscanSource(api_key="k", session=session)
        assert source.list_transactions(TARGET) == []
        assert source.list_token_transfers(TARGET) == []
        assert source.get_balance(TARGET) == "0"

    def test_balance(self):
        session = mock.Mock()
        session.get.return_value = api_response({"status": "1", "result": "2500000000000000000"})
        assert EtherscanSource(api_key="k", session=session).get_balance(TARGET) == "2.5000"


    def test_each_call_uses_its_own_request(self):
        with mock.patch("chainkit.chain_source.requests.get") as get:
            get.return_value = api_response({"status": "1", "message": "OK", "result": []})
            source = EtherscanSource(api_key="k")
            source.list_transactions(TARGET)
            source.list_token_transfers(TARGET)
            source.get_balance(TARGET)
        assert source.session is None
        assert get.call_count == 3


class TestStaticChainSource:
    def test_lookup_ignores_case(self):
        source = StaticChainSource(transactions={TARGET.upper().replace("0X", "0x"): [incoming(peer(1), 1.0)]})
        assert len(source.list_transactions(TARGET)) == 1
        assert source.get_balance(TARGET) == "0"


# -----------------------------------------------------------------------------
# Address book
# -----------------------------------------------------------------------------

class TestAddressBook:
    def test_case_insensitive_membership(self, book):
        assert book.is_mixer(MIXER.upper().replace("0X", "0x"))
        assert book.is_exchange(EXCHANGE)
        assert not book.is_mixer(EXCHANGE)
        assert book.label_for(EXCHANGE) == "Binance"

    def test_tables_are_read_only(self, book):
        with pytest.raises(TypeError):
            book.mixers["0xnew"] = "x"

    def test_list_tables(self):
        book = AddressBook.from_dict({"mixers": [MIXER.upper().replace("0X", "0x")], "exchanges": []})
        assert book.is_mixer(MIXER)
        assert book.label_for(MIXER) == ""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "book.json"
        path.write_text(json.dumps({"mixers": {MIXER: "m"}, "exchanges": {EXCHANGE: "e"}}))
        book = load_address_book(path)
        assert book.is_mixer(MIXER)
        assert book.is_exchange(EXCHANGE)

    def test_bundled_tables(self):
        book = default_address_book()
        assert book.is_mixer(MIXER)
        assert book.is_exchange(EXCHANGE)
