import pytest

from chainkit.address_book import AddressBook
from chainkit.chain_source import StaticChainSource
from factories import EXCHANGE, MIXER


@pytest.fixture
def book():
    """Small address book with one mixer and one exchange."""
    return AddressBook.from_dict(
        {
            "mixers": {MIXER: "Tornado Cash: 1 ETH"},
            "exchanges": {EXCHANGE: "Binance"},
        }
    )


@pytest.fixture
def empty_source():
    return StaticChainSource()
