"""
address_book.py — Static mixer / exchange classification tables.

The tables live in a JSON file (``KNOWN_ADDRESSES_PATH``) so they can be
updated without touching code.  They are loaded once per process and exposed
as immutable mappings keyed by lowercase address.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from chainkit import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressBook:
    mixers: Mapping[str, str]
    exchanges: Mapping[str, str]

    def is_mixer(self, address: str) -> bool:
        return address.lower() in self.mixers

    def is_exchange(self, address: str) -> bool:
        return address.lower() in self.exchanges

    def label_for(self, address: str) -> str:
        key = address.lower()
        return self.mixers.get(key) or self.exchanges.get(key) or ""

    @classmethod
    def from_dict(cls, data: dict) -> "AddressBook":
        return cls(
            mixers=_freeze(data.get("mixers", {})),
            exchanges=_freeze(data.get("exchanges", {})),
        )


def load_address_book(path: Path | str) -> AddressBook:
    """Read an address book JSON file.

    Accepts either ``{"mixers": {addr: label}}`` or a plain list of
    addresses per table.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    book = AddressBook.from_dict(data)
    logger.info(
        "Loaded address book %s: %d mixers, %d exchanges",
        path, len(book.mixers), len(book.exchanges),
    )
    return book


@lru_cache(maxsize=1)
def default_address_book() -> AddressBook:
    """Process-wide address book, loaded on first use."""
    return load_address_book(config.KNOWN_ADDRESSES_PATH)


def _freeze(table) -> Mapping[str, str]:
    if isinstance(table, dict):
        items = {str(k).lower(): str(v) for k, v in table.items()}
    else:
        items = {str(k).lower(): "" for k in table}
    return MappingProxyType(items)
