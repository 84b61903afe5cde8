"""
In-memory rate store.
Useful for:
- Testing the conversion engine without a database
- Quick conversions from a fixed rate table (e.g. the seed data)
"""

from decimal import Decimal
from typing import Dict, Iterable, Mapping, Tuple

from apps.exchange.domain.interfaces import RateStore
from apps.exchange.domain.models import CurrencyPair, Rate


class InMemoryRateStore(RateStore):
    """
    Dict-backed store keyed by the exact ordered pair.
    Adding a rate for a pair that already has one replaces it (latest wins).
    """

    def __init__(self, rates: Mapping[Tuple[str, str], Decimal] | None = None):
        self._rates: Dict[CurrencyPair, Rate] = {}
        for (from_code, to_code), value in (rates or {}).items():
            self.add(from_code, to_code, value)

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping]) -> "InMemoryRateStore":
        store = cls()
        for entry in entries:
            store.add(entry["from_currency"], entry["to_currency"], entry["rate"])
        return store

    def add(self, from_currency, to_currency, rate) -> None:
        self._rates[CurrencyPair.of(from_currency, to_currency)] = Rate.of(rate)

    def find_latest_rate(self, currency_pair: CurrencyPair) -> Rate | None:
        return self._rates.get(currency_pair)

    def snapshot(self) -> Dict[CurrencyPair, Rate]:
        return dict(self._rates)

    def __len__(self) -> int:
        return len(self._rates)
