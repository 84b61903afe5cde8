from abc import ABC, abstractmethod

from apps.exchange.domain.models import CurrencyPair, Rate


class RateStore(ABC):
    @abstractmethod
    def find_latest_rate(self, currency_pair: CurrencyPair) -> Rate | None:
        pass
