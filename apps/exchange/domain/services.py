"""
Domain services - Core business logic.
Resolves a conversion through direct, reverse or pivot-chain rates.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from apps.exchange.domain.exceptions import InvalidAmount, RateNotFound
from apps.exchange.domain.interfaces import RateStore
from apps.exchange.domain.models import (
    ConversionResult,
    CurrencyCode,
    CurrencyPair,
    Rate,
    multiply_exact,
    round_rate,
    to_decimal,
    utc_now,
)
from apps.exchange.domain.precision import PrecisionPolicy

logger = logging.getLogger(__name__)

DEFAULT_PIVOT_CURRENCY = "USD"
PATH_SEPARATOR = "→"


class ConversionEngine:
    """
    Stateless resolver that turns (from, to, amount) into a ConversionResult.

    Resolution strategy, first success wins:
    1. Direct rate stored for (from, to)
    2. Reverse rate stored for (to, from), inverted
    3. Chain through the pivot currency, each leg direct-then-reverse
    4. RateNotFound

    The rate store is only read. Amounts are multiplied exactly and rounded
    once, to the target currency's scale, at the very end.
    """

    def __init__(
        self,
        rate_store: RateStore,
        pivot_currency=DEFAULT_PIVOT_CURRENCY,
        precision: Optional[PrecisionPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rate_store = rate_store
        self.pivot_currency = CurrencyCode.of(pivot_currency)
        self.precision = precision or PrecisionPolicy()
        self.clock = clock

    def resolve(self, from_currency, to_currency, amount) -> ConversionResult:
        """
        Convert ``amount`` of ``from_currency`` into ``to_currency``.

        Args:
            from_currency: Source currency (CurrencyCode or raw code, e.g. "EUR")
            to_currency: Target currency (CurrencyCode or raw code, e.g. "JPY")
            amount: Strictly positive amount, Decimal or anything Decimal(str(x)) accepts

        Returns:
            ConversionResult with the target-scale amount and the effective rate

        Raises:
            InvalidAmount, InvalidCurrencyCode, SameCurrencyError, RateNotFound

        Example:
            >>> engine = ConversionEngine(store)
            >>> engine.resolve("EUR", "JPY", Decimal("100")).conversion_path
            'EUR→USD→JPY'
        """
        amount = self._validate_amount(amount)
        currency_pair = CurrencyPair.of(from_currency, to_currency)

        rate = self._find_single_hop_rate(currency_pair)
        if rate is not None:
            logger.debug("Resolved %s with a single-hop rate %s", currency_pair, rate)
            return self._build_result(currency_pair, amount, multiply_exact(amount, rate.value), rate)

        if self.pivot_currency not in (currency_pair.from_currency, currency_pair.to_currency):
            result = self._resolve_through_pivot(currency_pair, amount)
            if result is not None:
                return result

        logger.debug("No rate path for %s", currency_pair)
        raise RateNotFound(currency_pair)

    def _find_single_hop_rate(self, currency_pair: CurrencyPair) -> Optional[Rate]:
        rate = self.rate_store.find_latest_rate(currency_pair)
        if rate is not None:
            return rate

        reverse_rate = self.rate_store.find_latest_rate(currency_pair.reverse())
        if reverse_rate is not None:
            return reverse_rate.inverse()

        return None

    def _resolve_through_pivot(self, currency_pair: CurrencyPair, amount: Decimal) -> Optional[ConversionResult]:
        first_leg = self._find_single_hop_rate(
            CurrencyPair.of(currency_pair.from_currency, self.pivot_currency)
        )
        if first_leg is None:
            return None

        second_leg = self._find_single_hop_rate(
            CurrencyPair.of(self.pivot_currency, currency_pair.to_currency)
        )
        if second_leg is None:
            return None

        pivot_amount = multiply_exact(amount, first_leg.value)
        final_amount = multiply_exact(pivot_amount, second_leg.value)
        effective_rate = Rate.of(round_rate(final_amount / amount))
        path = PATH_SEPARATOR.join(
            code.value for code in (currency_pair.from_currency, self.pivot_currency, currency_pair.to_currency)
        )
        logger.debug("Resolved %s through %s (legs %s, %s)", currency_pair, path, first_leg, second_leg)

        return self._build_result(currency_pair, amount, final_amount, effective_rate, path)

    def _build_result(
        self,
        currency_pair: CurrencyPair,
        amount: Decimal,
        converted_amount: Decimal,
        rate: Rate,
        conversion_path: Optional[str] = None,
    ) -> ConversionResult:
        return ConversionResult(
            currency_pair=currency_pair,
            from_amount=amount,
            to_amount=self.precision.apply(converted_amount, currency_pair.to_currency),
            rate=rate.quantized(),
            conversion_time=self.clock(),
            conversion_path=conversion_path,
        )

    @staticmethod
    def _validate_amount(amount) -> Decimal:
        if amount is None:
            raise InvalidAmount(amount, "Amount is required")
        try:
            value = to_decimal(amount)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidAmount(amount, f"Invalid amount. Must be a number, got {amount!r}")

        if not value.is_finite() or value <= 0:
            raise InvalidAmount(amount)
        return value
