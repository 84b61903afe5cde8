"""
Application services - use cases exposed to the API, admin and tasks.
Wires the pure conversion engine to the database-backed rate store.
"""

import logging
from typing import List, Optional

from django.conf import settings
from django.db import transaction

from apps.exchange.application.dto import (
    ConversionResultDTO,
    ConvertCurrencyCommand,
    ExchangeRateDTO,
)
from apps.exchange.domain.exceptions import UnsupportedCurrency
from apps.exchange.domain.interfaces import RateStore
from apps.exchange.domain.models import CurrencyCode, CurrencyPair, ExchangeRate, Rate
from apps.exchange.domain.precision import PrecisionPolicy
from apps.exchange.domain.services import DEFAULT_PIVOT_CURRENCY, ConversionEngine
from apps.exchange.infrastructure.persistence.repositories import (
    DEFAULT_ORDERING,
    SORTABLE_FIELDS,
    DjangoRateStore,
    ExchangeRateRepository,
)

logger = logging.getLogger(__name__)


def supported_currencies() -> List[str]:
    return [CurrencyCode.of(code).value for code in getattr(settings, "EXCHANGE_SUPPORTED_CURRENCIES", [])]


def ensure_supported_currency(raw) -> CurrencyCode:
    """
    Normalize ``raw`` and check it against EXCHANGE_SUPPORTED_CURRENCIES.
    An empty setting means every well-formed code is accepted.
    """
    code = CurrencyCode.of(raw)
    allowed = supported_currencies()
    if allowed and code.value not in allowed:
        raise UnsupportedCurrency(code.value)
    return code


def build_conversion_engine(rate_store: Optional[RateStore] = None) -> ConversionEngine:
    """Engine configured from Django settings, reading from the database unless told otherwise."""
    return ConversionEngine(
        rate_store if rate_store is not None else DjangoRateStore(),
        pivot_currency=getattr(settings, "EXCHANGE_PIVOT_CURRENCY", DEFAULT_PIVOT_CURRENCY),
        precision=PrecisionPolicy.with_overrides(getattr(settings, "EXCHANGE_CURRENCY_SCALES", None)),
    )


class ConversionApplicationService:
    """Currency conversion use case."""

    @staticmethod
    def convert_currency(command: ConvertCurrencyCommand, rate_store: Optional[RateStore] = None) -> ConversionResultDTO:
        """
        Convert an amount from one currency to another.

        Args:
            command: Source/target codes and the amount to convert
            rate_store: Store to read from (defaults to the database)

        Returns:
            ConversionResultDTO ready to be rendered

        Raises:
            Any ExchangeError from validation or resolution; nothing is swallowed here.
        """
        from_currency = ensure_supported_currency(command.from_currency)
        to_currency = ensure_supported_currency(command.to_currency)

        result = build_conversion_engine(rate_store).resolve(from_currency, to_currency, command.amount)
        logger.info("Converted %s", result)
        return ConversionResultDTO.from_result(result)


class ExchangeRateApplicationService:
    """Create and query stored exchange rates."""

    @staticmethod
    @transaction.atomic
    def create_exchange_rate(currency_pair: CurrencyPair, rate: Rate, source: Optional[str] = None) -> ExchangeRate:
        """
        Store a rate for ``currency_pair``.

        If the pair already has a rate it is updated in place (new value,
        new source when given, fresh timestamp); otherwise a new rate is created.
        """
        ensure_supported_currency(currency_pair.from_currency)
        ensure_supported_currency(currency_pair.to_currency)

        existing = ExchangeRateRepository.get_latest(currency_pair)
        if existing is not None:
            logger.info("Updating rate %s: %s -> %s", currency_pair, existing.rate, rate)
            return ExchangeRateRepository.save(existing.with_rate(rate, source))

        logger.info("Creating rate %s = %s", currency_pair, rate)
        return ExchangeRateRepository.save(ExchangeRate.create(currency_pair, rate, source))

    @staticmethod
    def get_latest_exchange_rate(currency_pair: CurrencyPair) -> Optional[ExchangeRate]:
        return ExchangeRateRepository.get_latest(currency_pair)

    @staticmethod
    def get_exchange_rate_by_id(rate_id) -> Optional[ExchangeRate]:
        return ExchangeRateRepository.get_by_id(rate_id)

    @staticmethod
    def list_exchange_rates(
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        ordering: str = DEFAULT_ORDERING,
    ) -> List[ExchangeRateDTO]:
        return [
            ExchangeRateDTO.from_entity(exchange_rate)
            for exchange_rate in ExchangeRateRepository.list_all(from_currency, to_currency, ordering)
        ]

    @staticmethod
    def delete_exchange_rate(rate_id) -> bool:
        deleted = ExchangeRateRepository.delete_by_id(rate_id)
        if deleted:
            logger.info("Deleted rate %s", rate_id)
        return deleted
