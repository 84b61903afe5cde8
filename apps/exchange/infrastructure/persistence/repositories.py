"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.
"""

from typing import Iterable, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError

from apps.exchange.domain.interfaces import RateStore
from apps.exchange.domain.models import CurrencyCode, CurrencyPair, ExchangeRate, Rate
from apps.exchange.infrastructure.persistence.models import ExchangeRateRecord

# Fields a rate listing may be ordered by.
SORTABLE_FIELDS = ("timestamp", "rate", "from_currency", "to_currency")
DEFAULT_ORDERING = "-timestamp"


def to_entity(record: ExchangeRateRecord) -> ExchangeRate:
    return ExchangeRate(
        id=record.id,
        currency_pair=CurrencyPair.of(record.from_currency, record.to_currency),
        rate=Rate.of(record.rate),
        source=record.source,
        timestamp=record.timestamp,
    )


class ExchangeRateRepository:
    """Repository for the ExchangeRate aggregate."""

    @staticmethod
    def get_latest(currency_pair: CurrencyPair) -> Optional[ExchangeRate]:
        """Most recent rate stored for the exact ordered pair."""
        record = (
            ExchangeRateRecord.objects
            .filter(
                from_currency=currency_pair.from_currency.value,
                to_currency=currency_pair.to_currency.value,
            )
            .order_by('-timestamp', '-created_at')
            .first()
        )
        return to_entity(record) if record else None

    @staticmethod
    def get_by_id(rate_id) -> Optional[ExchangeRate]:
        """Get rate by primary key; malformed ids count as missing."""
        try:
            record = ExchangeRateRecord.objects.get(pk=UUID(str(rate_id)))
        except (ValueError, DjangoValidationError, ExchangeRateRecord.DoesNotExist):
            return None
        return to_entity(record)

    @staticmethod
    def list_all(
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
        ordering: str = DEFAULT_ORDERING,
    ) -> List[ExchangeRate]:
        """All rates, newest first by default, optionally filtered by source and/or target code."""
        queryset = ExchangeRateRecord.objects.all()
        if from_currency:
            queryset = queryset.filter(from_currency=CurrencyCode.of(from_currency).value)
        if to_currency:
            queryset = queryset.filter(to_currency=CurrencyCode.of(to_currency).value)
        return [to_entity(record) for record in queryset.order_by(ordering, '-created_at')]

    @staticmethod
    def save(exchange_rate: ExchangeRate) -> ExchangeRate:
        """Insert or update the row carrying the entity's id."""
        record, _ = ExchangeRateRecord.objects.update_or_create(
            id=exchange_rate.id,
            defaults={
                "from_currency": exchange_rate.currency_pair.from_currency.value,
                "to_currency": exchange_rate.currency_pair.to_currency.value,
                "rate": exchange_rate.rate.value,
                "source": exchange_rate.source,
                "timestamp": exchange_rate.timestamp,
            },
        )
        return to_entity(record)

    @staticmethod
    def bulk_create(exchange_rates: Iterable[ExchangeRate]) -> List[ExchangeRateRecord]:
        """Bulk insert new rates."""
        records = [
            ExchangeRateRecord(
                id=rate.id,
                from_currency=rate.currency_pair.from_currency.value,
                to_currency=rate.currency_pair.to_currency.value,
                rate=rate.rate.value,
                source=rate.source,
                timestamp=rate.timestamp,
            )
            for rate in exchange_rates
        ]
        return ExchangeRateRecord.objects.bulk_create(records)

    @staticmethod
    def delete_by_id(rate_id) -> bool:
        """Delete a rate; returns False if nothing matched."""
        try:
            deleted, _ = ExchangeRateRecord.objects.filter(pk=UUID(str(rate_id))).delete()
        except ValueError:
            return False
        return deleted > 0

    @staticmethod
    def count() -> int:
        return ExchangeRateRecord.objects.count()


class DjangoRateStore(RateStore):
    """RateStore backed by the ExchangeRateRecord table."""

    def find_latest_rate(self, currency_pair: CurrencyPair) -> Rate | None:
        exchange_rate = ExchangeRateRepository.get_latest(currency_pair)
        return exchange_rate.rate if exchange_rate else None
