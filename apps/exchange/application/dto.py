"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from apps.exchange.domain.models import ConversionResult, ExchangeRate


@dataclass
class ConvertCurrencyCommand:
    """Request DTO for currency conversion."""
    from_currency: str
    to_currency: str
    amount: Decimal


@dataclass
class ConversionResultDTO:
    """Result DTO for currency conversion."""
    from_currency: str
    to_currency: str
    from_amount: Decimal
    to_amount: Decimal
    rate: Decimal
    conversion_date: datetime
    conversion_path: Optional[str] = None

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionResultDTO":
        return cls(
            from_currency=result.currency_pair.from_currency.value,
            to_currency=result.currency_pair.to_currency.value,
            from_amount=result.from_amount,
            to_amount=result.to_amount,
            rate=result.rate.value,
            conversion_date=result.conversion_time,
            conversion_path=result.conversion_path,
        )


@dataclass
class ExchangeRateDTO:
    """Exchange rate data transfer object."""
    from_currency: str
    to_currency: str
    rate: Decimal
    source: str
    timestamp: datetime
    id: Optional[str] = None

    @classmethod
    def from_entity(cls, exchange_rate: ExchangeRate) -> "ExchangeRateDTO":
        return cls(
            id=str(exchange_rate.id),
            from_currency=exchange_rate.currency_pair.from_currency.value,
            to_currency=exchange_rate.currency_pair.to_currency.value,
            rate=exchange_rate.rate.value,
            source=exchange_rate.source,
            timestamp=exchange_rate.timestamp,
        )


@dataclass
class RateSeedResultDTO:
    """Result DTO for the rate seeding task."""
    success: bool
    rates_loaded: int
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "rates_loaded": self.rates_loaded,
            "errors": list(self.errors),
        }
