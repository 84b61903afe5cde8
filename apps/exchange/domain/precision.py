"""
Display precision for converted amounts.
Rate algebra never goes through this policy; it only shapes the final amount.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional

from apps.exchange.domain.models import CurrencyCode, quantize_exact

DEFAULT_SCALE = 6

DEFAULT_CURRENCY_SCALES: Dict[str, int] = {
    "JPY": 0,
    "TWD": 2,
    "CNY": 2,
    "USD": 2,
    "CHF": 2,
    "AUD": 2,
    "CAD": 2,
    "EUR": 2,
    "GBP": 2,
}


@dataclass(frozen=True)
class PrecisionPolicy:
    """Maps a currency to its decimal scale; unknown currencies get ``default_scale``."""

    scales: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_CURRENCY_SCALES))
    default_scale: int = DEFAULT_SCALE
    rounding: str = ROUND_HALF_UP

    @classmethod
    def with_overrides(cls, overrides: Optional[Mapping[str, int]] = None) -> "PrecisionPolicy":
        scales = dict(DEFAULT_CURRENCY_SCALES)
        for code, scale in (overrides or {}).items():
            scales[CurrencyCode.of(code).value] = int(scale)
        return cls(scales=scales)

    def scale_for(self, currency) -> int:
        return self.scales.get(CurrencyCode.of(currency).value, self.default_scale)

    def apply(self, amount: Decimal, currency) -> Decimal:
        quantum = Decimal(1).scaleb(-self.scale_for(currency))
        return quantize_exact(amount, quantum, rounding=self.rounding)
