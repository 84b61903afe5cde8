"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional
from uuid import uuid4, UUID

from apps.exchange.domain.exceptions import (
    InvalidCurrencyCode,
    InvalidRate,
    SameCurrencyError,
)

# Scale used for rate algebra (inversion, effective chain rates).
WORKING_SCALE = 6
WORKING_QUANTUM = Decimal(1).scaleb(-WORKING_SCALE)

DEFAULT_RATE_SOURCE = "Manual"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_decimal(value) -> Decimal:
    """Coerce ``value`` to an exact Decimal, going through ``str`` for floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    return Decimal(str(value).strip())


def quantize_exact(value: Decimal, quantum: Decimal, rounding: str = ROUND_HALF_UP) -> Decimal:
    """``value.quantize(quantum)`` with enough context precision for any magnitude."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - quantum.as_tuple().exponent + 2)
        return value.quantize(quantum, rounding=rounding)


def multiply_exact(left: Decimal, right: Decimal) -> Decimal:
    """Product of two Decimals, never rounded by the context."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(left.as_tuple().digits) + len(right.as_tuple().digits))
        return left * right


def round_rate(value: Decimal) -> Decimal:
    """
    Round a rate to the working scale.

    A positive rate too small for six decimal places keeps
    WORKING_SCALE significant digits instead of collapsing to zero.
    """
    rounded = quantize_exact(value, WORKING_QUANTUM)
    if rounded.is_zero() and not value.is_zero():
        return Context(prec=WORKING_SCALE, rounding=ROUND_HALF_UP).plus(value)
    return rounded


@dataclass(frozen=True)
class CurrencyCode:

    value: str

    def __post_init__(self):
        raw = self.value
        if raw is None or not isinstance(raw, str) or not raw.strip():
            raise InvalidCurrencyCode(raw, "Currency code cannot be null or empty")

        normalized = raw.strip().upper()
        if len(normalized) != 3:
            raise InvalidCurrencyCode(raw)

        object.__setattr__(self, "value", normalized)

    @classmethod
    def of(cls, raw) -> "CurrencyCode":
        if isinstance(raw, CurrencyCode):
            return raw
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Rate:

    value: Decimal

    def __post_init__(self):
        raw = self.value
        if raw is None:
            raise InvalidRate(raw, "Rate cannot be null")
        try:
            value = to_decimal(raw)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidRate(raw, f"Rate must be a number, got {raw!r}")

        if not value.is_finite() or value <= 0:
            raise InvalidRate(raw)

        object.__setattr__(self, "value", value)

    @classmethod
    def of(cls, value) -> "Rate":
        if isinstance(value, Rate):
            return value
        return cls(value)

    def inverse(self) -> "Rate":
        """1 / value at working precision (6 dp, half-up, never zero)."""
        return Rate(round_rate(Decimal(1) / self.value))

    def quantized(self) -> "Rate":
        return Rate(round_rate(self.value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CurrencyPair:

    from_currency: CurrencyCode
    to_currency: CurrencyCode

    def __post_init__(self):
        object.__setattr__(self, "from_currency", CurrencyCode.of(self.from_currency))
        object.__setattr__(self, "to_currency", CurrencyCode.of(self.to_currency))

        if self.from_currency == self.to_currency:
            raise SameCurrencyError(self.from_currency)

    @classmethod
    def of(cls, from_currency, to_currency) -> "CurrencyPair":
        return cls(from_currency, to_currency)

    def reverse(self) -> "CurrencyPair":
        return CurrencyPair(self.to_currency, self.from_currency)

    def __str__(self) -> str:
        return f"{self.from_currency}/{self.to_currency}"


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a single resolution; ``conversion_path`` is set only for pivot chains."""

    currency_pair: CurrencyPair
    from_amount: Decimal
    to_amount: Decimal
    rate: Rate
    conversion_time: datetime
    conversion_path: Optional[str] = None

    @property
    def is_direct_conversion(self) -> bool:
        return self.conversion_path is None

    @property
    def is_chain_conversion(self) -> bool:
        return self.conversion_path is not None

    def __str__(self) -> str:
        text = (
            f"{self.from_amount} {self.currency_pair.from_currency} -> "
            f"{self.to_amount} {self.currency_pair.to_currency}, rate={self.rate}"
        )
        if self.conversion_path:
            text += f", path={self.conversion_path}"
        return text


@dataclass(frozen=True)
class ExchangeRate:

    currency_pair: CurrencyPair
    rate: Rate
    source: str = DEFAULT_RATE_SOURCE
    timestamp: datetime = field(default_factory=utc_now)
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def create(cls, currency_pair: CurrencyPair, rate: Rate, source: Optional[str] = None) -> "ExchangeRate":
        return cls(
            currency_pair=currency_pair,
            rate=Rate.of(rate),
            source=source or DEFAULT_RATE_SOURCE,
        )

    def with_rate(self, rate: Rate, source: Optional[str] = None) -> "ExchangeRate":
        """Same entity (same id) carrying a new rate and a fresh timestamp."""
        return replace(
            self,
            rate=Rate.of(rate),
            source=source or self.source,
            timestamp=utc_now(),
        )

    def is_current(self, within_seconds: int) -> bool:
        return self.timestamp > utc_now() - timedelta(seconds=within_seconds)
