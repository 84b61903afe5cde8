"""
Typed errors raised by the exchange domain.

Callers catch by type and read ``code`` for a machine-readable kind:

    ExchangeError
    +-- InvalidCurrencyCode   (ValueError)
    |   +-- UnsupportedCurrency
    +-- InvalidRate           (ValueError)
    +-- SameCurrencyError     (ValueError)
    +-- InvalidAmount         (ValueError)
    +-- RateNotFound          (LookupError)
"""


class ExchangeError(Exception):
    """Base class for every exchange domain error."""

    code = "EXCHANGE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExchangeError, ValueError):
    """Input rejected before any rate lookup happens."""

    code = "VALIDATION_ERROR"


class InvalidCurrencyCode(ValidationError):
    code = "INVALID_CURRENCY_CODE"

    def __init__(self, raw, message: str = "Currency code must be exactly 3 characters"):
        super().__init__(message)
        self.raw = raw


class UnsupportedCurrency(InvalidCurrencyCode):
    code = "UNSUPPORTED_CURRENCY"

    def __init__(self, raw):
        super().__init__(raw, f"Unsupported currency code: {raw}")


class InvalidRate(ValidationError):
    code = "INVALID_RATE"

    def __init__(self, value, message: str = "Exchange rate must be greater than 0"):
        super().__init__(message)
        self.value = value


class SameCurrencyError(ValidationError):
    code = "SAME_CURRENCY"

    def __init__(self, currency):
        super().__init__("Source and target currencies cannot be the same")
        self.currency = currency


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"

    def __init__(self, amount, message: str = "Amount must be greater than 0"):
        super().__init__(message)
        self.amount = amount


class RateNotFound(ExchangeError, LookupError):
    """No direct, reverse or pivot-chain rate connects the two currencies."""

    code = "RATE_NOT_FOUND"

    def __init__(self, currency_pair):
        super().__init__(f"No exchange rate available for {currency_pair}")
        self.currency_pair = currency_pair
