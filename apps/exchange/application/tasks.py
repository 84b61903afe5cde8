"""
Celery tasks for background processing.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from celery import shared_task

from apps.exchange.application.dto import RateSeedResultDTO
from apps.exchange.application.services import ExchangeRateApplicationService
from apps.exchange.domain.exceptions import ExchangeError
from apps.exchange.domain.models import CurrencyPair, Rate

logger = logging.getLogger(__name__)

# Reference rates loaded when no explicit list is given.
DEFAULT_SEED_RATES: List[Dict] = [
    {"from_currency": "USD", "to_currency": "EUR", "rate": Decimal("0.92"), "source": "Central Bank"},
    {"from_currency": "USD", "to_currency": "GBP", "rate": Decimal("0.79"), "source": "Central Bank"},
    {"from_currency": "USD", "to_currency": "JPY", "rate": Decimal("149.50"), "source": "Central Bank"},
    {"from_currency": "EUR", "to_currency": "USD", "rate": Decimal("1.09"), "source": "Central Bank"},
    {"from_currency": "EUR", "to_currency": "GBP", "rate": Decimal("0.86"), "source": "Central Bank"},
    {"from_currency": "GBP", "to_currency": "USD", "rate": Decimal("1.27"), "source": "Central Bank"},
    {"from_currency": "USD", "to_currency": "CNY", "rate": Decimal("7.24"), "source": "Central Bank"},
    {"from_currency": "USD", "to_currency": "CHF", "rate": Decimal("0.88"), "source": "Central Bank"},
]


@shared_task(name="seed_exchange_rates")
def seed_exchange_rates(rates: Optional[List[Dict]] = None) -> Dict:
    """
    Load a list of exchange rates through the create-or-update use case.

    Each entry needs from_currency, to_currency and rate; source is optional.
    Invalid entries are reported in ``errors`` and do not stop the others.

    Args:
        rates: Entries to load; defaults to DEFAULT_SEED_RATES

    Returns:
        Dict with operation results
    """
    entries = DEFAULT_SEED_RATES if rates is None else rates

    if not entries:
        return {
            "success": False,
            "message": "No exchange rates to load",
            "rates_loaded": 0,
            "errors": [],
        }

    logger.info("Seeding %d exchange rates...", len(entries))

    result = RateSeedResultDTO(success=True, rates_loaded=0)

    for index, entry in enumerate(entries):
        try:
            currency_pair = CurrencyPair.of(entry["from_currency"], entry["to_currency"])
            rate = Rate.of(entry["rate"])
        except KeyError as e:
            result.errors.append(f"Entry {index}: missing field {e}")
            continue
        except ExchangeError as e:
            result.errors.append(f"Entry {index}: {e.message}")
            continue

        try:
            ExchangeRateApplicationService.create_exchange_rate(currency_pair, rate, entry.get("source"))
        except ExchangeError as e:
            result.errors.append(f"Entry {index} ({currency_pair}): {e.message}")
            continue

        result.rates_loaded += 1

    if result.errors:
        logger.warning("Seeding finished with %d error(s)", len(result.errors))

    result.success = result.rates_loaded > 0
    return result.to_dict()
