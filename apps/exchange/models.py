# ORM models live in the infrastructure layer; imported here so Django registers them.
from apps.exchange.infrastructure.persistence.models import ExchangeRateRecord  # noqa: F401
