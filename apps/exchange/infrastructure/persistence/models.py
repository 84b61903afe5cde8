"""
Django ORM models for persistence.
Infrastructure layer: technical storage detail.
"""

import uuid
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class BaseModel(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ExchangeRateRecord(BaseModel):

    from_currency = models.CharField(max_length=3, db_index=True)
    to_currency = models.CharField(max_length=3, db_index=True)
    rate = models.DecimalField(
        decimal_places=6,
        max_digits=18,
    )
    source = models.CharField(max_length=100, default="Manual")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=~Q(from_currency=F("to_currency")),
                name="exchange_rate_distinct_currencies",
            ),
            models.CheckConstraint(
                condition=Q(rate__gt=0),
                name="exchange_rate_positive",
            ),
        ]
        indexes = [
            models.Index(
                fields=["from_currency", "to_currency", "-timestamp"],
                name="exchange_rate_pair_latest",
            ),
        ]
        ordering = ["-timestamp"]

    def __str__(self):
        return f"From {self.from_currency} To {self.to_currency} | {self.timestamp} | {self.rate}"
