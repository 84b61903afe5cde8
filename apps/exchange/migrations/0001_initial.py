import uuid

import django.db.models.expressions
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ExchangeRateRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("from_currency", models.CharField(db_index=True, max_length=3)),
                ("to_currency", models.CharField(db_index=True, max_length=3)),
                ("rate", models.DecimalField(decimal_places=6, max_digits=18)),
                ("source", models.CharField(default="Manual", max_length=100)),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["from_currency", "to_currency", "-timestamp"],
                        name="exchange_rate_pair_latest",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("from_currency", django.db.models.expressions.F("to_currency")),
                            _negated=True,
                        ),
                        name="exchange_rate_distinct_currencies",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("rate__gt", 0)),
                        name="exchange_rate_positive",
                    ),
                ],
            },
        ),
    ]
