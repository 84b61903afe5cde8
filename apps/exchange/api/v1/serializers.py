"""
Serializers for the exchange bounded context.
Handles validation and transformation between API and application layers.
"""

from rest_framework import serializers

# Total digits accepted for an amount to convert.
MAX_AMOUNT_DIGITS = 40


class CurrencyCodeField(serializers.CharField):
    """Three-letter code, trimmed and upper-cased."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_length", 3)
        kwargs.setdefault("max_length", 3)
        kwargs.setdefault("trim_whitespace", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return super().to_internal_value(data).upper()


class ExchangeRateSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    from_currency = serializers.CharField(read_only=True)
    to_currency = serializers.CharField(read_only=True)
    rate = serializers.DecimalField(max_digits=18, decimal_places=6, read_only=True)
    source = serializers.CharField(read_only=True)
    timestamp = serializers.DateTimeField(read_only=True)


class CreateExchangeRateSerializer(serializers.Serializer):
    from_currency = CurrencyCodeField()
    to_currency = CurrencyCodeField()
    rate = serializers.DecimalField(max_digits=18, decimal_places=6)
    source = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)

    def validate_rate(self, value):
        if value <= 0:
            raise serializers.ValidationError("Exchange rate must be greater than 0")
        return value

    def validate(self, attrs):
        if attrs["from_currency"] == attrs["to_currency"]:
            raise serializers.ValidationError("Source and target currencies cannot be the same")
        return attrs


class ConversionRequestSerializer(serializers.Serializer):
    from_currency = CurrencyCodeField()
    to_currency = CurrencyCodeField()
    amount = serializers.DecimalField(max_digits=MAX_AMOUNT_DIGITS, decimal_places=None)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value


class ConversionResponseSerializer(serializers.Serializer):
    from_currency = serializers.CharField()
    to_currency = serializers.CharField()
    # decimal_places=None keeps the scale chosen by the precision policy
    from_amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    to_amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    rate = serializers.DecimalField(max_digits=None, decimal_places=None)
    conversion_date = serializers.DateTimeField()
    conversion_path = serializers.CharField(allow_null=True)
