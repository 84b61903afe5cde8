import pytest
from datetime import datetime, timezone
from decimal import Decimal

from apps.exchange.api.v1.serializers import (
    ConversionRequestSerializer,
    ConversionResponseSerializer,
    CreateExchangeRateSerializer,
    ExchangeRateSerializer,
)
from apps.exchange.application.dto import ConversionResultDTO, ExchangeRateDTO


class TestExchangeRateSerializer:
    """Tests for ExchangeRateSerializer."""

    def test_serialize_exchange_rate(self):
        """
        Test that ExchangeRateSerializer renders the rate at six decimal places.
        """
        dto = ExchangeRateDTO(
            id="6f1c0f57-6b8a-4a38-9d43-0a4b9e6a8a10",
            from_currency="USD",
            to_currency="JPY",
            rate=Decimal("149.5"),
            source="Central Bank",
            timestamp=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        )

        data = ExchangeRateSerializer(dto).data

        assert data["id"] == "6f1c0f57-6b8a-4a38-9d43-0a4b9e6a8a10"
        assert data["from_currency"] == "USD"
        assert data["to_currency"] == "JPY"
        assert data["rate"] == "149.500000"
        assert data["source"] == "Central Bank"
        assert data["timestamp"].startswith("2024-01-15T10:30:00")


class TestCreateExchangeRateSerializer:
    """Tests for CreateExchangeRateSerializer validation."""

    def test_valid_data_is_normalized(self):
        serializer = CreateExchangeRateSerializer(
            data={"from_currency": " usd ", "to_currency": "eur", "rate": "0.92"}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["from_currency"] == "USD"
        assert serializer.validated_data["to_currency"] == "EUR"
        assert serializer.validated_data["rate"] == Decimal("0.92")
        assert "source" not in serializer.validated_data

    @pytest.mark.parametrize("rate", ["0", "-0.5"])
    def test_non_positive_rate(self, rate):
        serializer = CreateExchangeRateSerializer(
            data={"from_currency": "USD", "to_currency": "EUR", "rate": rate}
        )

        assert not serializer.is_valid()
        assert serializer.errors["rate"] == ["Exchange rate must be greater than 0"]

    def test_same_currency(self):
        serializer = CreateExchangeRateSerializer(
            data={"from_currency": "usd", "to_currency": "USD", "rate": "1"}
        )

        assert not serializer.is_valid()
        assert serializer.errors["non_field_errors"] == ["Source and target currencies cannot be the same"]

    @pytest.mark.parametrize("code", ["US", "USDT", ""])
    def test_currency_code_length(self, code):
        serializer = CreateExchangeRateSerializer(
            data={"from_currency": code, "to_currency": "EUR", "rate": "1"}
        )

        assert not serializer.is_valid()
        assert "from_currency" in serializer.errors


class TestConversionRequestSerializer:
    """Tests for ConversionRequestSerializer validation."""

    def test_amount_keeps_its_precision(self):
        serializer = ConversionRequestSerializer(
            data={"from_currency": "eur", "to_currency": "jpy", "amount": "1234.56789"}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["amount"] == Decimal("1234.56789")
        assert serializer.validated_data["from_currency"] == "EUR"

    @pytest.mark.parametrize("amount", ["0", "-1", "not-a-number"])
    def test_invalid_amount(self, amount):
        serializer = ConversionRequestSerializer(
            data={"from_currency": "USD", "to_currency": "EUR", "amount": amount}
        )

        assert not serializer.is_valid()
        assert "amount" in serializer.errors

    def test_amount_digit_bound(self):
        accepted = ConversionRequestSerializer(
            data={"from_currency": "USD", "to_currency": "EUR", "amount": "1e27"}
        )
        rejected = ConversionRequestSerializer(
            data={"from_currency": "USD", "to_currency": "EUR", "amount": "1e45"}
        )

        assert accepted.is_valid(), accepted.errors
        assert accepted.validated_data["amount"] == Decimal("1e27")
        assert not rejected.is_valid()
        assert "amount" in rejected.errors


class TestConversionResponseSerializer:
    """Tests for ConversionResponseSerializer."""

    def test_keeps_target_scale(self):
        """
        Test that amounts are rendered with the scale the engine produced.
        """
        dto = ConversionResultDTO(
            from_currency="EUR",
            to_currency="JPY",
            from_amount=Decimal("100"),
            to_amount=Decimal("12980"),
            rate=Decimal("129.800000"),
            conversion_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
            conversion_path="EUR→USD→JPY",
        )

        data = ConversionResponseSerializer(dto).data

        assert data["from_amount"] == "100"
        assert data["to_amount"] == "12980"
        assert data["rate"] == "129.800000"
        assert data["conversion_path"] == "EUR→USD→JPY"

    def test_direct_conversion_has_null_path(self):
        dto = ConversionResultDTO(
            from_currency="USD",
            to_currency="EUR",
            from_amount=Decimal("100"),
            to_amount=Decimal("85.00"),
            rate=Decimal("0.850000"),
            conversion_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
        )

        data = ConversionResponseSerializer(dto).data

        assert data["to_amount"] == "85.00"
        assert data["conversion_path"] is None
