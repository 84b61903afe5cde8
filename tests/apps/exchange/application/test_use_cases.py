import pytest
from decimal import Decimal

from apps.exchange.application.dto import ConvertCurrencyCommand
from apps.exchange.application.services import (
    ConversionApplicationService,
    ExchangeRateApplicationService,
    build_conversion_engine,
    ensure_supported_currency,
)
from apps.exchange.domain.exceptions import RateNotFound, SameCurrencyError, UnsupportedCurrency
from apps.exchange.domain.models import CurrencyCode, CurrencyPair, Rate
from apps.exchange.infrastructure.persistence.models import ExchangeRateRecord
from apps.exchange.infrastructure.persistence.repositories import DjangoRateStore


class TestSupportedCurrencies:
    """Tests for the supported-currency check."""

    def test_supported(self):
        assert ensure_supported_currency(" jpy ") == CurrencyCode.of("JPY")

    def test_unsupported(self):
        with pytest.raises(UnsupportedCurrency) as excinfo:
            ensure_supported_currency("XAU")

        assert excinfo.value.message == "Unsupported currency code: XAU"

    def test_empty_setting_accepts_everything(self, settings):
        settings.EXCHANGE_SUPPORTED_CURRENCIES = []

        assert ensure_supported_currency("XAU") == CurrencyCode.of("XAU")


class TestBuildConversionEngine:
    """Tests for engine wiring from Django settings."""

    def test_defaults_to_database_store(self):
        engine = build_conversion_engine()

        assert isinstance(engine.rate_store, DjangoRateStore)
        assert engine.pivot_currency == CurrencyCode.of("USD")

    def test_reads_pivot_and_scales(self, settings, rate_store):
        settings.EXCHANGE_PIVOT_CURRENCY = "eur"
        settings.EXCHANGE_CURRENCY_SCALES = {"JPY": 2}

        engine = build_conversion_engine(rate_store)

        assert engine.rate_store is rate_store
        assert engine.pivot_currency == CurrencyCode.of("EUR")
        assert engine.precision.scale_for("JPY") == 2


class TestConversionApplicationService:
    """Tests for the conversion use case."""

    def test_convert_with_injected_store(self, reference_store):
        command = ConvertCurrencyCommand("EUR", "JPY", Decimal("100"))

        result = ConversionApplicationService.convert_currency(command, rate_store=reference_store)

        assert result.to_amount == Decimal("12980")
        assert result.conversion_path == "EUR→USD→JPY"

    def test_convert_rejects_unsupported_currency(self, reference_store):
        command = ConvertCurrencyCommand("USD", "XAU", Decimal("100"))

        with pytest.raises(UnsupportedCurrency):
            ConversionApplicationService.convert_currency(command, rate_store=reference_store)

    def test_convert_same_currency(self, reference_store):
        command = ConvertCurrencyCommand("usd", "USD", Decimal("100"))

        with pytest.raises(SameCurrencyError):
            ConversionApplicationService.convert_currency(command, rate_store=reference_store)

    @pytest.mark.django_db
    def test_convert_from_database(self):
        ExchangeRateRecord.objects.create(from_currency="EUR", to_currency="USD", rate=Decimal("1.18"))

        result = ConversionApplicationService.convert_currency(
            ConvertCurrencyCommand("USD", "EUR", Decimal("100"))
        )

        assert result.to_amount == Decimal("84.75")
        assert result.rate == Decimal("0.847458")
        assert result.conversion_path is None

    @pytest.mark.django_db
    def test_convert_from_database_no_rate(self):
        with pytest.raises(RateNotFound):
            ConversionApplicationService.convert_currency(
                ConvertCurrencyCommand("USD", "EUR", Decimal("100"))
            )

    @pytest.mark.django_db
    def test_convert_never_writes(self):
        ExchangeRateRecord.objects.create(from_currency="USD", to_currency="EUR", rate=Decimal("0.85"))

        ConversionApplicationService.convert_currency(ConvertCurrencyCommand("USD", "EUR", Decimal("1")))

        assert ExchangeRateRecord.objects.count() == 1


@pytest.mark.django_db
class TestExchangeRateApplicationService:
    """Tests for create-or-update and query use cases."""

    def test_create_new_rate(self):
        exchange_rate = ExchangeRateApplicationService.create_exchange_rate(
            CurrencyPair.of("USD", "EUR"), Rate.of("0.92"), "ECB"
        )

        assert exchange_rate.source == "ECB"
        assert ExchangeRateRecord.objects.count() == 1

    def test_create_defaults_source(self):
        exchange_rate = ExchangeRateApplicationService.create_exchange_rate(
            CurrencyPair.of("USD", "EUR"), Rate.of("0.92")
        )

        assert exchange_rate.source == "Manual"

    def test_create_existing_pair_updates_in_place(self):
        first = ExchangeRateApplicationService.create_exchange_rate(
            CurrencyPair.of("USD", "EUR"), Rate.of("0.92"), "ECB"
        )

        second = ExchangeRateApplicationService.create_exchange_rate(
            CurrencyPair.of("USD", "EUR"), Rate.of("0.93"), "Fed"
        )

        assert second.id == first.id
        assert second.rate == Rate.of("0.93")
        assert second.source == "Fed"
        assert second.timestamp >= first.timestamp
        assert ExchangeRateRecord.objects.count() == 1

    def test_create_reverse_pair_is_separate(self):
        ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("USD", "EUR"), Rate.of("0.92"))
        ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("EUR", "USD"), Rate.of("1.09"))

        assert ExchangeRateRecord.objects.count() == 2

    def test_create_unsupported_currency(self):
        with pytest.raises(UnsupportedCurrency):
            ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("USD", "XAU"), Rate.of("0.0005"))

        assert ExchangeRateRecord.objects.count() == 0

    def test_get_latest_exchange_rate(self):
        ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("USD", "JPY"), Rate.of("149.50"))

        latest = ExchangeRateApplicationService.get_latest_exchange_rate(CurrencyPair.of("USD", "JPY"))

        assert latest.rate.value == Decimal("149.50")
        assert ExchangeRateApplicationService.get_latest_exchange_rate(CurrencyPair.of("JPY", "USD")) is None

    def test_list_and_delete(self):
        created = ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("USD", "JPY"), Rate.of("149.50"))
        ExchangeRateApplicationService.create_exchange_rate(CurrencyPair.of("EUR", "GBP"), Rate.of("0.86"))

        assert len(ExchangeRateApplicationService.list_exchange_rates()) == 2
        assert [dto.to_currency for dto in ExchangeRateApplicationService.list_exchange_rates("USD")] == ["JPY"]

        assert ExchangeRateApplicationService.delete_exchange_rate(created.id) is True
        assert ExchangeRateApplicationService.get_exchange_rate_by_id(created.id) is None
        assert len(ExchangeRateApplicationService.list_exchange_rates()) == 1
