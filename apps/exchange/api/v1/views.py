"""
ViewSets for the exchange API v1.
Exchange rate CRUD plus the conversion endpoint, exposed via DRF router.
"""

import logging

from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.exchange.api.v1.serializers import (
    ConversionRequestSerializer,
    ConversionResponseSerializer,
    CreateExchangeRateSerializer,
    ExchangeRateSerializer,
)
from apps.exchange.application.dto import ConvertCurrencyCommand, ExchangeRateDTO
from apps.exchange.application.services import (
    SORTABLE_FIELDS,
    ConversionApplicationService,
    ExchangeRateApplicationService,
)
from apps.exchange.domain.exceptions import ExchangeError, RateNotFound
from apps.exchange.domain.models import CurrencyPair, Rate

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> Response:
    return Response(
        {"error": message, "timestamp": timezone.now().isoformat()},
        status=status_code,
    )


def invalid_serializer_response(serializer) -> Response:
    """400 carrying the first validation message, plus the full error map."""
    errors = serializer.errors
    first = next(iter(errors.values()))
    message = str(first[0]) if isinstance(first, list) and first else str(first)
    response = error_response(message, status.HTTP_400_BAD_REQUEST)
    response.data["details"] = errors
    return response


def exchange_error_response(error: ExchangeError) -> Response:
    if isinstance(error, RateNotFound):
        return error_response(error.message, status.HTTP_404_NOT_FOUND)
    return error_response(error.message, status.HTTP_400_BAD_REQUEST)


class ExchangeRatePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'size'
    max_page_size = 100


@extend_schema(tags=['Rates'])
class ExchangeRateViewSet(viewsets.ViewSet):

    serializer_class = ExchangeRateSerializer
    pagination_class = ExchangeRatePagination

    @extend_schema(
        parameters=[
            OpenApiParameter("from_currency", OpenApiTypes.STR, description="Filter by source currency code (e.g. USD)"),
            OpenApiParameter("to_currency", OpenApiTypes.STR, description="Filter by target currency code (e.g. EUR)"),
            OpenApiParameter("sort_by", OpenApiTypes.STR, enum=list(SORTABLE_FIELDS), description="Field to sort by (default timestamp)"),
            OpenApiParameter("sort_dir", OpenApiTypes.STR, enum=["asc", "desc"], description="Sort direction (default desc)"),
        ],
        responses=ExchangeRateSerializer(many=True),
        description="List stored exchange rates, paginated with page and size, newest first by default"
    )
    def list(self, request):
        sort_by = request.query_params.get('sort_by', 'timestamp')
        sort_dir = request.query_params.get('sort_dir', 'desc').lower()
        if sort_by not in SORTABLE_FIELDS:
            return error_response(
                f"sort_by must be one of: {', '.join(SORTABLE_FIELDS)}",
                status.HTTP_400_BAD_REQUEST,
            )
        if sort_dir not in ('asc', 'desc'):
            return error_response("sort_dir must be asc or desc", status.HTTP_400_BAD_REQUEST)

        try:
            rates = ExchangeRateApplicationService.list_exchange_rates(
                request.query_params.get('from_currency'),
                request.query_params.get('to_currency'),
                sort_by if sort_dir == 'asc' else f'-{sort_by}',
            )
        except ExchangeError as e:
            return exchange_error_response(e)

        paginator = self.pagination_class()
        try:
            page = paginator.paginate_queryset(rates, request, view=self)
        except NotFound as e:
            return error_response(str(e.detail), status.HTTP_404_NOT_FOUND)
        return paginator.get_paginated_response(ExchangeRateSerializer(page, many=True).data)

    @extend_schema(
        request=CreateExchangeRateSerializer,
        responses={201: ExchangeRateSerializer},
        description="Create an exchange rate, or update the existing one for the same currency pair"
    )
    def create(self, request):
        serializer = CreateExchangeRateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_serializer_response(serializer)

        data = serializer.validated_data
        try:
            exchange_rate = ExchangeRateApplicationService.create_exchange_rate(
                CurrencyPair.of(data['from_currency'], data['to_currency']),
                Rate.of(data['rate']),
                data.get('source'),
            )
        except ExchangeError as e:
            return exchange_error_response(e)

        return Response(
            ExchangeRateSerializer(ExchangeRateDTO.from_entity(exchange_rate)).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses=ExchangeRateSerializer)
    def retrieve(self, request, pk=None):
        exchange_rate = ExchangeRateApplicationService.get_exchange_rate_by_id(pk)
        if exchange_rate is None:
            return error_response(f"Exchange rate {pk} not found", status.HTTP_404_NOT_FOUND)

        return Response(ExchangeRateSerializer(ExchangeRateDTO.from_entity(exchange_rate)).data)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        if not ExchangeRateApplicationService.delete_exchange_rate(pk):
            return error_response(f"Exchange rate {pk} not found", status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter("from_currency", OpenApiTypes.STR, required=True, description="Source currency code (e.g. USD)"),
            OpenApiParameter("to_currency", OpenApiTypes.STR, required=True, description="Target currency code (e.g. EUR)"),
        ],
        responses=ExchangeRateSerializer,
        description="Get the latest stored rate for an exact currency pair"
    )
    @action(detail=False, methods=['get'], url_path='latest')
    def latest(self, request):
        from_currency = request.query_params.get('from_currency')
        to_currency = request.query_params.get('to_currency')

        if not all([from_currency, to_currency]):
            return error_response(
                "from_currency and to_currency are required",
                status.HTTP_400_BAD_REQUEST,
            )

        try:
            currency_pair = CurrencyPair.of(from_currency, to_currency)
        except ExchangeError as e:
            return exchange_error_response(e)

        exchange_rate = ExchangeRateApplicationService.get_latest_exchange_rate(currency_pair)
        if exchange_rate is None:
            return error_response(
                f"Exchange rate not found for {currency_pair}",
                status.HTTP_404_NOT_FOUND,
            )

        return Response(ExchangeRateSerializer(ExchangeRateDTO.from_entity(exchange_rate)).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("from_currency", OpenApiTypes.STR, description="Source currency code (GET only)"),
            OpenApiParameter("to_currency", OpenApiTypes.STR, description="Target currency code (GET only)"),
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, description="Amount to convert (GET only)"),
        ],
        request=ConversionRequestSerializer,
        responses=ConversionResponseSerializer,
        description=(
            "Convert an amount from one currency to another. "
            "Uses the direct rate, then the inverted reverse rate, then a chain through the pivot currency. "
            "conversion_path is set only for chain conversions."
        )
    )
    @action(detail=False, methods=['get', 'post'], url_path='convert')
    def convert(self, request):
        """
        Convert an amount from one currency to another.
        Accepts query params on GET and a JSON body on POST.
        """
        payload = request.query_params if request.method == 'GET' else request.data
        serializer = ConversionRequestSerializer(data=payload)
        if not serializer.is_valid():
            return invalid_serializer_response(serializer)

        data = serializer.validated_data
        command = ConvertCurrencyCommand(
            from_currency=data['from_currency'],
            to_currency=data['to_currency'],
            amount=data['amount'],
        )

        try:
            result = ConversionApplicationService.convert_currency(command)
        except ExchangeError as e:
            logger.info("Conversion %s->%s rejected: %s", command.from_currency, command.to_currency, e.message)
            return exchange_error_response(e)

        return Response(ConversionResponseSerializer(result).data)
