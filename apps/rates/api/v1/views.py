"""
ViewSet for the rates API v1.
Every endpoint answers with the resolver envelope: {"success", "data" | "error"}.
"""

from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.rates.api.v1.serializers import (
    RateQuerySerializer,
    RateSerializer,
    TimeSeriesQuerySerializer,
    UsageSerializer,
)
from apps.rates.application.responses import ProviderResponse
from apps.rates.domain.errors import NotFoundError, UpstreamError, ValidationError
from apps.rates.infrastructure.providers.registry import get_rate_resolver


ERROR_STATUSES = {
    ValidationError.kind: status.HTTP_400_BAD_REQUEST,
    NotFoundError.kind: status.HTTP_404_NOT_FOUND,
    UpstreamError.kind: status.HTTP_502_BAD_GATEWAY,
}


def envelope_response(result: ProviderResponse, serializer_class, many=False) -> Response:
    if not result.success:
        return Response(
            {"success": False, "error": result.error.to_dict()},
            status=ERROR_STATUSES.get(result.error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )

    return Response({
        "success": True,
        "data": serializer_class(result.data, many=many).data,
    })


def invalid_query_response(errors) -> Response:
    return Response(
        {
            "success": False,
            "error": {
                "kind": ValidationError.kind,
                "message": "Invalid query parameters",
                "fields": errors,
            },
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


@extend_schema(tags=['Rates'])
class RateViewSet(viewsets.ViewSet):

    @extend_schema(
        parameters=[
            OpenApiParameter("source_currency", OpenApiTypes.STR, required=True, description="Source currency code (USD or ARS)"),
            OpenApiParameter("exchanged_currency", OpenApiTypes.STR, required=True, description="Target currency code (USD or ARS)"),
            OpenApiParameter("valuation_date", OpenApiTypes.DATE, description="Date for the rate (optional, defaults to today)"),
        ],
        description="Get the official USD/ARS rate for a single date"
    )
    @action(detail=False, methods=['get'], url_path='rate')
    def rate(self, request):
        query = RateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_query_response(query.errors)

        dto = query.to_dto(default_date=timezone.localdate())
        result = get_rate_resolver().fetch_exchange_rate(
            dto.source_currency,
            dto.exchanged_currency,
            dto.valuation_date,
        )
        return envelope_response(result, RateSerializer)

    @extend_schema(
        parameters=[
            OpenApiParameter("source_currency", OpenApiTypes.STR, required=True, description="Source currency code (USD or ARS)"),
            OpenApiParameter("exchanged_currency", OpenApiTypes.STR, required=True, description="Target currency code (USD or ARS)"),
            OpenApiParameter("date_from", OpenApiTypes.DATE, required=True, description="Start date (YYYY-MM-DD)"),
            OpenApiParameter("date_to", OpenApiTypes.DATE, required=True, description="End date (YYYY-MM-DD)"),
        ],
        description="Get the official USD/ARS rates within a date range, ascending"
    )
    @action(detail=False, methods=['get'], url_path='time-series')
    def time_series(self, request):
        query = TimeSeriesQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_query_response(query.errors)

        dto = query.to_dto()
        result = get_rate_resolver().fetch_exchange_rates(
            dto.source_currency,
            dto.exchanged_currency,
            dto.date_from,
            dto.date_to,
        )
        return envelope_response(result, RateSerializer, many=True)

    @extend_schema(description="Check that the upstream current-rate endpoint answers with prices")
    @action(detail=False, methods=['get'], url_path='health')
    def health(self, request):
        healthy = get_rate_resolver().healthy()
        return Response(
            {"healthy": healthy},
            status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @extend_schema(description="Quota usage reported by the configured rate source")
    @action(detail=False, methods=['get'], url_path='usage')
    def usage(self, request):
        return envelope_response(get_rate_resolver().usage(), UsageSerializer)
