"""
Serializers for the rates bounded context.
Handles query parsing and the rendering of domain values.
"""

from rest_framework import serializers

from apps.rates.application.dto import RateQueryDTO, TimeSeriesRequestDTO


class CurrencyCodeField(serializers.CharField):

    def __init__(self, **kwargs):
        kwargs.setdefault("min_length", 3)
        kwargs.setdefault("max_length", 3)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return super().to_internal_value(data).upper()


class RateQuerySerializer(serializers.Serializer):
    source_currency = CurrencyCodeField()
    exchanged_currency = CurrencyCodeField()
    valuation_date = serializers.DateField(required=False)

    def to_dto(self, default_date) -> RateQueryDTO:
        data = self.validated_data
        return RateQueryDTO(
            source_currency=data["source_currency"],
            exchanged_currency=data["exchanged_currency"],
            valuation_date=data.get("valuation_date") or default_date,
        )


class TimeSeriesQuerySerializer(serializers.Serializer):
    source_currency = CurrencyCodeField()
    exchanged_currency = CurrencyCodeField()
    date_from = serializers.DateField()
    date_to = serializers.DateField()

    def to_dto(self) -> TimeSeriesRequestDTO:
        return TimeSeriesRequestDTO(**self.validated_data)


class RateSerializer(serializers.Serializer):
    valuation_date = serializers.DateField()
    source_currency = serializers.CharField()
    exchanged_currency = serializers.CharField()
    rate_value = serializers.FloatField()
    resolved_date = serializers.DateField(allow_null=True)


class UsageSerializer(serializers.Serializer):
    used = serializers.IntegerField()
    limit = serializers.IntegerField()
    utilization = serializers.FloatField()
    plan = serializers.CharField()
