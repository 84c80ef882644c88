# ==================== PRICING/SERIALIZERS.PY ====================
from rest_framework import serializers

from utils.clock import WEEKDAYS
from .models import PricingRule


class PeakHourWindowSerializer(serializers.Serializer):
    start = serializers.IntegerField(min_value=0, max_value=23)
    end = serializers.IntegerField(min_value=0, max_value=23)


class PricingRuleSerializer(serializers.ModelSerializer):
    peak_hours = serializers.ListField(child=serializers.DictField(), required=False)
    days_of_week = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), required=False
    )
    spot_number = serializers.CharField(source='parking_spot.spot_number', read_only=True, default=None)

    class Meta:
        model = PricingRule
        fields = ['id', 'name', 'description', 'peak_hours', 'days_of_week', 'multiplier', 'is_active',
                  'parking_spot', 'spot_number', 'priority', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_peak_hours(self, value):
        windows = PeakHourWindowSerializer(data=value, many=True)
        windows.is_valid(raise_exception=True)
        return [{'start': w['start'], 'end': w['end']} for w in windows.validated_data]

    def validate_days_of_week(self, value):
        return list(dict.fromkeys(value))


class PriceCalculationSerializer(serializers.Serializer):
    parking_spot_id = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    duration = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0)
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class PeakHourQuerySerializer(serializers.Serializer):
    time = serializers.DateTimeField(required=False)
