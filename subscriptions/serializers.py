from rest_framework import serializers
from .models import Subscription


class SubscriptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subscription
        fields = [
            'id', 'user', 'plan', 'price', 'start_date', 'end_date', 'is_active', 'auto_renew',
            'discount_percentage', 'free_hours_per_month', 'priority_booking',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SubscriptionPurchaseSerializer(serializers.Serializer):
    plan = serializers.ChoiceField(choices=Subscription.PLAN_CHOICES)
    auto_renew = serializers.BooleanField(default=False)
