# ==================== PAYMENTS/SERIALIZERS.PY ====================
from decimal import Decimal
from rest_framework import serializers
from .models import Transaction, WalletTopUp


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = [
            'id', 'transaction_type', 'amount', 'category', 'ref_model',
            'ref_id', 'balance_after', 'description', 'created_at'
        ]
        read_only_fields = fields


class WalletAddSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ConvertPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField()


class TopUpInitiateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1)


class TopUpVerifySerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField()
    razorpay_payment_id = serializers.CharField()
    razorpay_signature = serializers.CharField()


class WalletTopUpSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTopUp
        fields = [
            'id', 'amount', 'status', 'razorpay_order_id',
            'razorpay_payment_id', 'created_at', 'updated_at'
        ]
        read_only_fields = fields
