# ==================== RESERVATIONS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import Reservation


class ReservationSerializer(serializers.ModelSerializer):
    slot_number = serializers.CharField(source='slot.slot_number', read_only=True)
    slot_status = serializers.CharField(source='slot.status', read_only=True)
    spot_name = serializers.CharField(source='parking_spot.name', read_only=True)
    price_per_hour = serializers.DecimalField(
        source='parking_spot.price_per_hour', max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = Reservation
        fields = [
            'id', 'user', 'slot', 'slot_number', 'slot_status', 'parking_spot',
            'spot_name', 'price_per_hour', 'start_time', 'duration', 'end_time',
            'status', 'expires_at', 'qr_code', 'entry_time', 'exit_time',
            'estimated_price', 'final_price', 'payment_status',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ReservationCreateSerializer(serializers.Serializer):
    slot_id = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    # Lower bound enforced by the reservation service
    duration = serializers.DecimalField(max_digits=6, decimal_places=2)


class QRScanSerializer(serializers.Serializer):
    qr_data = serializers.CharField(trim_whitespace=False)
