# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingSpot, Slot


class ParkingSpotSerializer(serializers.ModelSerializer):
    distance = serializers.SerializerMethodField()
    empty_slots = serializers.SerializerMethodField()

    class Meta:
        model = ParkingSpot
        fields = ['id', 'spot_number', 'name', 'address', 'latitude', 'longitude', 'is_available',
                  'price_per_hour', 'difficulty_level', 'difficulty_reasons', 'difficulty_notes',
                  'distance', 'empty_slots', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_distance(self, obj):
        """Set by the nearby search only"""
        return getattr(obj, 'distance', None)

    def get_empty_slots(self, obj):
        return obj.slots.filter(status=Slot.STATUS_EMPTY).count()


class SlotSerializer(serializers.ModelSerializer):
    spot_number = serializers.CharField(source='parking_spot.spot_number', read_only=True)
    price_per_hour = serializers.DecimalField(
        source='parking_spot.price_per_hour', max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = Slot
        fields = ['id', 'slot_number', 'parking_spot', 'spot_number', 'price_per_hour', 'status',
                  'last_updated', 'floor', 'slot_type', 'created_at']
        # Status changes go through the state machine, never a plain write
        read_only_fields = ['status', 'last_updated', 'created_at']


class SlotStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Slot.STATUS_CHOICES)
