from rest_framework import serializers
from .models import PanicAlert


class PanicAlertSerializer(serializers.ModelSerializer):
    class Meta:
        model = PanicAlert
        fields = [
            'id', 'user', 'reservation', 'parking_spot', 'issue_type', 'message',
            'latitude', 'longitude', 'status', 'admin_notes', 'resolved_at', 'resolved_by',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PanicAlertCreateSerializer(serializers.Serializer):
    reservation_id = serializers.IntegerField()
    issue_type = serializers.ChoiceField(choices=PanicAlert.ISSUE_CHOICES)
    message = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)
    latitude = serializers.DecimalField(max_digits=9, decimal_places=6, required=False, min_value=-90, max_value=90)
    longitude = serializers.DecimalField(max_digits=9, decimal_places=6, required=False, min_value=-180, max_value=180)


class PanicResolveSerializer(serializers.Serializer):
    admin_notes = serializers.CharField(required=False, allow_blank=True, default='')
