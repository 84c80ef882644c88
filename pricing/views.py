# ============================= PRICING VIEWS =============================
from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend

from utils.permissions import IsAdmin
from .models import PricingRule
from .serializers import PricingRuleSerializer, PriceCalculationSerializer, PeakHourQuerySerializer
from .services import PricingEngine


class PricingRuleViewSet(viewsets.ModelViewSet):
    """Admin management of dynamic pricing rules"""

    queryset = PricingRule.objects.select_related('parking_spot').order_by('-priority', '-created_at')
    serializer_class = PricingRuleSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['is_active', 'parking_spot']


class PricingViewSet(viewsets.ViewSet):
    """Public price quotes"""
    permission_classes = [permissions.AllowAny]

    @action(detail=False, methods=['post'])
    def calculate(self, request):
        """Calculate price for given parameters

        Body: {
            "parking_spot_id": 1,
            "start_time": "2025-10-27T18:00:00+05:30",
            "duration": 2,
            "base_price": 50
        }
        """
        serializer = PriceCalculationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        quote = PricingEngine.calculate_price(
            data['parking_spot_id'],
            data['start_time'],
            data['duration'],
            data['base_price'],
        )
        return Response({'success': True, 'data': quote.as_dict()})

    @action(detail=False, methods=['get'])
    def peak(self, request):
        """Whether a moment falls inside a surcharged peak window

        Query params: time (ISO 8601, defaults to now)
        """
        serializer = PeakHourQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        moment = serializer.validated_data.get('time') or timezone.now()
        return Response({
            'success': True,
            'data': {'time': moment, 'isPeakHour': PricingEngine.is_peak_hour(moment)},
        })
