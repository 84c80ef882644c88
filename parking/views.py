# ============================= PARKING VIEWS =============================
from rest_framework import viewsets, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend

from utils import events
from utils.distance_calculator import DistanceCalculator
from utils.exceptions import ResourceInUse
from utils.permissions import IsAdminOrOwner, IsAdminOrOwnerOrReadOnly
from .filters import ParkingSpotFilter, SlotFilter
from .models import ParkingSpot, Slot
from .serializers import ParkingSpotSerializer, SlotSerializer, SlotStatusSerializer
from .services import SlotStateMachine


class ParkingSpotViewSet(viewsets.ModelViewSet):
    """Parking spot listing, creation, and management"""

    queryset = ParkingSpot.objects.all()
    serializer_class = ParkingSpotSerializer
    permission_classes = [IsAdminOrOwnerOrReadOnly]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_class = ParkingSpotFilter
    search_fields = ['spot_number', 'name', 'address']
    ordering_fields = ['created_at', 'price_per_hour', 'spot_number']
    ordering = ['-created_at']

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ResourceInUse('Spot has reservations on record. Set is_available to false instead.')

    @action(detail=False, methods=['get'], permission_classes=[permissions.AllowAny])
    def nearby(self, request):
        """Search parking spots near a location
        Query params: lat, lng, radius (in km)

        Example: /api/v1/spots/nearby/?lat=28.6139&lng=77.2090&radius=5
        """
        try:
            latitude = float(request.query_params.get('lat'))
            longitude = float(request.query_params.get('lng'))
            radius = float(request.query_params.get('radius', 5))  # Default 5km
        except (TypeError, ValueError):
            return Response(
                {'error': {'code': 'invalid_input', 'message': 'Invalid latitude, longitude, or radius'}},
                status=status.HTTP_400_BAD_REQUEST
            )

        spots = DistanceCalculator.spots_within(
            ParkingSpot.objects.filter(is_available=True), latitude, longitude, radius
        )
        serializer = self.get_serializer(spots, many=True)
        return Response(serializer.data)


class SlotViewSet(viewsets.ModelViewSet):
    """Slots inside parking spots, plus administrative status overrides"""

    queryset = Slot.objects.select_related('parking_spot')
    serializer_class = SlotSerializer
    permission_classes = [IsAdminOrOwnerOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = SlotFilter
    ordering = ['slot_number']

    def perform_create(self, serializer):
        slot = serializer.save()
        events.broadcast([events.Event(events.SLOT_CREATED, {
            'slotId': slot.pk,
            'slotNumber': slot.slot_number,
            'parkingSpot': slot.parking_spot_id,
            'status': slot.status,
        })])

    def perform_destroy(self, instance):
        slot_id = instance.pk
        try:
            instance.delete()
        except ProtectedError:
            raise ResourceInUse('Slot has reservations on record and cannot be deleted.')
        events.broadcast([events.Event(events.SLOT_DELETED, {'slotId': slot_id})])

    @action(detail=True, methods=['put'], url_path='status', permission_classes=[IsAdminOrOwner])
    def update_status(self, request, pk=None):
        """Override slot status

        Body: { "status": "empty|occupied|reserved" }
        """
        serializer = SlotStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        slot = self.get_object()
        slot, emitted = SlotStateMachine.force(slot.pk, serializer.validated_data['status'])
        events.broadcast(emitted)
        return Response(SlotSerializer(slot).data)

    @action(detail=False, methods=['get'], url_path=r'parking/(?P<spot_id>\d+)',
            permission_classes=[permissions.AllowAny])
    def by_parking_spot(self, request, spot_id=None):
        """Get all slots of one parking spot"""
        slots = Slot.objects.filter(parking_spot_id=spot_id).order_by('floor', 'slot_number')
        serializer = self.get_serializer(slots, many=True)
        return Response(serializer.data)
