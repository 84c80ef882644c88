# ============================= RESERVATIONS VIEWS =============================
from rest_framework import viewsets, mixins, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from utils import events
from utils.exceptions import ReservationNotFound
from utils.permissions import IsAdminOrOwner, IsReservationOwnerOrAdmin
from .models import Reservation
from .serializers import ReservationSerializer, ReservationCreateSerializer, QRScanSerializer
from .services import ReservationService


class ReservationViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Reservation creation, check-in and cancellation"""

    queryset = Reservation.objects.select_related('slot', 'parking_spot')
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAuthenticated, IsReservationOwnerOrAdmin]

    def get_object(self):
        try:
            reservation = self.get_queryset().get(pk=self.kwargs['pk'])
        except (Reservation.DoesNotExist, ValueError):
            raise ReservationNotFound()
        self.check_object_permissions(self.request, reservation)
        return reservation

    def create(self, request):
        """Reserve a slot

        Body: { "slot_id": 1, "start_time": "2025-01-01T10:00:00+05:30", "duration": 2 }
        """
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = ReservationService.create(
            request.user,
            serializer.validated_data['slot_id'],
            serializer.validated_data['start_time'],
            serializer.validated_data['duration'],
        )
        events.broadcast(outcome.events)
        return Response({
            'success': True,
            'message': 'Reservation created successfully',
            'data': ReservationSerializer(outcome.reservation).data,
            'priceInfo': outcome.price_quote.as_dict(),
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def my(self, request):
        """Current user's reservations, newest first. Query param: status"""
        reservations = self.get_queryset().filter(user=request.user)
        status_filter = request.query_params.get('status')
        if status_filter:
            reservations = reservations.filter(status=status_filter)

        serializer = self.get_serializer(reservations, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data,
        })

    def destroy(self, request, pk=None):
        """Cancel a reservation"""
        outcome = ReservationService.cancel(pk, request.user)
        events.broadcast(outcome.events)
        return Response({
            'success': True,
            'message': 'Reservation cancelled successfully',
            'data': ReservationSerializer(outcome.reservation).data,
        })

    @action(detail=True, methods=['put'])
    def checkin(self, request, pk=None):
        """Check in without a QR scan; pays the estimated price from the wallet"""
        outcome = ReservationService.check_in(pk, request.user)
        events.broadcast(outcome.events)
        return Response({
            'success': True,
            'message': 'Checked in successfully',
            'data': ReservationSerializer(outcome.reservation).data,
        })


class QRViewSet(viewsets.ViewSet):
    """Entry and exit scanners at the gate"""
    permission_classes = [IsAdminOrOwner]

    @action(detail=False, methods=['post'])
    def entry(self, request):
        """Body: { "qr_data": "<scanned token>" }"""
        serializer = QRScanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = ReservationService.qr_entry(serializer.validated_data['qr_data'])
        events.broadcast(outcome.events)
        return Response({
            'success': True,
            'message': 'Entry validated successfully',
            'data': {
                'reservation': ReservationSerializer(outcome.reservation).data,
                'entryTime': outcome.reservation.entry_time,
            }
        })

    @action(detail=False, methods=['post'])
    def exit(self, request):
        """Body: { "qr_data": "<scanned token>" }"""
        serializer = QRScanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = ReservationService.qr_exit(serializer.validated_data['qr_data'])
        events.broadcast(outcome.events)
        reservation = outcome.reservation
        return Response({
            'success': True,
            'message': 'Exit validated and payment processed',
            'data': {
                'reservation': ReservationSerializer(reservation).data,
                'exitTime': reservation.exit_time,
                'finalPrice': reservation.final_price,
            }
        })
