# ==================== PANIC/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from utils import events
from utils.permissions import IsAdmin
from .models import PanicAlert
from .serializers import PanicAlertSerializer, PanicAlertCreateSerializer, PanicResolveSerializer
from .services import PanicService


class PanicAlertViewSet(viewsets.GenericViewSet):
    queryset = PanicAlert.objects.select_related('user', 'reservation', 'parking_spot')
    serializer_class = PanicAlertSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):
        if self.action in ('active', 'resolve'):
            return [IsAdmin()]
        return super().get_permissions()

    def create(self, request):
        """Raise a panic alert for one of your reservations

        Body: { "reservation_id": 1, "issue_type": "exit_blocked", "message": "..." }
        """
        serializer = PanicAlertCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        alert, alert_events = PanicService.raise_alert(
            request.user,
            data['reservation_id'],
            data['issue_type'],
            data['message'],
            data.get('latitude'),
            data.get('longitude'),
        )
        events.broadcast(alert_events)
        return Response({
            'success': True,
            'message': 'Panic alert sent. Help is on the way.',
            'data': PanicAlertSerializer(alert).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def active(self, request):
        """Open alerts, newest first"""
        alerts = self.get_queryset().filter(status=PanicAlert.STATUS_ACTIVE)
        serializer = self.get_serializer(alerts, many=True)
        return Response({
            'success': True,
            'count': len(serializer.data),
            'data': serializer.data,
        })

    @action(detail=True, methods=['patch'])
    def resolve(self, request, pk=None):
        serializer = PanicResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        alert, alert_events = PanicService.resolve(pk, request.user, serializer.validated_data['admin_notes'])
        events.broadcast(alert_events)
        return Response({
            'success': True,
            'message': 'Panic alert resolved',
            'data': PanicAlertSerializer(alert).data,
        })
