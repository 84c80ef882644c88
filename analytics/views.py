# ============================= ANALYTICS VIEWS =============================
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from django.utils.dateparse import parse_date, parse_datetime
from datetime import datetime, time

from utils import clock
from utils.permissions import IsAdmin
from .services import AnalyticsService


def _query_datetime(request, name, end_of_day=False):
    raw = request.query_params.get(name)
    if not raw:
        return None
    moment = parse_datetime(raw)
    if moment is None:
        day = parse_date(raw)
        if day is None:
            raise ValidationError({name: 'Use YYYY-MM-DD or an ISO datetime.'})
        moment = datetime.combine(day, time.max if end_of_day else time.min)
    return clock.to_parking_time(moment)


class AnalyticsViewSet(viewsets.ViewSet):
    """Admin dashboard statistics"""
    permission_classes = [IsAdmin]

    @action(detail=False, methods=['get'])
    def revenue(self, request):
        """Query params: startDate, endDate"""
        data = AnalyticsService.revenue(
            _query_datetime(request, 'startDate'),
            _query_datetime(request, 'endDate', end_of_day=True),
        )
        return Response({'success': True, 'data': data})

    @action(detail=False, methods=['get'])
    def bookings(self, request):
        return Response({'success': True, 'data': AnalyticsService.reservation_totals()})

    @action(detail=False, methods=['get'])
    def occupancy(self, request):
        return Response({'success': True, 'data': AnalyticsService.occupancy()})

    @action(detail=False, methods=['get'])
    def traffic(self, request):
        """Query param: date (YYYY-MM-DD, defaults to today)"""
        return Response({
            'success': True,
            'data': AnalyticsService.hourly_traffic(_query_datetime(request, 'date')),
        })

    @action(detail=False, methods=['get'])
    def users(self, request):
        """Query param: days (default 7)"""
        try:
            days = int(request.query_params.get('days', 7))
        except ValueError:
            raise ValidationError({'days': 'Must be a whole number.'})
        return Response({'success': True, 'data': AnalyticsService.user_stats(days)})

    @action(detail=False, methods=['get'])
    def activity(self, request):
        return Response({'success': True, 'data': AnalyticsService.recent_activity()})
