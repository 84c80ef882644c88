# ==================== ANALYTICS/SERVICES.PY ====================
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Sum, Count, Q, DecimalField
from django.db.models.functions import Coalesce, ExtractHour, TruncDate

from parking.models import Slot
from reservations.models import Reservation
from utils import clock
from utils.money import quantize_money


class AnalyticsService:
    """Dashboard figures, aggregated from stored rows on every call"""

    @staticmethod
    def revenue(start=None, end=None):
        """Paid, non-cancelled reservations created in [start, end]; defaults to today"""
        day_start = clock.start_of_day()
        start = start or day_start
        end = end or (day_start + timedelta(days=1) - timedelta(microseconds=1))

        totals = Reservation.objects.filter(
            created_at__gte=start,
            created_at__lte=end,
            payment_status='paid',
        ).exclude(status=Reservation.STATUS_CANCELLED).aggregate(
            total=Coalesce(
                Sum(Coalesce('final_price', 'estimated_price')),
                Decimal('0'),
                output_field=DecimalField(max_digits=14, decimal_places=2)
            ),
            count=Count('id'),
        )
        return {
            'totalRevenue': quantize_money(totals['total']),
            'reservations': totals['count'],
            'period': {'start': start, 'end': end},
        }

    @staticmethod
    def reservation_totals():
        return Reservation.objects.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(status=Reservation.STATUS_ACTIVE)),
            completed=Count('id', filter=Q(status=Reservation.STATUS_COMPLETED)),
        )

    @staticmethod
    def occupancy():
        counts = Slot.objects.aggregate(
            total=Count('id'),
            empty=Count('id', filter=Q(status=Slot.STATUS_EMPTY)),
            occupied=Count('id', filter=Q(status=Slot.STATUS_OCCUPIED)),
            reserved=Count('id', filter=Q(status=Slot.STATUS_RESERVED)),
        )
        in_use = counts['occupied'] + counts['reserved']
        rate = (in_use / counts['total'] * 100) if counts['total'] else 0
        counts['occupancyRate'] = round(rate, 2)
        return counts

    @staticmethod
    def hourly_traffic(day=None):
        """Reservations created per hour (0-23) of a day in the parking time zone"""
        tz = clock.parking_timezone()
        day_start = clock.start_of_day() if day is None else clock.to_parking_time(day).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        rows = (
            Reservation.objects
            .filter(created_at__gte=day_start, created_at__lt=day_start + timedelta(days=1))
            .annotate(hour=ExtractHour('created_at', tzinfo=tz))
            .values('hour')
            .annotate(count=Count('id'))
        )
        by_hour = {row['hour']: row['count'] for row in rows}
        return [{'hour': hour, 'count': by_hour.get(hour, 0)} for hour in range(24)]

    @staticmethod
    def user_stats(days=7):
        User = get_user_model()
        since = clock.start_of_day() - timedelta(days=days)

        registrations = (
            User.objects
            .filter(created_at__gte=since)
            .annotate(day=TruncDate('created_at', tzinfo=clock.parking_timezone()))
            .values('day')
            .annotate(count=Count('id'))
            .order_by('day')
        )
        roles = User.objects.values('role').annotate(count=Count('id')).order_by('role')

        return {
            'total': User.objects.count(),
            'registrationsByDay': [
                {'date': row['day'], 'count': row['count']} for row in registrations
            ],
            'roleDistribution': [
                {'role': row['role'], 'count': row['count']} for row in roles
            ],
        }

    @staticmethod
    def recent_activity(limit=10):
        """Latest reservations and registrations merged, newest first"""
        User = get_user_model()
        reservations = Reservation.objects.select_related('user', 'parking_spot').order_by('-created_at')[:5]
        users = User.objects.order_by('-created_at')[:5]

        activities = [
            {
                'type': 'reservation',
                'id': reservation.pk,
                'title': 'New reservation created',
                'description': f"Spot {reservation.parking_spot.spot_number} reserved by {reservation.user.username}",
                'timestamp': reservation.created_at,
            }
            for reservation in reservations
        ] + [
            {
                'type': 'user',
                'id': user.pk,
                'title': 'New user registered',
                'description': f"{user.email or user.username} joined ParkSmart",
                'timestamp': user.created_at,
            }
            for user in users
        ]
        activities.sort(key=lambda item: item['timestamp'], reverse=True)
        return activities[:limit]
