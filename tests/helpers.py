from datetime import timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.contrib.auth import get_user_model
from django.utils import timezone

from parking.models import ParkingSpot, Slot
from reservations.models import Reservation

IST = ZoneInfo('Asia/Kolkata')


def make_user(username='driver', role='user', balance='0.00', points=0):
    return get_user_model().objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='pass12345',
        role=role,
        wallet_balance=Decimal(balance),
        reward_points=points,
    )


def make_spot(spot_number='A1', price='50.00', **kwargs):
    defaults = {
        'name': f'Lot {spot_number}',
        'address': 'MG Road, Bengaluru',
        'price_per_hour': Decimal(price),
    }
    defaults.update(kwargs)
    return ParkingSpot.objects.create(spot_number=spot_number, **defaults)


def make_slot(spot, slot_number='S1', status=Slot.STATUS_EMPTY):
    return Slot.objects.create(parking_spot=spot, slot_number=slot_number, status=status)


def make_reservation(user, slot, status=Reservation.STATUS_PENDING, price='100.00', **kwargs):
    """Stored row only; no wallet or slot side effects"""
    now = timezone.now()
    fields = {
        'start_time': now,
        'duration': Decimal('2'),
        'end_time': now + timedelta(hours=2),
        'expires_at': now + timedelta(minutes=15),
        'estimated_price': Decimal(price),
    }
    fields.update(kwargs)
    return Reservation.objects.create(
        user=user, slot=slot, parking_spot=slot.parking_spot, status=status, **fields
    )
