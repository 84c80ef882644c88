# ==================== RESERVATIONS/SERVICES.PY ====================
import math
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from parking.models import Slot
from parking.services import SlotStateMachine
from payments.services import WalletService
from pricing.services import PricingEngine
from utils import events
from utils.exceptions import (
    SlotNotFound, SlotNotAvailable, ReservationNotFound, InvalidDuration,
    InsufficientFunds, NotAuthorized, InvalidStateForCancellation,
    InvalidReservationState, AlreadyCheckedIn, AlreadyCheckedOut,
    NoEntryRecord, QRUserMismatch, ReservationExpired
)
from utils.money import to_decimal, quantize_money
from . import qr
from .models import Reservation

logger = logging.getLogger(__name__)

PENDING = Reservation.STATUS_PENDING
ACTIVE = Reservation.STATUS_ACTIVE


@dataclass
class ReservationOutcome:
    reservation: Reservation
    events: list = field(default_factory=list)
    price_quote: object = None


def _reference(reservation):
    return {'ref_model': 'reservation', 'ref_id': reservation.pk}


def _reservation_event(name, reservation, **extra):
    payload = {
        'reservationId': reservation.pk,
        'userId': reservation.user_id,
        'slotId': reservation.slot_id,
        'status': reservation.status,
    }
    payload.update(extra)
    return events.Event(name, payload)


def _is_admin(user):
    return getattr(user, 'role', None) == 'admin'


class ReservationService:
    """Reservation lifecycle: create, check in, exit, cancel, expire.

    Each operation runs in one database transaction so a failure at any
    step leaves wallet, slot and reservation untouched. Events are
    returned to the caller, never broadcast from here.
    """

    @staticmethod
    def _locked(reservation_id):
        try:
            return Reservation.objects.select_for_update().get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError):
            raise ReservationNotFound()

    @staticmethod
    def create(user, slot_id, start_time, duration_hours):
        duration = to_decimal(duration_hours)
        if duration < Decimal(settings.PARKSMART['MIN_DURATION_HOURS']):
            raise InvalidDuration()

        try:
            slot = Slot.objects.select_related('parking_spot').get(pk=slot_id)
        except Slot.DoesNotExist:
            raise SlotNotFound()

        if slot.status != Slot.STATUS_EMPTY:
            raise SlotNotAvailable()

        spot = slot.parking_spot
        quote = PricingEngine.calculate_price(spot.pk, start_time, duration, spot.price_per_hour)

        # Balance is only checked here; money moves at check-in or exit
        if WalletService.get_info(user.pk)['walletBalance'] < quote.final_price:
            raise InsufficientFunds()

        now = timezone.now()
        with transaction.atomic():
            reservation = Reservation.objects.create(
                user=user,
                slot=slot,
                parking_spot=spot,
                start_time=start_time,
                duration=duration,
                end_time=start_time + timedelta(hours=float(duration)),
                expires_at=now + timedelta(minutes=settings.PARKSMART['RESERVATION_HOLD_MINUTES']),
                estimated_price=quote.final_price,
            )
            slot, emitted = SlotStateMachine.reserve(slot.pk)
            reservation.slot = slot
            reservation.qr_code = qr.encode(qr.reservation_payload(reservation, issued_at=now))
            reservation.save(update_fields=['qr_code', 'updated_at'])

        logger.info(f"Reservation {reservation.id} created for user {user.pk} on slot {slot.pk}")
        emitted.append(_reservation_event(
            events.RESERVATION_CREATED, reservation, estimatedPrice=reservation.estimated_price
        ))
        return ReservationOutcome(reservation, emitted, quote)

    @staticmethod
    def get_for_user(reservation_id, user):
        try:
            reservation = Reservation.objects.select_related('slot', 'parking_spot').get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError):
            raise ReservationNotFound()
        if reservation.user_id != user.pk and not _is_admin(user):
            raise NotAuthorized()
        return reservation

    @staticmethod
    def _expire_locked(reservation):
        reservation.status = Reservation.STATUS_EXPIRED
        reservation.save(update_fields=['status', 'updated_at'])
        _, emitted = SlotStateMachine.release_hold(reservation.slot_id)
        logger.info(f"Reservation {reservation.id} expired, slot {reservation.slot_id} released")
        return [_reservation_event(events.RESERVATION_EXPIRED, reservation)] + emitted

    @staticmethod
    def _raise_expired(emitted):
        exc = ReservationExpired()
        exc.events = emitted
        raise exc

    @staticmethod
    def check_in(reservation_id, user):
        """Direct check-in: pay the estimate up front and occupy the slot"""
        expired = None
        with transaction.atomic():
            reservation = ReservationService._locked(reservation_id)
            if reservation.user_id != user.pk and not _is_admin(user):
                raise NotAuthorized()
            if reservation.status != PENDING:
                raise InvalidReservationState('Reservation is not in pending status.')

            if reservation.hold_expired():
                expired = ReservationService._expire_locked(reservation)
            else:
                WalletService.debit(
                    reservation.user_id,
                    reservation.estimated_price,
                    'payment',
                    _reference(reservation),
                    'Payment for parking reservation'
                )
                WalletService.add_reward_points(
                    reservation.user_id,
                    settings.PARKSMART['REWARD_POINTS_PER_PARKING'],
                    _reference(reservation)
                )
                reservation.status = ACTIVE
                reservation.entry_time = timezone.now()
                reservation.payment_status = 'paid'
                reservation.save(update_fields=['status', 'entry_time', 'payment_status', 'updated_at'])
                _, emitted = SlotStateMachine.occupy(reservation.slot_id)

        if expired is not None:
            ReservationService._raise_expired(expired)

        logger.info(f"Reservation {reservation.id} checked in by user {user.pk}")
        emitted.append(_reservation_event(events.RESERVATION_CHECKED_IN, reservation))
        return ReservationOutcome(reservation, emitted)

    @staticmethod
    def qr_entry(token):
        """Entry scan: payment is deferred to exit"""
        data = qr.decode(token)
        expired = None
        with transaction.atomic():
            reservation = ReservationService._locked(data.get('reservationId'))
            if str(reservation.user_id) != str(data.get('userId')):
                raise QRUserMismatch()
            if reservation.entry_time:
                raise AlreadyCheckedIn()
            if reservation.status not in (PENDING, ACTIVE):
                raise InvalidReservationState()

            if reservation.hold_expired():
                expired = ReservationService._expire_locked(reservation)
            else:
                reservation.entry_time = timezone.now()
                reservation.status = ACTIVE
                reservation.save(update_fields=['status', 'entry_time', 'updated_at'])
                _, emitted = SlotStateMachine.occupy(reservation.slot_id)

        if expired is not None:
            ReservationService._raise_expired(expired)

        logger.info(f"Entry validated for reservation {reservation.id}")
        emitted.append(_reservation_event(events.RESERVATION_CHECKED_IN, reservation))
        return ReservationOutcome(reservation, emitted)

    @staticmethod
    def qr_exit(token):
        """Exit scan: settle the final price (with overstay) and free the slot"""
        data = qr.decode(token)
        with transaction.atomic():
            reservation = ReservationService._locked(data.get('reservationId'))
            if str(reservation.user_id) != str(data.get('userId')):
                raise QRUserMismatch()
            if reservation.exit_time:
                raise AlreadyCheckedOut()
            if not reservation.entry_time:
                raise NoEntryRecord()
            if reservation.status != ACTIVE:
                raise InvalidReservationState()

            exit_time = timezone.now()
            hours_spent = math.ceil((exit_time - reservation.entry_time).total_seconds() / 3600)

            final_price = reservation.estimated_price
            if hours_spent > reservation.duration:
                extra_hours = Decimal(hours_spent) - reservation.duration
                final_price += extra_hours * reservation.parking_spot.price_per_hour
            final_price = quantize_money(final_price)

            if reservation.payment_status != 'paid':
                WalletService.debit(
                    reservation.user_id,
                    final_price,
                    'payment',
                    _reference(reservation),
                    f"Payment for parking ({hours_spent} hours)"
                )
                WalletService.add_reward_points(
                    reservation.user_id,
                    settings.PARKSMART['REWARD_POINTS_PER_PARKING'],
                    _reference(reservation)
                )

            reservation.exit_time = exit_time
            reservation.final_price = final_price
            reservation.status = Reservation.STATUS_COMPLETED
            reservation.payment_status = 'paid'
            reservation.save(update_fields=[
                'exit_time', 'final_price', 'status', 'payment_status', 'updated_at'
            ])
            _, emitted = SlotStateMachine.release(reservation.slot_id)

        logger.info(f"Exit validated for reservation {reservation.id}: {hours_spent}h, ₹{final_price}")
        emitted.append(_reservation_event(
            events.RESERVATION_COMPLETED, reservation, finalPrice=final_price, hoursSpent=hours_spent
        ))
        return ReservationOutcome(reservation, emitted)

    @staticmethod
    def cancel(reservation_id, user):
        """Owner cancellation; refunds a paid estimate and frees the slot"""
        with transaction.atomic():
            reservation = ReservationService._locked(reservation_id)
            if reservation.user_id != user.pk:
                raise NotAuthorized('Not authorized to cancel this reservation.')
            if reservation.status not in (PENDING, ACTIVE):
                raise InvalidStateForCancellation()

            update_fields = ['status', 'updated_at']
            if reservation.payment_status == 'paid':
                WalletService.credit(
                    reservation.user_id,
                    reservation.estimated_price,
                    'refund',
                    _reference(reservation),
                    'Refund for cancelled reservation'
                )
                reservation.payment_status = 'refunded'
                update_fields.append('payment_status')

            reservation.status = Reservation.STATUS_CANCELLED
            reservation.save(update_fields=update_fields)
            _, emitted = SlotStateMachine.release(reservation.slot_id)

        logger.info(f"Reservation {reservation.id} cancelled by user {user.pk}")
        emitted.insert(0, _reservation_event(events.RESERVATION_CANCELLED, reservation))
        return ReservationOutcome(reservation, emitted)

    @staticmethod
    def expire(reservation_id):
        """Expire a pending reservation past its hold. Safe to call repeatedly."""
        with transaction.atomic():
            reservation = ReservationService._locked(reservation_id)
            if not reservation.hold_expired():
                return ReservationOutcome(reservation)
            emitted = ReservationService._expire_locked(reservation)
        return ReservationOutcome(reservation, emitted)

    @staticmethod
    def expired_ids(now=None):
        return list(
            Reservation.objects.filter(
                status=PENDING, expires_at__lte=now or timezone.now()
            ).values_list('pk', flat=True)
        )
