# ==================== PANIC/SERVICES.PY ====================
import logging

from django.db import transaction
from django.utils import timezone

from reservations.models import Reservation
from utils import events
from utils.exceptions import (
    ReservationNotFound, NotAuthorized, InvalidReservationState,
    PanicAlertNotFound, PanicAlreadyActive, PanicAlreadyResolved
)
from .models import PanicAlert

logger = logging.getLogger(__name__)

OPEN_RESERVATION_STATES = (Reservation.STATUS_PENDING, Reservation.STATUS_ACTIVE)


def _panic_event(name, alert):
    return events.Event(name, {
        'alertId': alert.pk,
        'userId': alert.user_id,
        'reservationId': alert.reservation_id,
        'parkingSpotId': alert.parking_spot_id,
        'issueType': alert.issue_type,
        'status': alert.status,
    })


class PanicService:
    """Raise and resolve panic alerts. Events are returned, not broadcast."""

    @staticmethod
    @transaction.atomic
    def raise_alert(user, reservation_id, issue_type, message='', latitude=None, longitude=None):
        try:
            reservation = Reservation.objects.select_for_update().get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError):
            raise ReservationNotFound()

        if reservation.user_id != user.pk:
            raise NotAuthorized('Not authorized to raise an alert for this reservation.')
        if reservation.status not in OPEN_RESERVATION_STATES:
            raise InvalidReservationState(
                f"Alerts can only be raised for pending or active reservations (status: {reservation.status})."
            )
        if reservation.panic_alerts.filter(status=PanicAlert.STATUS_ACTIVE).exists():
            raise PanicAlreadyActive()

        alert = PanicAlert.objects.create(
            user=user,
            reservation=reservation,
            parking_spot_id=reservation.parking_spot_id,
            issue_type=issue_type,
            message=message,
            latitude=latitude,
            longitude=longitude,
        )
        logger.warning(f"Panic alert {alert.pk} ({issue_type}) raised on reservation {reservation.pk}")
        return alert, [_panic_event(events.PANIC_RAISED, alert)]

    @staticmethod
    @transaction.atomic
    def resolve(alert_id, admin, notes=''):
        try:
            alert = PanicAlert.objects.select_for_update().get(pk=alert_id)
        except (PanicAlert.DoesNotExist, ValueError, TypeError):
            raise PanicAlertNotFound()

        if alert.status == PanicAlert.STATUS_RESOLVED:
            raise PanicAlreadyResolved()

        alert.status = PanicAlert.STATUS_RESOLVED
        alert.admin_notes = notes
        alert.resolved_at = timezone.now()
        alert.resolved_by = admin
        alert.save(update_fields=['status', 'admin_notes', 'resolved_at', 'resolved_by', 'updated_at'])

        logger.info(f"Panic alert {alert.pk} resolved by {admin.pk}")
        return alert, [_panic_event(events.PANIC_RESOLVED, alert)]
