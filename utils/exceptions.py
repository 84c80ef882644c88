# ==================== UTILS/EXCEPTIONS.PY ====================
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

from . import events

logger = logging.getLogger(__name__)


# ---- Not found ----

class UserNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'User not found.'
    default_code = 'user_not_found'


class SlotNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Slot not found.'
    default_code = 'slot_not_found'


class ReservationNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Reservation not found.'
    default_code = 'reservation_not_found'


class SubscriptionNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Subscription not found.'
    default_code = 'subscription_not_found'


class PanicAlertNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Panic alert not found.'
    default_code = 'panic_alert_not_found'


# ---- Invalid input ----

class InvalidAmount(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Amount must be a positive number.'
    default_code = 'invalid_amount'


class InvalidPointsAmount(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Points must be a positive multiple of 10.'
    default_code = 'invalid_points_amount'


class InvalidDuration(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Minimum duration is 30 minutes.'
    default_code = 'invalid_duration'


class InvalidSlotStatus(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid status. Must be: empty, occupied, or reserved.'
    default_code = 'invalid_slot_status'


# ---- State conflicts ----

class SlotNotAvailable(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Slot is not available.'
    default_code = 'slot_not_available'


class InvalidSlotTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Slot cannot move to the requested status.'
    default_code = 'invalid_slot_transition'


class AlreadyCheckedIn(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Already checked in.'
    default_code = 'already_checked_in'


class AlreadyCheckedOut(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Already checked out.'
    default_code = 'already_checked_out'


class NoEntryRecord(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'No entry record found.'
    default_code = 'no_entry_record'


class InvalidStateForCancellation(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Only pending or active reservations can be cancelled.'
    default_code = 'invalid_state_for_cancellation'


class InvalidReservationState(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Reservation is not valid for this operation.'
    default_code = 'invalid_reservation_state'


class ReservationExpired(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Reservation hold has expired.'
    default_code = 'reservation_expired'


class ResourceInUse(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Reservations still reference this record, so it cannot be deleted.'
    default_code = 'resource_in_use'


class SubscriptionAlreadyActive(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You already have an active subscription.'
    default_code = 'subscription_already_active'


class SubscriptionInactive(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Subscription is no longer active.'
    default_code = 'subscription_inactive'


class PanicAlreadyActive(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'An active panic alert already exists for this reservation.'
    default_code = 'panic_already_active'


class PanicAlreadyResolved(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Panic alert already resolved.'
    default_code = 'panic_already_resolved'


# ---- Funds ----

class InsufficientFunds(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Insufficient wallet balance. Please add money to your wallet.'
    default_code = 'insufficient_funds'


class InsufficientBalance(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Insufficient wallet balance.'
    default_code = 'insufficient_balance'


class InsufficientPoints(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Insufficient reward points.'
    default_code = 'insufficient_points'


class PaymentFailed(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Payment processing failed.'
    default_code = 'payment_failed'


# ---- Authorization / integrity ----

class NotAuthorized(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized to access this reservation.'
    default_code = 'not_authorized'


class QRUserMismatch(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'QR code does not match reservation user.'
    default_code = 'qr_user_mismatch'


class QRTampered(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid or tampered QR code.'
    default_code = 'qr_tampered'


# ---- Calculation ----

class PriceCalculationFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Price calculation failed.'
    default_code = 'price_calculation_failed'


def parksmart_exception_handler(exc, context):
    """Render API errors as {"error": {"code": ..., "message": ...}}.

    Validation errors keep DRF's field map under "fields". Anything DRF
    does not handle is logged and left to Django (500 without internals).
    """
    # State changes committed before the failure still go out
    events.broadcast(getattr(exc, 'events', ()))

    response = exception_handler(exc, context)
    if response is None:
        logger.error(f"Unhandled error in {context.get('view').__class__.__name__}: {exc!r}", exc_info=True)
        return None

    if isinstance(exc, APIException):
        codes = exc.get_codes()
        if isinstance(codes, (dict, list)):
            response.data = {
                'error': {
                    'code': 'invalid_input',
                    'message': 'Invalid input.',
                    'fields': response.data,
                }
            }
        else:
            response.data = {
                'error': {
                    'code': codes,
                    'message': str(exc.detail),
                }
            }
    return response
