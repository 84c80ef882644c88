# ==================== RESERVATIONS/QR.PY ====================
"""Reservation QR tokens.

A token is the canonical JSON of the payload with a short keyed tag
attached under "tag". The tag only detects tampering; the payload is
readable by anyone holding the token. The frontend renders the token
string as the scannable image.
"""
import hashlib
import hmac
import json

from django.conf import settings
from django.utils import timezone

from utils.exceptions import QRTampered

TAG_FIELD = 'tag'


def _canonical(data):
    return json.dumps(data, sort_keys=True, separators=(',', ':'))


def _tag(payload):
    digest = hmac.new(
        settings.QR_SIGNING_KEY.encode(),
        _canonical(payload).encode(),
        hashlib.sha256,
    ).hexdigest()
    return digest[:settings.PARKSMART['QR_TAG_LENGTH']]


def encode(payload):
    if TAG_FIELD in payload:
        raise ValueError(f"'{TAG_FIELD}' is reserved in QR payloads")
    return _canonical({**payload, TAG_FIELD: _tag(payload)})


def decode(token):
    """Return the payload, or raise QRTampered if it was altered or is unreadable"""
    try:
        data = json.loads(token)
    except (TypeError, ValueError):
        raise QRTampered()

    if not isinstance(data, dict) or not isinstance(data.get(TAG_FIELD), str):
        raise QRTampered()

    tag = data.pop(TAG_FIELD)
    if not hmac.compare_digest(tag, _tag(data)):
        raise QRTampered()
    return data


def reservation_payload(reservation, issued_at=None):
    issued_at = issued_at or timezone.now()
    return {
        'reservationId': reservation.pk,
        'userId': reservation.user_id,
        'slotNumber': reservation.slot.slot_number,
        'timestamp': int(issued_at.timestamp() * 1000),
    }
