# ==================== UTILS/EVENTS.PY ====================
import logging
from dataclasses import dataclass, field

from django.core.serializers.json import DjangoJSONEncoder
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

SLOT_CREATED = 'slot:created'
SLOT_UPDATED = 'slot:updated'
SLOT_DELETED = 'slot:deleted'
RESERVATION_CREATED = 'reservation:created'
RESERVATION_CHECKED_IN = 'reservation:checked_in'
RESERVATION_COMPLETED = 'reservation:completed'
RESERVATION_CANCELLED = 'reservation:cancelled'
RESERVATION_EXPIRED = 'reservation:expired'
PANIC_RAISED = 'panic:new'
PANIC_RESOLVED = 'panic:resolved'

# Sent once per event with `event=Event(...)`
realtime_event = Signal()


@dataclass(frozen=True)
class Event:
    """A state change reported to realtime subscribers."""
    name: str
    payload: dict = field(default_factory=dict)

    def as_message(self):
        encoder = DjangoJSONEncoder()
        return {
            'event': self.name,
            'data': {key: _jsonable(encoder, value) for key, value in self.payload.items()},
        }


def _jsonable(encoder, value):
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return encoder.default(value)


def slot_updated(slot):
    return Event(SLOT_UPDATED, {
        'slotId': slot.pk,
        'status': slot.status,
        'lastUpdated': slot.last_updated,
    })


def broadcast(events):
    """Hand events to every subscriber without waiting on delivery.

    Receiver errors are logged and never reach the caller.
    """
    for event in events:
        for handler, result in realtime_event.send_robust(sender=Event, event=event):
            if isinstance(result, Exception):
                logger.error(f"Realtime handler {getattr(handler, '__name__', handler)} failed for {event.name}: {result}")


@receiver(realtime_event, dispatch_uid='push_to_socket_gateway')
def push_to_socket_gateway(sender, event, **kwargs):
    from django.conf import settings
    from .tasks import push_realtime_event

    if not settings.SOCKET_BROADCAST_URL:
        logger.debug(f"No socket gateway configured, dropping {event.name}")
        return
    push_realtime_event.delay(event.as_message())
