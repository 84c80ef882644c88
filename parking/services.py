# ==================== PARKING/SERVICES.PY ====================
import logging
from django.utils import timezone

from utils import events
from utils.exceptions import SlotNotFound, SlotNotAvailable, InvalidSlotTransition, InvalidSlotStatus
from .models import Slot

logger = logging.getLogger(__name__)

EMPTY, RESERVED, OCCUPIED = Slot.STATUS_EMPTY, Slot.STATUS_RESERVED, Slot.STATUS_OCCUPIED


class SlotStateMachine:
    """Occupancy transitions for a single slot.

        empty -> reserved -> occupied -> empty
        reserved -> empty, occupied -> empty   (cancel / expiry / release)

    Every transition is a conditional UPDATE on the current status, so two
    writers racing on the same slot cannot both win. Each method returns
    ``(slot, events)``; ``events`` is empty when nothing changed.
    """

    @staticmethod
    def _compare_and_set(slot_id, sources, target):
        now = timezone.now()
        updated = Slot.objects.filter(pk=slot_id, status__in=sources).update(
            status=target, last_updated=now, updated_at=now
        )
        return updated == 1

    @staticmethod
    def _load(slot_id):
        try:
            return Slot.objects.get(pk=slot_id)
        except Slot.DoesNotExist:
            raise SlotNotFound()

    @classmethod
    def _move(cls, slot_id, sources, target):
        if cls._compare_and_set(slot_id, sources, target):
            slot = cls._load(slot_id)
            logger.info(f"Slot {slot.pk} -> {target}")
            return slot, [events.slot_updated(slot)]
        return cls._load(slot_id), None

    @classmethod
    def reserve(cls, slot_id):
        slot, emitted = cls._move(slot_id, [EMPTY], RESERVED)
        if emitted is None:
            logger.warning(f"Slot {slot_id} not available (status={slot.status})")
            raise SlotNotAvailable()
        return slot, emitted

    @classmethod
    def occupy(cls, slot_id):
        slot, emitted = cls._move(slot_id, [RESERVED], OCCUPIED)
        if emitted is None:
            raise InvalidSlotTransition(f"Slot {slot.slot_number} is {slot.status}, expected reserved.")
        return slot, emitted

    @classmethod
    def release(cls, slot_id):
        """Free a slot. Releasing an already empty slot is a no-op."""
        slot, emitted = cls._move(slot_id, [RESERVED, OCCUPIED], EMPTY)
        return slot, emitted or []

    @classmethod
    def release_hold(cls, slot_id):
        """Free a slot only while it is still held (reserved), e.g. on expiry."""
        slot, emitted = cls._move(slot_id, [RESERVED], EMPTY)
        return slot, emitted or []

    @classmethod
    def force(cls, slot_id, status):
        """Administrative override to any status."""
        if status not in dict(Slot.STATUS_CHOICES):
            raise InvalidSlotStatus()
        now = timezone.now()
        updated = Slot.objects.filter(pk=slot_id).update(status=status, last_updated=now, updated_at=now)
        if not updated:
            raise SlotNotFound()
        slot = cls._load(slot_id)
        logger.info(f"Slot {slot.pk} status overridden to {status}")
        return slot, [events.slot_updated(slot)]
