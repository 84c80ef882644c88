from django.test import TestCase

from parking.models import Slot
from parking.services import SlotStateMachine
from utils import events
from utils.exceptions import SlotNotAvailable, InvalidSlotTransition, InvalidSlotStatus, SlotNotFound
from tests.helpers import make_spot, make_slot


class SlotStateMachineTest(TestCase):
    def setUp(self):
        self.slot = make_slot(make_spot())

    def test_reserve_empty_slot(self):
        before = self.slot.last_updated
        slot, emitted = SlotStateMachine.reserve(self.slot.pk)

        self.assertEqual(slot.status, Slot.STATUS_RESERVED)
        self.assertGreaterEqual(slot.last_updated, before)
        self.assertEqual(len(emitted), 1)
        self.assertEqual(emitted[0].name, events.SLOT_UPDATED)
        self.assertEqual(emitted[0].payload['slotId'], self.slot.pk)
        self.assertEqual(emitted[0].payload['status'], 'reserved')

    def test_only_one_reserve_wins(self):
        SlotStateMachine.reserve(self.slot.pk)

        with self.assertRaises(SlotNotAvailable):
            SlotStateMachine.reserve(self.slot.pk)

        self.slot.refresh_from_db()
        self.assertEqual(self.slot.status, Slot.STATUS_RESERVED)

    def test_stale_instance_cannot_overwrite(self):
        stale = Slot.objects.get(pk=self.slot.pk)
        Slot.objects.filter(pk=self.slot.pk).update(status=Slot.STATUS_OCCUPIED)

        self.assertEqual(stale.status, Slot.STATUS_EMPTY)
        with self.assertRaises(SlotNotAvailable):
            SlotStateMachine.reserve(stale.pk)

    def test_full_cycle(self):
        SlotStateMachine.reserve(self.slot.pk)
        slot, _ = SlotStateMachine.occupy(self.slot.pk)
        self.assertEqual(slot.status, Slot.STATUS_OCCUPIED)

        slot, emitted = SlotStateMachine.release(self.slot.pk)
        self.assertEqual(slot.status, Slot.STATUS_EMPTY)
        self.assertEqual(len(emitted), 1)

    def test_occupy_requires_reservation(self):
        with self.assertRaises(InvalidSlotTransition):
            SlotStateMachine.occupy(self.slot.pk)

    def test_releasing_empty_slot_is_noop(self):
        slot, emitted = SlotStateMachine.release(self.slot.pk)
        self.assertEqual(slot.status, Slot.STATUS_EMPTY)
        self.assertEqual(emitted, [])

    def test_release_hold_leaves_occupied_slot(self):
        SlotStateMachine.reserve(self.slot.pk)
        SlotStateMachine.occupy(self.slot.pk)

        slot, emitted = SlotStateMachine.release_hold(self.slot.pk)

        self.assertEqual(slot.status, Slot.STATUS_OCCUPIED)
        self.assertEqual(emitted, [])

    def test_force(self):
        slot, emitted = SlotStateMachine.force(self.slot.pk, Slot.STATUS_OCCUPIED)
        self.assertEqual(slot.status, Slot.STATUS_OCCUPIED)
        self.assertEqual(emitted[0].payload['status'], 'occupied')

        with self.assertRaises(InvalidSlotStatus):
            SlotStateMachine.force(self.slot.pk, 'broken')
        with self.assertRaises(SlotNotFound):
            SlotStateMachine.force(999999, Slot.STATUS_EMPTY)
