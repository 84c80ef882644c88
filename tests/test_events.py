from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

import requests
from django.test import SimpleTestCase, override_settings

from utils import events


class EventMessageTest(SimpleTestCase):
    def test_message_is_json_ready(self):
        event = events.Event(events.SLOT_UPDATED, {
            'slotId': 4,
            'status': 'reserved',
            'lastUpdated': datetime(2025, 1, 6, 4, 30, tzinfo=dt_timezone.utc),
            'price': Decimal('12.50'),
        })

        self.assertEqual(event.as_message(), {
            'event': 'slot:updated',
            'data': {
                'slotId': 4,
                'status': 'reserved',
                'lastUpdated': '2025-01-06T04:30:00Z',
                'price': '12.50',
            },
        })


@override_settings(SOCKET_BROADCAST_URL='http://sockets.local/emit', SOCKET_BROADCAST_TIMEOUT=1)
class BroadcastTest(SimpleTestCase):
    @patch('utils.tasks.requests.post')
    def test_events_are_pushed_to_gateway(self, mock_post):
        mock_post.return_value.status_code = 200

        events.broadcast([events.Event(events.RESERVATION_CANCELLED, {'reservationId': 9})])

        mock_post.assert_called_once_with(
            'http://sockets.local/emit',
            json={'event': 'reservation:cancelled', 'data': {'reservationId': 9}},
            timeout=1,
        )

    @patch('utils.tasks.requests.post', side_effect=requests.ConnectionError('down'))
    def test_gateway_outage_does_not_reach_caller(self, mock_post):
        events.broadcast([events.Event(events.SLOT_DELETED, {'slotId': 1})])
        mock_post.assert_called_once()

    @override_settings(SOCKET_BROADCAST_URL='')
    @patch('utils.tasks.requests.post')
    def test_nothing_sent_without_gateway(self, mock_post):
        events.broadcast([events.Event(events.SLOT_DELETED, {'slotId': 1})])
        mock_post.assert_not_called()

    @patch('utils.tasks.requests.post')
    def test_failing_subscriber_is_isolated(self, mock_post):
        mock_post.return_value.status_code = 200

        def broken(sender, event, **kwargs):
            raise RuntimeError('subscriber bug')

        events.realtime_event.connect(broken, dispatch_uid='broken-subscriber')
        try:
            events.broadcast([events.Event(events.SLOT_CREATED, {'slotId': 2})])
        finally:
            events.realtime_event.disconnect(dispatch_uid='broken-subscriber')

        mock_post.assert_called_once()
