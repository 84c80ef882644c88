from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import razorpay
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from parking.models import Slot
from payments.models import Transaction, WalletTopUp
from pricing.models import PricingRule
from reservations.models import Reservation
from tests.helpers import make_user, make_spot, make_slot, make_reservation


class APITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user(balance='500.00', points=25)
        self.admin = make_user('admin', role='admin')
        self.owner = make_user('owner', role='owner')
        self.spot = make_spot(price='50.00', latitude=12.9716, longitude=77.5946)
        self.slot = make_slot(self.spot)

    def login(self, user):
        self.client.force_authenticate(user=user)

    def assertError(self, response, http_status, code):
        self.assertEqual(response.status_code, http_status, response.data)
        self.assertEqual(response.data['error']['code'], code)


class AuthAPITest(APITestCase):
    def test_register_and_login(self):
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'newbie',
            'email': 'newbie@example.com',
            'password': 'StrongPass123',
            'password_confirm': 'StrongPass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['role'], 'user')

        response = self.client.post('/api/v1/auth/login/', {
            'username': 'newbie', 'password': 'StrongPass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)

    def test_bad_login_uses_error_envelope(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'driver', 'password': 'wrong'
        }, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')

    def test_profile_cannot_edit_wallet(self):
        self.login(self.user)
        response = self.client.put('/api/v1/auth/profile/', {
            'first_name': 'Asha', 'wallet_balance': '99999.00', 'role': 'admin'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, 'Asha')
        self.assertEqual(self.user.wallet_balance, Decimal('500.00'))
        self.assertEqual(self.user.role, 'user')


class WalletAPITest(APITestCase):
    def setUp(self):
        super().setUp()
        self.login(self.user)

    def test_info(self):
        response = self.client.get('/api/v1/wallet/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['walletBalance'], Decimal('500.00'))
        self.assertEqual(response.data['data']['pointsValue'], Decimal('2.50'))

    def test_requires_login(self):
        self.client.force_authenticate(user=None)
        response = self.client.get('/api/v1/wallet/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_add_and_list_transactions(self):
        response = self.client.post('/api/v1/wallet/add/', {'amount': '150.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['walletBalance'], Decimal('650.00'))

        self.client.post('/api/v1/wallet/convert-points/', {'points': 20}, format='json')

        response = self.client.get('/api/v1/wallet/transactions/')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['results'][0]['category'], 'points_conversion')

        response = self.client.get('/api/v1/wallet/transactions/', {'category': 'wallet_topup'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['balance_after'], '650.00')

    def test_add_rejects_non_positive_amount(self):
        response = self.client.post('/api/v1/wallet/add/', {'amount': '0'}, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')
        self.assertIn('amount', response.data['error']['fields'])

    def test_convert_points_boundary(self):
        response = self.client.post('/api/v1/wallet/convert-points/', {'points': 15}, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_points_amount')

        response = self.client.post('/api/v1/wallet/convert-points/', {'points': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['walletBalance'], Decimal('501.00'))
        self.assertEqual(response.data['data']['rewardPoints'], 15)

    @patch('payments.services.razorpay.Client')
    def test_gateway_topup_credits_once(self, mock_client):
        mock_client.return_value.order.create.return_value = {'id': 'order_abc'}

        response = self.client.post('/api/v1/wallet/topup/initiate/', {'amount': '200'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['razorpay_order_id'], 'order_abc')
        order_data = mock_client.return_value.order.create.call_args.kwargs['data']
        self.assertEqual(order_data['amount'], 20000)

        body = {
            'razorpay_order_id': 'order_abc',
            'razorpay_payment_id': 'pay_xyz',
            'razorpay_signature': 'sig',
        }
        first = self.client.post('/api/v1/wallet/topup/verify/', body, format='json')
        second = self.client.post('/api/v1/wallet/topup/verify/', body, format='json')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['data']['walletBalance'], Decimal('700.00'))
        self.assertEqual(second.data['data']['walletBalance'], Decimal('700.00'))
        self.assertEqual(Transaction.objects.filter(category='wallet_topup').count(), 1)

    @patch('payments.services.razorpay.Client')
    def test_bad_signature_fails_topup(self, mock_client):
        mock_client.return_value.order.create.return_value = {'id': 'order_bad'}
        mock_client.return_value.utility.verify_payment_signature.side_effect = (
            razorpay.errors.SignatureVerificationError('mismatch')
        )
        self.client.post('/api/v1/wallet/topup/initiate/', {'amount': '200'}, format='json')

        response = self.client.post('/api/v1/wallet/topup/verify/', {
            'razorpay_order_id': 'order_bad',
            'razorpay_payment_id': 'pay_bad',
            'razorpay_signature': 'forged',
        }, format='json')

        self.assertError(response, status.HTTP_402_PAYMENT_REQUIRED, 'payment_failed')
        self.assertEqual(WalletTopUp.objects.get().status, 'failed')
        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal('500.00'))


class ReservationAPITest(APITestCase):
    def create_reservation(self, hours=2):
        return self.client.post('/api/v1/reservations/', {
            'slot_id': self.slot.pk,
            'start_time': timezone.now().isoformat(),
            'duration': hours,
        }, format='json')

    def test_create_returns_price_info(self):
        self.login(self.user)
        response = self.create_reservation()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['priceInfo']['finalPrice'], Decimal('100.00'))
        self.assertEqual(response.data['data']['status'], 'pending')
        self.assertEqual(response.data['data']['slot_status'], 'reserved')
        self.assertTrue(response.data['data']['qr_code'])

    def test_create_on_taken_slot(self):
        self.login(self.user)
        self.create_reservation()
        response = self.create_reservation()
        self.assertError(response, status.HTTP_409_CONFLICT, 'slot_not_available')

    def test_create_with_short_duration(self):
        self.login(self.user)
        response = self.create_reservation(hours='0.4')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_duration')

    def test_create_without_funds(self):
        self.login(make_user('broke'))
        response = self.create_reservation()
        self.assertError(response, status.HTTP_402_PAYMENT_REQUIRED, 'insufficient_funds')

    def test_my_reservations_filter(self):
        make_reservation(self.user, self.slot, status=Reservation.STATUS_COMPLETED)
        make_reservation(self.user, make_slot(self.spot, 'S2'))
        make_reservation(self.admin, make_slot(self.spot, 'S3'))
        self.login(self.user)

        response = self.client.get('/api/v1/reservations/my/')
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/v1/reservations/my/', {'status': 'completed'})
        self.assertEqual(response.data['count'], 1)

    def test_retrieve_permissions(self):
        reservation = make_reservation(self.user, self.slot)

        self.login(self.owner)
        response = self.client.get(f'/api/v1/reservations/{reservation.pk}/')
        self.assertError(response, status.HTTP_403_FORBIDDEN, 'not_authorized')

        self.login(self.admin)
        response = self.client.get(f'/api/v1/reservations/{reservation.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get('/api/v1/reservations/999999/')
        self.assertError(response, status.HTTP_404_NOT_FOUND, 'reservation_not_found')

    def test_checkin_then_cancel(self):
        self.login(self.user)
        reservation_id = self.create_reservation().data['data']['id']

        response = self.client.put(f'/api/v1/reservations/{reservation_id}/checkin/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['payment_status'], 'paid')

        response = self.client.delete(f'/api/v1/reservations/{reservation_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'cancelled')
        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal('500.00'))

    def test_cancel_someone_elses_reservation(self):
        self.login(self.user)
        reservation_id = self.create_reservation().data['data']['id']

        self.login(self.admin)
        response = self.client.delete(f'/api/v1/reservations/{reservation_id}/')
        self.assertError(response, status.HTTP_403_FORBIDDEN, 'not_authorized')

    def test_qr_scanning(self):
        self.login(self.user)
        qr_data = self.create_reservation().data['data']['qr_code']

        response = self.client.post('/api/v1/qr/entry/', {'qr_data': qr_data}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.login(self.owner)
        response = self.client.post('/api/v1/qr/entry/', {'qr_data': qr_data}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['reservation']['slot_status'], 'occupied')

        response = self.client.post('/api/v1/qr/entry/', {'qr_data': qr_data}, format='json')
        self.assertError(response, status.HTTP_409_CONFLICT, 'already_checked_in')

        response = self.client.post('/api/v1/qr/exit/', {'qr_data': qr_data}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['finalPrice'], Decimal('100.00'))

    def test_tampered_qr(self):
        self.login(self.owner)
        response = self.client.post('/api/v1/qr/entry/', {'qr_data': '{"reservationId":1}'}, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'qr_tampered')

    def test_expired_hold_check_in(self):
        self.login(self.user)
        reservation_id = self.create_reservation().data['data']['id']
        Reservation.objects.filter(pk=reservation_id).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )

        response = self.client.put(f'/api/v1/reservations/{reservation_id}/checkin/')

        self.assertError(response, status.HTTP_409_CONFLICT, 'reservation_expired')
        self.slot.refresh_from_db()
        self.assertEqual(self.slot.status, Slot.STATUS_EMPTY)


class ParkingAPITest(APITestCase):
    def test_slot_status_override(self):
        self.login(self.user)
        response = self.client.put(f'/api/v1/slots/{self.slot.pk}/status/', {'status': 'occupied'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.login(self.admin)
        response = self.client.put(f'/api/v1/slots/{self.slot.pk}/status/', {'status': 'occupied'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'occupied')

        response = self.client.put(f'/api/v1/slots/{self.slot.pk}/status/', {'status': 'gone'}, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')

    def test_slot_create_starts_empty(self):
        self.login(self.owner)
        response = self.client.post('/api/v1/slots/', {
            'slot_number': 'S9', 'parking_spot': self.spot.pk, 'status': 'occupied'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'empty')

    def test_slots_by_spot_and_filters(self):
        make_slot(self.spot, 'S2', status=Slot.STATUS_OCCUPIED)

        response = self.client.get(f'/api/v1/slots/parking/{self.spot.pk}/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/slots/', {'status': 'occupied'})
        self.assertEqual(response.data['count'], 1)

    def test_slot_and_spot_with_paid_reservation_are_kept(self):
        self.login(self.user)
        reservation_id = self.client.post('/api/v1/reservations/', {
            'slot_id': self.slot.pk,
            'start_time': timezone.now().isoformat(),
            'duration': 2,
        }, format='json').data['data']['id']
        self.client.put(f'/api/v1/reservations/{reservation_id}/checkin/')

        self.login(self.owner)
        response = self.client.delete(f'/api/v1/slots/{self.slot.pk}/')
        self.assertError(response, status.HTTP_409_CONFLICT, 'resource_in_use')

        response = self.client.delete(f'/api/v1/spots/{self.spot.pk}/')
        self.assertError(response, status.HTTP_409_CONFLICT, 'resource_in_use')

        reservation = Reservation.objects.get(pk=reservation_id)
        self.assertEqual(reservation.payment_status, 'paid')
        self.assertTrue(Slot.objects.filter(pk=self.slot.pk).exists())
        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal('400.00'))

    def test_unused_slot_can_be_deleted(self):
        slot = make_slot(self.spot, 'S2')
        self.login(self.owner)

        response = self.client.delete(f'/api/v1/slots/{slot.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Slot.objects.filter(pk=slot.pk).exists())

    def test_nearby(self):
        make_spot('FAR', latitude=28.6139, longitude=77.2090)

        response = self.client.get('/api/v1/spots/nearby/', {'lat': 12.97, 'lng': 77.59, 'radius': 5})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['spot_number'] for s in response.data], ['A1'])
        self.assertLess(response.data[0]['distance'], 1)

    def test_nearby_needs_coordinates(self):
        response = self.client.get('/api/v1/spots/nearby/', {'lat': 'north'})
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')


class PricingAPITest(APITestCase):
    def test_rules_are_admin_only(self):
        self.login(self.owner)
        response = self.client.get('/api/v1/pricing/rules/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_rule_and_quote(self):
        self.login(self.admin)
        response = self.client.post('/api/v1/pricing/rules/', {
            'name': 'Night owl',
            'peak_hours': [{'start': 22, 'end': 2}],
            'days_of_week': ['friday', 'saturday', 'friday'],
            'multiplier': '1.250',
            'priority': 3,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['days_of_week'], ['friday', 'saturday'])

        self.client.force_authenticate(user=None)
        # 2025-01-10 23:00 IST is a Friday night
        response = self.client.post('/api/v1/pricing/calculate/', {
            'parking_spot_id': self.spot.pk,
            'start_time': '2025-01-10T23:00:00+05:30',
            'duration': 2,
            'base_price': '40',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['finalPrice'], Decimal('100.00'))
        self.assertTrue(response.data['data']['isPeakHour'])

    def test_peak_hour_lookup(self):
        PricingRule.objects.create(
            name='Evening rush', peak_hours=[{'start': 17, 'end': 20}], multiplier=Decimal('1.5')
        )

        response = self.client.get('/api/v1/pricing/peak/', {'time': '2025-01-06T18:00:00+05:30'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['isPeakHour'])

        response = self.client.get('/api/v1/pricing/peak/', {'time': '2025-01-06T21:00:00+05:30'})
        self.assertFalse(response.data['data']['isPeakHour'])

        response = self.client.get('/api/v1/pricing/peak/', {'time': 'soon'})
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')

    def test_rejects_out_of_range_hours(self):
        self.login(self.admin)
        response = self.client.post('/api/v1/pricing/rules/', {
            'name': 'Bad', 'peak_hours': [{'start': 20, 'end': 24}], 'multiplier': '1.1'
        }, format='json')
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')
        self.assertFalse(PricingRule.objects.exists())


class AnalyticsAPITest(APITestCase):
    def test_admin_only(self):
        self.login(self.user)
        response = self.client.get('/api/v1/analytics/occupancy/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_endpoints_respond(self):
        self.login(self.admin)
        for name in ('revenue', 'bookings', 'occupancy', 'traffic', 'users', 'activity'):
            response = self.client.get(f'/api/v1/analytics/{name}/')
            self.assertEqual(response.status_code, status.HTTP_200_OK, name)
            self.assertTrue(response.data['success'])

    def test_bad_dates(self):
        self.login(self.admin)
        response = self.client.get('/api/v1/analytics/traffic/', {'date': 'yesterday'})
        self.assertError(response, status.HTTP_400_BAD_REQUEST, 'invalid_input')
