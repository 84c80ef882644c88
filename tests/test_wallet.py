import threading
from decimal import Decimal

from django.db import connection
from django.test import TestCase, TransactionTestCase

from payments.models import Transaction
from payments.services import WalletService
from utils.exceptions import (
    InsufficientBalance, InsufficientPoints, InvalidPointsAmount, InvalidAmount, UserNotFound
)
from tests.helpers import make_user


class WalletLedgerTest(TestCase):
    def setUp(self):
        self.user = make_user(balance='0.00')

    def test_credit_writes_entry_with_running_balance(self):
        result = WalletService.credit(self.user.pk, Decimal('120.50'), 'wallet_topup')

        self.assertEqual(result.user.wallet_balance, Decimal('120.50'))
        self.assertEqual(result.transaction.transaction_type, 'credit')
        self.assertEqual(result.transaction.balance_after, Decimal('120.50'))

    def test_debit_never_goes_negative(self):
        WalletService.credit(self.user.pk, Decimal('30'), 'wallet_topup')

        with self.assertRaises(InsufficientBalance):
            WalletService.debit(self.user.pk, Decimal('30.01'), 'payment')

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal('30.00'))
        self.assertEqual(Transaction.objects.filter(user=self.user).count(), 1)

    def test_debit_to_exactly_zero(self):
        WalletService.credit(self.user.pk, Decimal('30'), 'wallet_topup')
        result = WalletService.debit(self.user.pk, Decimal('30'), 'payment')
        self.assertEqual(result.user.wallet_balance, Decimal('0.00'))

    def test_replaying_ledger_reproduces_balance(self):
        operations = [
            ('credit', '100.00'), ('debit', '45.50'), ('debit', '80.00'),
            ('credit', '12.25'), ('debit', '66.75'), ('debit', '0.01'),
        ]
        for direction, amount in operations:
            try:
                getattr(WalletService, direction)(self.user.pk, Decimal(amount), 'payment')
            except InsufficientBalance:
                pass

        self.user.refresh_from_db()
        entries = Transaction.objects.filter(user=self.user).order_by('created_at', 'id')

        running = Decimal('0')
        for entry in entries:
            running += entry.signed_amount
            self.assertEqual(entry.balance_after, running)

        credits = sum(e.amount for e in entries if e.transaction_type == 'credit')
        debits = sum(e.amount for e in entries if e.transaction_type == 'debit')
        self.assertEqual(credits - debits, self.user.wallet_balance)
        # 80.00 was rejected: 100 - 45.50 = 54.50 < 80
        self.assertEqual(self.user.wallet_balance, Decimal('0.00'))

    def test_reference_is_recorded(self):
        result = WalletService.credit(
            self.user.pk, Decimal('5'), 'refund', {'ref_model': 'reservation', 'ref_id': 42}
        )
        self.assertEqual(result.transaction.ref_model, 'reservation')
        self.assertEqual(result.transaction.ref_id, 42)

    def test_negative_amount_rejected(self):
        with self.assertRaises(InvalidAmount):
            WalletService.credit(self.user.pk, Decimal('-1'), 'wallet_topup')

    def test_zero_debit_is_recorded(self):
        result = WalletService.debit(self.user.pk, Decimal('0'), 'payment')

        self.assertEqual(result.transaction.amount, Decimal('0.00'))
        self.assertEqual(result.transaction.balance_after, Decimal('0.00'))
        with self.assertRaises(InvalidAmount):
            WalletService.debit(self.user.pk, Decimal('-0.01'), 'payment')

    def test_unknown_user(self):
        with self.assertRaises(UserNotFound):
            WalletService.credit(999999, Decimal('1'), 'wallet_topup')
        with self.assertRaises(UserNotFound):
            WalletService.get_info(999999)

    def test_entries_are_immutable(self):
        entry = WalletService.credit(self.user.pk, Decimal('10'), 'wallet_topup').transaction
        entry.amount = Decimal('1000')

        with self.assertRaises(ValueError):
            entry.save()
        with self.assertRaises(ValueError):
            entry.delete()


class RewardPointsTest(TestCase):
    def setUp(self):
        self.user = make_user(points=25)

    def test_add_reward_points_writes_no_entry(self):
        user = WalletService.add_reward_points(self.user.pk, 5)
        self.assertEqual(user.reward_points, 30)
        self.assertFalse(Transaction.objects.exists())

    def test_converting_non_multiple_of_ten_fails(self):
        with self.assertRaises(InvalidPointsAmount):
            WalletService.convert_points(self.user.pk, 15)

        self.user.refresh_from_db()
        self.assertEqual(self.user.reward_points, 25)
        self.assertEqual(self.user.wallet_balance, Decimal('0.00'))

    def test_converting_ten_points_credits_one_unit(self):
        result = WalletService.convert_points(self.user.pk, 10)

        self.assertEqual(result.user.reward_points, 15)
        self.assertEqual(result.user.wallet_balance, Decimal('1.00'))
        self.assertEqual(result.transaction.category, 'points_conversion')
        self.assertEqual(result.transaction.amount, Decimal('1.00'))
        self.assertEqual(Transaction.objects.count(), 1)

    def test_converting_more_than_held_fails(self):
        with self.assertRaises(InsufficientPoints):
            WalletService.convert_points(self.user.pk, 30)

    def test_zero_and_negative_points_rejected(self):
        for points in (0, -10):
            with self.assertRaises(InvalidPointsAmount):
                WalletService.convert_points(self.user.pk, points)

    def test_info_reports_points_value(self):
        info = WalletService.get_info(self.user.pk)
        self.assertEqual(info['rewardPoints'], 25)
        self.assertEqual(info['pointsValue'], Decimal('2.50'))
        self.assertEqual(info['walletBalance'], Decimal('0.00'))


class ConcurrentDebitTest(TransactionTestCase):
    """Debits for one user run one after another, never interleaved"""

    def setUp(self):
        self.user = make_user(balance='100.00')

    def debit_in_thread(self, barrier, outcomes):
        try:
            barrier.wait()
            WalletService.debit(self.user.pk, Decimal('70.00'), 'payment')
            outcomes.append('debited')
        except InsufficientBalance:
            outcomes.append('rejected')
        finally:
            connection.close()

    def test_parallel_debits_cannot_overdraw(self):
        barrier = threading.Barrier(2)
        outcomes = []
        workers = [
            threading.Thread(target=self.debit_in_thread, args=(barrier, outcomes))
            for _ in range(2)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        self.assertEqual(sorted(outcomes), ['debited', 'rejected'])

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal('30.00'))

        entries = list(Transaction.objects.filter(user=self.user))
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].balance_after, Decimal('30.00'))
        replayed = Decimal('100.00') + sum(entry.signed_amount for entry in entries)
        self.assertEqual(replayed, self.user.wallet_balance)
