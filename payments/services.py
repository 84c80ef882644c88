# ==================== PAYMENTS/SERVICES.PY ====================
import razorpay
import logging
from collections import namedtuple
from decimal import Decimal
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from utils.exceptions import (
    UserNotFound, InvalidAmount, InsufficientBalance, InsufficientPoints,
    InvalidPointsAmount, PaymentFailed
)
from utils.money import to_decimal, quantize_money
from .models import Transaction, WalletTopUp

logger = logging.getLogger(__name__)

LedgerResult = namedtuple('LedgerResult', ['user', 'transaction'])


class WalletService:
    """Wallet balance, reward points and the ledger that records them.

    Every balance change locks the user row and writes exactly one
    Transaction inside the same database transaction.
    """

    @staticmethod
    def _locked_user(user_id):
        User = get_user_model()
        try:
            return User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise UserNotFound()

    @staticmethod
    def _clean_amount(amount):
        """Round to paise and reject negatives.

        Zero is accepted: a reservation priced at ₹0 (a 0x rule) still settles
        through the ledger and leaves a zero-amount entry. Endpoints that take
        money from the user directly (wallet/add, top-ups) require > 0 in their
        serializers.
        """
        amount = quantize_money(amount)
        if amount < 0:
            raise InvalidAmount()
        return amount

    @staticmethod
    def _record(user, transaction_type, amount, category, reference, description):
        reference = reference or {}
        return Transaction.objects.create(
            user=user,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
            ref_model=reference.get('ref_model', ''),
            ref_id=reference.get('ref_id'),
            balance_after=user.wallet_balance,
            description=description,
        )

    @staticmethod
    @transaction.atomic
    def debit(user_id, amount, category, reference=None, description=''):
        """Deduct from the wallet; never lets the balance go below zero"""
        amount = WalletService._clean_amount(amount)
        user = WalletService._locked_user(user_id)

        if user.wallet_balance < amount:
            logger.warning(f"Debit of ₹{amount} rejected for user {user_id}: balance ₹{user.wallet_balance}")
            raise InsufficientBalance()

        user.wallet_balance -= amount
        user.save(update_fields=['wallet_balance', 'updated_at'])

        entry = WalletService._record(
            user, 'debit', amount, category, reference, description or f"{category} payment"
        )
        logger.info(f"Debited ₹{amount} ({category}) from user {user_id}, balance ₹{user.wallet_balance}")
        return LedgerResult(user, entry)

    @staticmethod
    @transaction.atomic
    def credit(user_id, amount, category, reference=None, description=''):
        """Add to the wallet"""
        amount = WalletService._clean_amount(amount)
        user = WalletService._locked_user(user_id)

        user.wallet_balance += amount
        user.save(update_fields=['wallet_balance', 'updated_at'])

        entry = WalletService._record(
            user, 'credit', amount, category, reference, description or f"{category} credit"
        )
        logger.info(f"Credited ₹{amount} ({category}) to user {user_id}, balance ₹{user.wallet_balance}")
        return LedgerResult(user, entry)

    @staticmethod
    @transaction.atomic
    def add_reward_points(user_id, points, reference=None):
        if not isinstance(points, int) or points <= 0:
            raise InvalidPointsAmount('Reward points must be a positive whole number.')
        user = WalletService._locked_user(user_id)
        user.reward_points += points
        user.save(update_fields=['reward_points', 'updated_at'])
        logger.info(f"Awarded {points} points to user {user_id} for {reference or 'no reference'}")
        return user

    @staticmethod
    @transaction.atomic
    def convert_points(user_id, points):
        """Turn reward points into wallet balance at a fixed rate (10 points = ₹1)"""
        rate = settings.PARKSMART['POINTS_PER_CURRENCY_UNIT']
        if not isinstance(points, int) or points <= 0 or points % rate != 0:
            raise InvalidPointsAmount(f"Points must be a positive multiple of {rate}.")

        user = WalletService._locked_user(user_id)
        if user.reward_points < points:
            raise InsufficientPoints()

        amount = quantize_money(Decimal(points) / rate)
        user.reward_points -= points
        user.wallet_balance += amount
        user.save(update_fields=['reward_points', 'wallet_balance', 'updated_at'])

        entry = WalletService._record(
            user, 'credit', amount, 'points_conversion', None,
            f"Converted {points} points to ₹{amount}"
        )
        logger.info(f"User {user_id} converted {points} points to ₹{amount}")
        return LedgerResult(user, entry)

    @staticmethod
    def get_info(user_id):
        User = get_user_model()
        try:
            user = User.objects.only('wallet_balance', 'reward_points').get(pk=user_id)
        except User.DoesNotExist:
            raise UserNotFound()

        rate = settings.PARKSMART['POINTS_PER_CURRENCY_UNIT']
        return {
            'walletBalance': user.wallet_balance,
            'rewardPoints': user.reward_points,
            'pointsValue': quantize_money(Decimal(user.reward_points) / rate),
        }


class RazorpayService:
    """Razorpay payment gateway integration"""

    def __init__(self):
        self.client = razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    def create_order(self, topup, notes=None):
        """Create Razorpay order"""
        try:
            order_data = {
                'amount': int(to_decimal(topup.amount) * 100),  # Amount in paise
                'currency': 'INR',
                'receipt': f'topup_{topup.id}_{int(timezone.now().timestamp())}',
                'notes': notes or {
                    'topup_id': topup.id,
                    'user': topup.user.username,
                }
            }

            razorpay_order = self.client.order.create(data=order_data)
            logger.info(f"Razorpay order created: {razorpay_order['id']} for top-up {topup.id}")

            return razorpay_order

        except Exception as e:
            logger.error(f"Error creating Razorpay order: {str(e)}")
            raise PaymentFailed(f"Failed to create order: {str(e)}")

    def verify_payment(self, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        """Verify Razorpay payment signature"""
        try:
            self.client.utility.verify_payment_signature({
                'razorpay_order_id': razorpay_order_id,
                'razorpay_payment_id': razorpay_payment_id,
                'razorpay_signature': razorpay_signature
            })
            logger.info(f"Payment verified: {razorpay_payment_id}")
            return True

        except razorpay.errors.SignatureVerificationError:
            logger.error(f"Signature verification failed for payment: {razorpay_payment_id}")
            return False


class TopUpService:
    """Wallet top-ups through the payment gateway"""

    @staticmethod
    def initiate(user, amount):
        amount = quantize_money(amount)
        if amount <= 0:
            raise InvalidAmount()

        topup = WalletTopUp.objects.create(user=user, amount=amount)
        order = RazorpayService().create_order(topup)
        topup.razorpay_order_id = order['id']
        topup.save(update_fields=['razorpay_order_id', 'updated_at'])
        return topup

    @staticmethod
    def verify(user, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        """Credit the wallet once per verified order"""
        try:
            topup = WalletTopUp.objects.get(razorpay_order_id=razorpay_order_id, user=user)
        except WalletTopUp.DoesNotExist:
            raise PaymentFailed('Top-up order not found.')

        if not RazorpayService().verify_payment(razorpay_order_id, razorpay_payment_id, razorpay_signature):
            WalletTopUp.objects.filter(pk=topup.pk, status='initiated').update(
                status='failed', updated_at=timezone.now()
            )
            raise PaymentFailed('Payment verification failed.')

        with transaction.atomic():
            topup = WalletTopUp.objects.select_for_update().get(pk=topup.pk)
            if topup.status == 'completed':
                return topup
            if topup.status == 'failed':
                raise PaymentFailed('Top-up already marked as failed.')

            result = WalletService.credit(
                user.pk,
                topup.amount,
                'wallet_topup',
                {'ref_model': 'wallet_topup', 'ref_id': topup.pk},
                f"Added ₹{topup.amount} to wallet"
            )
            topup.status = 'completed'
            topup.razorpay_payment_id = razorpay_payment_id
            topup.transaction = result.transaction
            topup.save()
        return topup
