# ==================== PAYMENTS/MODELS.PY ====================
from django.db import models
from django.core.validators import MinValueValidator
import logging

logger = logging.getLogger(__name__)


class Transaction(models.Model):
    """Append-only wallet ledger entry.

    Written in the same database transaction as the balance change it
    records; `balance_after` is the wallet balance right after that change.
    """
    TYPE_CHOICES = (
        ('credit', 'Credit'),
        ('debit', 'Debit'),
    )
    CATEGORY_CHOICES = (
        ('payment', 'Payment'),
        ('reward', 'Reward'),
        ('refund', 'Refund'),
        ('wallet_topup', 'Wallet Top-up'),
        ('subscription', 'Subscription'),
        ('points_conversion', 'Points Conversion'),
    )
    REF_MODEL_CHOICES = (
        ('reservation', 'Reservation'),
        ('subscription', 'Subscription'),
        ('wallet_topup', 'Wallet Top-up'),
    )

    user = models.ForeignKey(
        'users.CustomUser',
        on_delete=models.PROTECT,
        related_name='transactions'
    )
    transaction_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    # Originating entity, if any
    ref_model = models.CharField(max_length=20, choices=REF_MODEL_CHOICES, blank=True)
    ref_id = models.PositiveBigIntegerField(null=True, blank=True)

    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='txn_user_created_idx'),
            models.Index(fields=['ref_model', 'ref_id'], name='txn_ref_idx'),
        ]

    def __str__(self):
        return f"{self.transaction_type} ₹{self.amount} ({self.category}) for {self.user_id}"

    @property
    def signed_amount(self):
        return self.amount if self.transaction_type == 'credit' else -self.amount

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Ledger entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Ledger entries cannot be deleted")


class WalletTopUp(models.Model):
    """Wallet top-up paid through Razorpay"""
    STATUS_CHOICES = (
        ('initiated', 'Initiated'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
    )

    user = models.ForeignKey('users.CustomUser', on_delete=models.CASCADE, related_name='wallet_topups')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='initiated', db_index=True)

    razorpay_order_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    razorpay_payment_id = models.CharField(max_length=100, null=True, blank=True)

    transaction = models.OneToOneField(
        Transaction,
        on_delete=models.PROTECT,
        null=True, blank=True,
        related_name='topup'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Top-up ₹{self.amount} for {self.user_id} - {self.status}"
