# ==================== RESERVATIONS/MODELS.PY ====================
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone


class Reservation(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_ACTIVE = 'active'
    STATUS_EXPIRED = 'expired'
    STATUS_CANCELLED = 'cancelled'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    )
    PAYMENT_STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('refunded', 'Refunded'),
    )

    # Relations
    user = models.ForeignKey('users.CustomUser', on_delete=models.CASCADE, related_name='reservations')
    slot = models.ForeignKey('parking.Slot', on_delete=models.PROTECT, related_name='reservations')
    parking_spot = models.ForeignKey('parking.ParkingSpot', on_delete=models.PROTECT, related_name='reservations')

    # Timing (duration in hours)
    start_time = models.DateTimeField(db_index=True)
    duration = models.DecimalField(
        max_digits=6, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.5'))]
    )
    end_time = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    expires_at = models.DateTimeField(db_index=True)

    qr_code = models.TextField(blank=True)
    entry_time = models.DateTimeField(null=True, blank=True)
    exit_time = models.DateTimeField(null=True, blank=True)

    # Pricing
    estimated_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    final_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='reservation_user_status_idx'),
            models.Index(fields=['status', 'expires_at'], name='reservation_expiry_idx'),
        ]

    def __str__(self):
        return f"Reservation {self.id} - slot {self.slot_id} ({self.status})"

    def hold_expired(self, now=None):
        """Pending reservation left unconfirmed past its hold window"""
        return self.status == self.STATUS_PENDING and self.expires_at <= (now or timezone.now())
