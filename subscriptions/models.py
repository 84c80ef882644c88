# ==================== SUBSCRIPTIONS/MODELS.PY ====================
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone


class Subscription(models.Model):
    """Prepaid parking plan bought from the wallet.

    Rows are kept after cancellation or lapse; a user has at most one
    current subscription (active and not past end_date).
    """
    PLAN_CHOICES = (
        ('monthly', 'Monthly'),
        ('quarterly', 'Quarterly'),
        ('yearly', 'Yearly'),
    )

    user = models.ForeignKey('users.CustomUser', on_delete=models.CASCADE, related_name='subscriptions')
    plan = models.CharField(max_length=20, choices=PLAN_CHOICES)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    auto_renew = models.BooleanField(default=False)

    # Benefits
    discount_percentage = models.PositiveSmallIntegerField(
        default=20, validators=[MaxValueValidator(100)]
    )
    free_hours_per_month = models.PositiveIntegerField(default=0)
    priority_booking = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['end_date', 'is_active'], name='subscription_end_active_idx'),
        ]

    def __str__(self):
        return f"{self.plan} subscription for {self.user_id}"

    def is_current(self, now=None):
        return self.is_active and self.end_date > (now or timezone.now())
