from django.db import models
from django.core.validators import MinValueValidator


class PricingRule(models.Model):
    """Time-of-day / day-of-week price multiplier.

    A rule without a parking spot is global. Every active rule that matches
    a start time multiplies the price; `priority` orders listings only.
    """
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # [{"start": 22, "end": 2}, ...] hours 0-23, end exclusive, may wrap midnight
    peak_hours = models.JSONField(default=list, blank=True)
    # ["monday", "friday"]; empty means every day
    days_of_week = models.JSONField(default=list, blank=True)

    multiplier = models.DecimalField(
        max_digits=6, decimal_places=3, default=1,
        validators=[MinValueValidator(0)],
        help_text="1.5 = 50% increase, 0.8 = 20% discount"
    )
    is_active = models.BooleanField(default=True)
    parking_spot = models.ForeignKey(
        'parking.ParkingSpot',
        on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='pricing_rules'
    )
    priority = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-priority', '-created_at']
        indexes = [
            models.Index(fields=['is_active', '-priority'], name='pricing_active_priority_idx'),
        ]

    def __str__(self):
        scope = self.parking_spot.spot_number if self.parking_spot_id else 'global'
        return f"{self.name} x{self.multiplier} ({scope})"
