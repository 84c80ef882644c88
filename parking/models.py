# parking/models.py

from django.db import models
from django.utils import timezone
from django.core.validators import MinValueValidator, MaxValueValidator


class ParkingSpot(models.Model):
    DIFFICULTY_CHOICES = (
        ('Easy', 'Easy'),
        ('Medium', 'Medium'),
        ('Hard', 'Hard'),
    )

    spot_number = models.CharField(max_length=50, unique=True)

    # Location info
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=500)
    latitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )

    is_available = models.BooleanField(default=True, db_index=True)
    price_per_hour = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # How hard the spot is to park in
    difficulty_level = models.CharField(max_length=10, choices=DIFFICULTY_CHOICES, default='Easy')
    difficulty_reasons = models.JSONField(default=list, blank=True)  # ["narrow", "steep ramp"]
    difficulty_notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.spot_number} - {self.name}"


class Slot(models.Model):
    """One physical parking space inside a spot.

    `status` moves only through parking.services.SlotStateMachine.
    """
    STATUS_EMPTY = 'empty'
    STATUS_RESERVED = 'reserved'
    STATUS_OCCUPIED = 'occupied'
    STATUS_CHOICES = (
        (STATUS_EMPTY, 'Empty'),
        (STATUS_OCCUPIED, 'Occupied'),
        (STATUS_RESERVED, 'Reserved'),
    )
    TYPE_CHOICES = (
        ('regular', 'Regular'),
        ('compact', 'Compact'),
        ('large', 'Large'),
        ('handicap', 'Handicap'),
        ('electric', 'Electric'),
    )

    slot_number = models.CharField(max_length=50)
    parking_spot = models.ForeignKey(ParkingSpot, on_delete=models.CASCADE, related_name='slots')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_EMPTY, db_index=True)
    last_updated = models.DateTimeField(default=timezone.now)
    floor = models.CharField(max_length=50, default='Ground')
    slot_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='regular')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['parking_spot', 'floor', 'slot_number']
        unique_together = ('parking_spot', 'slot_number')
        indexes = [
            models.Index(fields=['parking_spot', 'status'], name='slot_spot_status_idx'),
        ]

    def __str__(self):
        return f"Slot {self.slot_number} ({self.status}) at {self.parking_spot.spot_number}"
