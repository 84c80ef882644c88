# ==================== PANIC/MODELS.PY ====================
from django.db import models
from django.db.models import Q


class PanicAlert(models.Model):
    """Help request raised by a driver during a reservation."""
    STATUS_ACTIVE = 'active'
    STATUS_RESOLVED = 'resolved'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_RESOLVED, 'Resolved'),
    )
    ISSUE_CHOICES = (
        ('car_not_starting', 'Car not starting'),
        ('exit_blocked', 'Exit blocked'),
        ('lost_ticket', 'Lost ticket'),
        ('safety_concern', 'Safety concern'),
        ('other', 'Other'),
    )

    user = models.ForeignKey('users.CustomUser', on_delete=models.CASCADE, related_name='panic_alerts')
    reservation = models.ForeignKey('reservations.Reservation', on_delete=models.CASCADE, related_name='panic_alerts')
    parking_spot = models.ForeignKey('parking.ParkingSpot', on_delete=models.PROTECT, related_name='panic_alerts')

    issue_type = models.CharField(max_length=30, choices=ISSUE_CHOICES)
    message = models.TextField(blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    admin_notes = models.TextField(blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolved_by = models.ForeignKey(
        'users.CustomUser', on_delete=models.SET_NULL, null=True, blank=True, related_name='resolved_panic_alerts'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            # One open alert per reservation
            models.UniqueConstraint(
                fields=['reservation'], condition=Q(status='active'), name='panic_one_active_per_reservation'
            ),
        ]

    def __str__(self):
        return f"Panic {self.id} - {self.issue_type} ({self.status})"
