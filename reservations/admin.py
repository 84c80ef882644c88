from django.contrib import admin
from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'user', 'slot', 'parking_spot', 'status', 'payment_status',
        'estimated_price', 'final_price', 'start_time', 'created_at'
    ]
    list_filter = ['status', 'payment_status', 'created_at']
    search_fields = ['user__username', 'slot__slot_number', 'parking_spot__spot_number']
    readonly_fields = [
        'qr_code', 'expires_at', 'entry_time', 'exit_time',
        'estimated_price', 'final_price', 'created_at', 'updated_at'
    ]
