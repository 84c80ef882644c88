# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSpot, Slot


class SlotInline(admin.TabularInline):
    model = Slot
    extra = 1
    readonly_fields = ['status', 'last_updated']


@admin.register(ParkingSpot)
class ParkingSpotAdmin(admin.ModelAdmin):
    list_display = ['spot_number', 'name', 'price_per_hour', 'is_available', 'difficulty_level', 'created_at']
    list_filter = ['is_available', 'difficulty_level', 'created_at']
    search_fields = ['spot_number', 'name', 'address']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [SlotInline]
    fieldsets = (
        ('Basic Info', {'fields': ('spot_number', 'name', 'address')}),
        ('Location', {'fields': ('latitude', 'longitude')}),
        ('Pricing & Availability', {'fields': ('price_per_hour', 'is_available')}),
        ('Difficulty', {'fields': ('difficulty_level', 'difficulty_reasons', 'difficulty_notes')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(Slot)
class SlotAdmin(admin.ModelAdmin):
    list_display = ['slot_number', 'parking_spot', 'status', 'floor', 'slot_type', 'last_updated']
    list_filter = ['status', 'slot_type', 'floor']
    search_fields = ['slot_number', 'parking_spot__spot_number']
    readonly_fields = ['status', 'last_updated', 'created_at', 'updated_at']
