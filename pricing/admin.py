from django.contrib import admin
from .models import PricingRule


@admin.register(PricingRule)
class PricingRuleAdmin(admin.ModelAdmin):
    list_display = ['name', 'multiplier', 'parking_spot', 'priority', 'is_active', 'updated_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'parking_spot__spot_number']
    readonly_fields = ['created_at', 'updated_at']
