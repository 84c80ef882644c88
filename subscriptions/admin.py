from django.contrib import admin
from .models import Subscription


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'plan', 'price', 'start_date', 'end_date', 'is_active', 'auto_renew']
    list_filter = ['plan', 'is_active', 'auto_renew']
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['price', 'start_date', 'end_date', 'created_at', 'updated_at']
