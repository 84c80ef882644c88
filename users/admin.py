# ==================== USERS/ADMIN.PY ====================
from django.contrib import admin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'phone_number', 'role', 'wallet_balance', 'reward_points', 'created_at']
    list_filter = ['role', 'created_at']
    search_fields = ['username', 'email', 'phone_number']
    # Wallet fields change only through the ledger
    readonly_fields = ['wallet_balance', 'reward_points', 'created_at', 'updated_at']
