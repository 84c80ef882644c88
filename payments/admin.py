# ==================== PAYMENTS/ADMIN.PY ====================
from django.contrib import admin
from django.utils.html import format_html
from .models import Transaction, WalletTopUp


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'user', 'type_badge', 'amount', 'category',
        'balance_after', 'reference', 'created_at'
    ]
    list_filter = ['transaction_type', 'category', 'created_at']
    search_fields = ['user__username', 'user__email', 'description']
    readonly_fields = [
        'user', 'transaction_type', 'amount', 'category', 'ref_model',
        'ref_id', 'balance_after', 'description', 'created_at'
    ]

    def type_badge(self, obj):
        color = 'green' if obj.transaction_type == 'credit' else 'red'
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.get_transaction_type_display()
        )
    type_badge.short_description = 'Type'

    def reference(self, obj):
        if not obj.ref_model:
            return '-'
        return f"{obj.ref_model} #{obj.ref_id}"

    # Ledger is append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WalletTopUp)
class WalletTopUpAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'amount', 'status', 'razorpay_order_id', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['user__username', 'razorpay_order_id', 'razorpay_payment_id']
    readonly_fields = [
        'razorpay_order_id', 'razorpay_payment_id', 'transaction', 'created_at', 'updated_at'
    ]
