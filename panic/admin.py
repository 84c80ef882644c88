from django.contrib import admin
from .models import PanicAlert


@admin.register(PanicAlert)
class PanicAlertAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'reservation', 'parking_spot', 'issue_type', 'status', 'created_at']
    list_filter = ['status', 'issue_type']
    search_fields = ['user__username', 'message', 'admin_notes']
    readonly_fields = ['created_at', 'updated_at', 'resolved_at']
