# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """Platform administrators only"""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role == 'admin')


class IsAdminOrOwner(permissions.BasePermission):
    """Administrators and parking owners (slot management, QR scanners)"""

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and request.user.role in ('admin', 'owner')
        )


class IsAdminOrOwnerOrReadOnly(IsAdminOrOwner):
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsReservationOwnerOrAdmin(permissions.BasePermission):
    """Permission to check if user made the reservation"""
    message = 'Not authorized to view this reservation.'
    code = 'not_authorized'

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.pk or request.user.role == 'admin'
