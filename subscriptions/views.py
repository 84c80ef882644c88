# ==================== SUBSCRIPTIONS/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from payments.services import WalletService
from utils.permissions import IsAdmin
from .models import Subscription
from .serializers import SubscriptionSerializer, SubscriptionPurchaseSerializer
from .services import SubscriptionService


class SubscriptionViewSet(viewsets.GenericViewSet):
    """Parking plans bought from the wallet"""

    queryset = Subscription.objects.select_related('user')
    serializer_class = SubscriptionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):
        if self.action == 'list':
            return [IsAdmin()]
        return super().get_permissions()

    def list(self, request):
        """All subscriptions, newest first. Query param: is_active=true|false"""
        queryset = self.get_queryset()
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    def create(self, request):
        """Buy a plan

        Body: { "plan": "monthly|quarterly|yearly", "auto_renew": false }
        """
        serializer = SubscriptionPurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        subscription = SubscriptionService.purchase(
            request.user,
            serializer.validated_data['plan'],
            serializer.validated_data['auto_renew'],
        )
        return Response({
            'success': True,
            'message': 'Subscription purchased successfully',
            'data': SubscriptionSerializer(subscription).data,
            'walletBalance': WalletService.get_info(request.user.pk)['walletBalance'],
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def my(self, request):
        subscription = SubscriptionService.current(request.user.pk)
        if subscription is None:
            return Response({'success': True, 'data': None, 'message': 'No active subscription'})
        return Response({'success': True, 'data': SubscriptionSerializer(subscription).data})

    @action(detail=False, methods=['get'], url_path='check-discount')
    def check_discount(self, request):
        discount = SubscriptionService.discount_for(request.user.pk)
        subscription = discount.pop('subscription')
        discount['subscription'] = SubscriptionSerializer(subscription).data if subscription else None
        return Response({'success': True, **discount})

    @action(detail=True, methods=['put'])
    def autorenew(self, request, pk=None):
        subscription = SubscriptionService.toggle_auto_renew(pk, request.user)
        return Response({
            'success': True,
            'message': f"Auto-renew {'enabled' if subscription.auto_renew else 'disabled'}",
            'data': SubscriptionSerializer(subscription).data,
        })

    def destroy(self, request, pk=None):
        subscription = SubscriptionService.cancel(pk, request.user)
        return Response({
            'success': True,
            'message': 'Subscription cancelled successfully',
            'data': SubscriptionSerializer(subscription).data,
        })
