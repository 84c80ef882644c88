# ==================== PAYMENTS/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from django.conf import settings
import logging

from .models import Transaction
from .serializers import (
    TransactionSerializer, WalletAddSerializer, ConvertPointsSerializer,
    TopUpInitiateSerializer, TopUpVerifySerializer, WalletTopUpSerializer
)
from .services import WalletService, TopUpService

logger = logging.getLogger(__name__)


class WalletViewSet(viewsets.GenericViewSet):
    """Wallet balance, ledger history, points conversion and top-ups"""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = TransactionSerializer

    def get_queryset(self):
        return Transaction.objects.filter(user=self.request.user)

    @action(detail=False, methods=['get'])
    def info(self, request):
        """Current balance, reward points and what the points are worth"""
        return Response({'success': True, 'data': WalletService.get_info(request.user.pk)})

    @action(detail=False, methods=['get'])
    def transactions(self, request):
        """Paginated ledger, newest first

        Query params: type (credit|debit), category
        """
        queryset = self.get_queryset()
        transaction_type = request.query_params.get('type')
        category = request.query_params.get('category')
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type)
        if category:
            queryset = queryset.filter(category=category)

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['post'])
    def add(self, request):
        """Credit the wallet directly

        Body: { "amount": 100.00, "description": "..." }
        """
        serializer = WalletAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        amount = serializer.validated_data['amount']
        result = WalletService.credit(
            request.user.pk,
            amount,
            'wallet_topup',
            description=serializer.validated_data.get('description') or f"Added ₹{amount} to wallet"
        )
        return Response({
            'success': True,
            'data': {
                'walletBalance': result.user.wallet_balance,
                'transaction': TransactionSerializer(result.transaction).data,
            }
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='convert-points')
    def convert_points(self, request):
        """Convert reward points (multiples of 10) to wallet balance

        Body: { "points": 50 }
        """
        serializer = ConvertPointsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = WalletService.convert_points(request.user.pk, serializer.validated_data['points'])
        return Response({
            'success': True,
            'data': {
                'walletBalance': result.user.wallet_balance,
                'rewardPoints': result.user.reward_points,
                'transaction': TransactionSerializer(result.transaction).data,
            }
        })

    @action(detail=False, methods=['post'], url_path='topup/initiate')
    def topup_initiate(self, request):
        """Create a Razorpay order for a wallet top-up

        Body: { "amount": 500 }
        """
        serializer = TopUpInitiateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        topup = TopUpService.initiate(request.user, serializer.validated_data['amount'])
        return Response({
            'topup_id': topup.id,
            'razorpay_order_id': topup.razorpay_order_id,
            'amount': topup.amount,
            'currency': 'INR',
            'key_id': settings.RAZORPAY_KEY_ID
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='topup/verify')
    def topup_verify(self, request):
        """Verify the Razorpay signature and credit the wallet"""
        serializer = TopUpVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        topup = TopUpService.verify(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'data': {
                'topup': WalletTopUpSerializer(topup).data,
                'walletBalance': WalletService.get_info(request.user.pk)['walletBalance'],
            }
        })
