# ==================== USERS/VIEWS.PY ====================
import logging

from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from .serializers import UserRegistrationSerializer, UserLoginSerializer, UserProfileSerializer

logger = logging.getLogger(__name__)


def token_response(user, message, http_status=status.HTTP_200_OK):
    """Profile plus a fresh JWT pair"""
    refresh = RefreshToken.for_user(user)
    return Response({
        'success': True,
        'message': message,
        'user': UserProfileSerializer(user).data,
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }, status=http_status)


class UserViewSet(viewsets.ViewSet):
    """Signup, login and the signed-in user's profile"""
    permission_classes = [permissions.AllowAny]

    @action(detail=False, methods=['post'])
    def register(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User registered: {user.username}")
        return token_response(user, 'User registered successfully', status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def login(self, request):
        """Body: { "username": "<username or email>", "password": "..." }"""
        serializer = UserLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return token_response(serializer.validated_data['user'], 'Login successful')

    @action(detail=False, methods=['get', 'put'], permission_classes=[permissions.IsAuthenticated])
    def profile(self, request):
        """Wallet balance, points and role are read-only here"""
        if request.method == 'PUT':
            serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        else:
            serializer = UserProfileSerializer(request.user)
        return Response(serializer.data)
