# ==================== PARKSMART_BACKEND/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenObtainPairView

from users.views import UserViewSet
from parking.views import ParkingSpotViewSet, SlotViewSet
from pricing.views import PricingRuleViewSet, PricingViewSet
from payments.views import WalletViewSet
from reservations.views import ReservationViewSet, QRViewSet
from subscriptions.views import SubscriptionViewSet
from panic.views import PanicAlertViewSet
from analytics.views import AnalyticsViewSet

# Create router and register viewsets
router = DefaultRouter()
router.register(r'spots', ParkingSpotViewSet, basename='spot')
router.register(r'slots', SlotViewSet, basename='slot')
router.register(r'pricing/rules', PricingRuleViewSet, basename='pricing-rule')
router.register(r'reservations', ReservationViewSet, basename='reservation')
router.register(r'wallet', WalletViewSet, basename='wallet')
router.register(r'qr', QRViewSet, basename='qr')
router.register(r'subscriptions', SubscriptionViewSet, basename='subscription')
router.register(r'panic', PanicAlertViewSet, basename='panic')
router.register(r'analytics', AnalyticsViewSet, basename='analytics')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
        ])),

        path('pricing/calculate/', PricingViewSet.as_view({'post': 'calculate'}), name='pricing_calculate'),
        path('pricing/peak/', PricingViewSet.as_view({'get': 'peak'}), name='pricing_peak'),
        path('wallet/', WalletViewSet.as_view({'get': 'info'}), name='wallet'),

        # API routes
        path('', include(router.urls)),
    ])),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
