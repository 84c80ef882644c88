# ==================== PARKSMART_BACKEND/SETTINGS.PY ====================
import os
from pathlib import Path
from datetime import timedelta
from decouple import config

from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config('SECRET_KEY', default='your-secret-key-change-in-production')
DEBUG = config('DEBUG', default=True, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party apps
    'rest_framework',
    'rest_framework_simplejwt',
    'corsheaders',
    'django_filters',
    'django_celery_beat',
    'phonenumber_field',

    # Local apps
    'users',
    'parking',
    'pricing',
    'payments',
    'reservations',
    'subscriptions',
    'panic',
    'analytics',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'parksmart_backend.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'parksmart_backend.wsgi.application'

# Database
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('DB_NAME', default='parksmart_db'),
        'USER': config('DB_USER', default='postgres'),
        'PASSWORD': config('DB_PASSWORD', default='password'),
        'HOST': config('DB_HOST', default='localhost'),
        'PORT': config('DB_PORT', default='5432'),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Hour-of-day and weekday for pricing are always derived in this zone,
# never in the server's local zone.
PARKING_TIME_ZONE = config('PARKING_TIME_ZONE', default='Asia/Kolkata')

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Custom User Model
AUTH_USER_MODEL = 'users.CustomUser'

# REST Framework Configuration
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticatedOrReadOnly',
    ),
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
        'rest_framework.filters.SearchFilter',
        'rest_framework.filters.OrderingFilter'
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20,
    'EXCEPTION_HANDLER': 'utils.exceptions.parksmart_exception_handler',
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle'
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': '100/hour',
        'user': '1000/hour'
    }
}

# JWT Configuration
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=1),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'ROTATE_REFRESH_TOKENS': True,
    'BLACKLIST_AFTER_ROTATION': False,
    'UPDATE_LAST_LOGIN': True,
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': SECRET_KEY,
}

# CORS Configuration
CORS_ALLOWED_ORIGINS = config('CORS_ALLOWED_ORIGINS',
                              default='http://localhost:5173,http://localhost:3000').split(',')
CORS_ALLOW_CREDENTIALS = True

# Razorpay Configuration (wallet top-ups)
RAZORPAY_KEY_ID = config('RAZORPAY_KEY_ID', default='')
RAZORPAY_KEY_SECRET = config('RAZORPAY_KEY_SECRET', default='')

# Realtime gateway (socket server) that fans events out to browsers
SOCKET_BROADCAST_URL = config('SOCKET_BROADCAST_URL', default='')
SOCKET_BROADCAST_TIMEOUT = config('SOCKET_BROADCAST_TIMEOUT', default=2, cast=int)

# Key for the integrity tag attached to reservation QR payloads
QR_SIGNING_KEY = config('QR_SIGNING_KEY', default=SECRET_KEY)

# Business constants
PARKSMART = {
    'RESERVATION_HOLD_MINUTES': 15,
    'MIN_DURATION_HOURS': '0.5',
    'REWARD_POINTS_PER_PARKING': 5,
    'POINTS_PER_CURRENCY_UNIT': 10,
    'QR_TAG_LENGTH': 16,
    'SUBSCRIPTION_PLANS': {
        'monthly': {'price': '499.00', 'months': 1},
        'quarterly': {'price': '1299.00', 'months': 3},
        'yearly': {'price': '4999.00', 'months': 12},
    },
    'SUBSCRIPTION_DISCOUNT_PERCENT': 20,
}

LOG_DIR = BASE_DIR / 'logs'
os.makedirs(LOG_DIR, exist_ok=True)
# Logging Configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
        'file': {
            'class': 'logging.FileHandler',
            'filename': os.path.join(LOG_DIR, 'debug.log'),
            'formatter': 'verbose'
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': 'INFO',
    },
}

# Celery Configuration
CELERY_BROKER_URL = config('CELERY_BROKER_URL', default='redis://localhost:6379/0')
CELERY_RESULT_BACKEND = config('CELERY_RESULT_BACKEND', default='redis://localhost:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_IMPORTS = ('utils.tasks',)

CELERY_BEAT_SCHEDULE = {
    'release-expired-reservations': {
        'task': 'reservations.tasks.release_expired_reservations',
        'schedule': crontab(minute='*'),  # Every minute
    },
}


# ==================== API ENDPOINTS SUMMARY ====================
"""
AUTHENTICATION:
POST   /api/v1/auth/register/                    - Register new user
POST   /api/v1/auth/login/                       - User login
GET    /api/v1/auth/profile/                     - Get user profile
PUT    /api/v1/auth/profile/                     - Update user profile
POST   /api/v1/auth/token/refresh/               - Refresh JWT token

PARKING SPOTS & SLOTS:
GET    /api/v1/spots/                            - List spots
POST   /api/v1/spots/                            - Create spot (admin/owner)
GET    /api/v1/spots/nearby/?lat=X&lng=Y&radius=5
GET    /api/v1/slots/?parking_spot=1&status=empty
POST   /api/v1/slots/                            - Create slot (admin/owner)
PUT    /api/v1/slots/{id}/status/                - Override slot status (admin/owner)
GET    /api/v1/slots/parking/{spot_id}/          - Slots of a spot

PRICING:
POST   /api/v1/pricing/calculate/                - Quote a price (public)
GET    /api/v1/pricing/rules/                    - List rules (admin)
POST   /api/v1/pricing/rules/                    - Create rule (admin)
GET    /api/v1/pricing/peak/?time=ISO            - Is this a peak hour (public)

WALLET:
GET    /api/v1/wallet/                           - Balance, points, points value
GET    /api/v1/wallet/transactions/              - Ledger (paginated)
POST   /api/v1/wallet/add/                       - Direct top-up
POST   /api/v1/wallet/convert-points/            - Convert reward points
POST   /api/v1/wallet/topup/initiate/            - Razorpay order for top-up
POST   /api/v1/wallet/topup/verify/              - Verify and credit top-up

RESERVATIONS:
POST   /api/v1/reservations/                     - Create reservation
GET    /api/v1/reservations/my/                  - My reservations
GET    /api/v1/reservations/{id}/                - Reservation details
DELETE /api/v1/reservations/{id}/                - Cancel reservation
PUT    /api/v1/reservations/{id}/checkin/        - Direct check-in (pays now)
POST   /api/v1/qr/entry/                         - Entry scan (admin/owner)
POST   /api/v1/qr/exit/                          - Exit scan (admin/owner)

SUBSCRIPTIONS:
POST   /api/v1/subscriptions/                    - Buy a plan from the wallet
GET    /api/v1/subscriptions/                    - All subscriptions (admin)
GET    /api/v1/subscriptions/my/                 - Current subscription
GET    /api/v1/subscriptions/check-discount/     - Booking discount, if any
PUT    /api/v1/subscriptions/{id}/autorenew/     - Toggle auto-renew
DELETE /api/v1/subscriptions/{id}/               - Cancel

PANIC ALERTS:
POST   /api/v1/panic/                            - Raise an alert for a reservation
GET    /api/v1/panic/active/                     - Open alerts (admin)
PATCH  /api/v1/panic/{id}/resolve/               - Resolve (admin)

ANALYTICS (admin):
GET    /api/v1/analytics/revenue/  bookings/  occupancy/  traffic/  users/  activity/
"""
