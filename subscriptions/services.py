# ==================== SUBSCRIPTIONS/SERVICES.PY ====================
import calendar
import logging
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from payments.services import WalletService
from utils.exceptions import (
    UserNotFound, NotAuthorized, SubscriptionNotFound, SubscriptionAlreadyActive, SubscriptionInactive
)
from .models import Subscription

logger = logging.getLogger(__name__)


def add_months(moment, months):
    """Same day of month `months` later, clamped to the end of shorter months"""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class SubscriptionService:
    """Plan purchase and management, paid from the wallet"""

    @staticmethod
    def current(user_id, now=None):
        return Subscription.objects.filter(
            user_id=user_id, is_active=True, end_date__gt=now or timezone.now()
        ).first()

    @staticmethod
    @transaction.atomic
    def purchase(user, plan, auto_renew=False):
        """Debit the plan price and start the subscription now.

        The user row is locked first so two purchases for the same user
        cannot both pass the one-current-plan check.
        """
        plans = settings.PARKSMART['SUBSCRIPTION_PLANS']
        if plan not in plans:
            raise ValidationError({'plan': [f"Choose one of: {', '.join(plans)}."]})

        User = get_user_model()
        try:
            User.objects.select_for_update().get(pk=user.pk)
        except User.DoesNotExist:
            raise UserNotFound()

        now = timezone.now()
        if SubscriptionService.current(user.pk, now):
            raise SubscriptionAlreadyActive()

        # Plans that ran out are closed when the next one is bought
        Subscription.objects.filter(user=user, is_active=True, end_date__lte=now).update(
            is_active=False, auto_renew=False, updated_at=now
        )

        price = Decimal(plans[plan]['price'])
        subscription = Subscription.objects.create(
            user=user,
            plan=plan,
            price=price,
            start_date=now,
            end_date=add_months(now, plans[plan]['months']),
            auto_renew=auto_renew,
            discount_percentage=settings.PARKSMART['SUBSCRIPTION_DISCOUNT_PERCENT'],
        )
        WalletService.debit(
            user.pk,
            price,
            'subscription',
            {'ref_model': 'subscription', 'ref_id': subscription.pk},
            f"{plan} subscription purchase"
        )

        logger.info(f"User {user.pk} bought a {plan} subscription until {subscription.end_date:%Y-%m-%d}")
        return subscription

    @staticmethod
    def _owned(subscription_id, user):
        try:
            subscription = Subscription.objects.select_for_update().get(pk=subscription_id)
        except (Subscription.DoesNotExist, ValueError, TypeError):
            raise SubscriptionNotFound()
        if subscription.user_id != user.pk:
            raise NotAuthorized('Not authorized to change this subscription.')
        return subscription

    @staticmethod
    @transaction.atomic
    def cancel(subscription_id, user):
        """End the plan now; the purchase price is not refunded"""
        subscription = SubscriptionService._owned(subscription_id, user)
        subscription.is_active = False
        subscription.auto_renew = False
        subscription.save(update_fields=['is_active', 'auto_renew', 'updated_at'])
        logger.info(f"Subscription {subscription.id} cancelled by user {user.pk}")
        return subscription

    @staticmethod
    @transaction.atomic
    def toggle_auto_renew(subscription_id, user):
        subscription = SubscriptionService._owned(subscription_id, user)
        if not subscription.is_current():
            raise SubscriptionInactive()
        subscription.auto_renew = not subscription.auto_renew
        subscription.save(update_fields=['auto_renew', 'updated_at'])
        return subscription

    @staticmethod
    def discount_for(user_id, now=None):
        subscription = SubscriptionService.current(user_id, now)
        return {
            'hasDiscount': subscription is not None,
            'discountPercentage': subscription.discount_percentage if subscription else 0,
            'subscription': subscription,
        }
