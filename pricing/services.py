# ==================== PRICING/SERVICES.PY ====================
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError
from django.db.models import Q

from utils import clock
from utils.exceptions import PriceCalculationFailed
from utils.money import to_decimal, quantize_money
from .models import PricingRule

logger = logging.getLogger(__name__)


def window_matches(window, hour):
    """[start, end) hour window; start > end wraps past midnight."""
    start, end = int(window['start']), int(window['end'])
    if start <= end:
        return start <= hour < end
    return hour >= start or hour < end


def rule_applies(rule, hour, weekday):
    if rule.days_of_week and weekday not in rule.days_of_week:
        return False
    if rule.peak_hours:
        return any(window_matches(window, hour) for window in rule.peak_hours)
    return True


@dataclass
class PriceQuote:
    base_price: Decimal
    duration: Decimal
    total_multiplier: Decimal
    final_price: Decimal
    applied_rules: list = field(default_factory=list)
    is_peak_hour: bool = False

    def as_dict(self):
        return {
            'basePrice': self.base_price,
            'duration': self.duration,
            'totalMultiplier': self.total_multiplier,
            'finalPrice': self.final_price,
            'appliedRules': self.applied_rules,
            'isPeakHour': self.is_peak_hour,
        }


class PricingEngine:
    """Dynamic pricing from the active rule set"""

    @staticmethod
    def get_active_rules(spot_id):
        """Active rules scoped to the spot plus global ones, highest priority first"""
        return PricingRule.objects.filter(
            Q(parking_spot_id=spot_id) | Q(parking_spot__isnull=True),
            is_active=True,
        ).order_by('-priority', '-created_at')

    @staticmethod
    def calculate_price(spot_id, start_time, duration_hours, base_hourly_rate):
        """Quote base_hourly_rate x duration_hours x product of matching multipliers.

        Hour and weekday come from start_time in the parking time zone.
        """
        try:
            duration = to_decimal(duration_hours)
            base_price = to_decimal(base_hourly_rate)
            hour = clock.hour_of_day(start_time)
            weekday = clock.weekday_name(start_time)

            total_multiplier = Decimal(1)
            applied_rules = []
            for rule in PricingEngine.get_active_rules(spot_id):
                if rule_applies(rule, hour, weekday):
                    total_multiplier *= rule.multiplier
                    applied_rules.append({
                        'id': rule.pk,
                        'name': rule.name,
                        'multiplier': rule.multiplier,
                        'priority': rule.priority,
                    })

            final_price = quantize_money(base_price * duration * total_multiplier)
        except (DatabaseError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.error(f"Price calculation failed for spot {spot_id}: {str(e)}")
            raise PriceCalculationFailed(f"Price calculation failed: {str(e)}") from e

        return PriceQuote(
            base_price=base_price,
            duration=duration,
            total_multiplier=total_multiplier,
            final_price=final_price,
            applied_rules=applied_rules,
            is_peak_hour=total_multiplier > 1,
        )

    @staticmethod
    def is_peak_hour(moment):
        """True if any active rule with peak windows matches and raises the price"""
        hour = clock.hour_of_day(moment)
        weekday = clock.weekday_name(moment)
        for rule in PricingRule.objects.filter(is_active=True):
            if rule.days_of_week and weekday not in rule.days_of_week:
                continue
            if rule.peak_hours and rule.multiplier > 1 and any(
                window_matches(window, hour) for window in rule.peak_hours
            ):
                return True
        return False
