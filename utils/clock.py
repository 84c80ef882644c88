# ==================== UTILS/CLOCK.PY ====================
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone

WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


def parking_timezone():
    return ZoneInfo(settings.PARKING_TIME_ZONE)


def to_parking_time(moment):
    """Convert a timestamp into the facility's configured time zone.

    Naive datetimes are taken to already be in that zone.
    """
    tz = parking_timezone()
    if timezone.is_naive(moment):
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def hour_of_day(moment):
    return to_parking_time(moment).hour


def weekday_name(moment):
    """Lowercase English weekday name, e.g. 'monday'."""
    return WEEKDAYS[to_parking_time(moment).weekday()]


def start_of_day(moment=None):
    local = to_parking_time(moment or timezone.now())
    return local.replace(hour=0, minute=0, second=0, microsecond=0)
