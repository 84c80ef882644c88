# ==================== RESERVATIONS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
import logging

from utils import events
from .services import ReservationService

logger = logging.getLogger(__name__)


@shared_task
def release_expired_reservations():
    """Expire pending reservations past their hold and free their slots"""
    expired = 0
    for reservation_id in ReservationService.expired_ids():
        outcome = ReservationService.expire(reservation_id)
        if outcome.events:
            expired += 1
            events.broadcast(outcome.events)

    logger.info(f"Expired {expired} reservations")
    return expired
