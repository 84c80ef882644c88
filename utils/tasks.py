# ==================== UTILS/TASKS.PY (CELERY TASKS) ====================
import logging

import requests
from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def push_realtime_event(message):
    """POST one event to the socket gateway. Delivery is best effort."""
    try:
        response = requests.post(
            settings.SOCKET_BROADCAST_URL,
            json=message,
            timeout=settings.SOCKET_BROADCAST_TIMEOUT,
        )
        if response.status_code >= 400:
            logger.warning(f"Socket gateway rejected {message.get('event')}: {response.status_code} - {response.text}")
    except requests.RequestException as e:
        logger.error(f"Error pushing {message.get('event')} to socket gateway: {str(e)}")
