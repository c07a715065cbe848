# bookstore/services/notification_service.py
from kombu.exceptions import OperationalError

from bookstore.celery_worker import celery_app
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order event notifications.
    Dispatched through Celery only after the order transaction has committed,
    so a broker outage is logged and never fails the committed request.
    """

    @staticmethod
    def order_created(user_id: int, order_id: int, total: str):
        _dispatch(user_id, order_id, f"Order {order_id} placed, total {total}")

    @staticmethod
    def order_status_changed(user_id: int, order_id: int, status: str):
        _dispatch(user_id, order_id, f"Order {order_id} is now {status}")


def _dispatch(user_id: int, order_id: int, message: str) -> bool:
    try:
        send_order_notification_task.delay(user_id, order_id, message)
    except OperationalError:
        logger.exception(f"Notification for order {order_id} not queued, broker unavailable")
        return False
    return True


@celery_app.task(name="bookstore.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, message: str):
    """
    Delivery channel stub: logs the message.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: {message}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
