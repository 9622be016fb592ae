"""Celery worker configuration.

Background jobs handled here:
- Booking emails (request received, confirmed, cancelled)
- Daily check-in reminders
"""

from celery import Celery
from celery.schedules import crontab

from app.config import settings

celery_app = Celery(
    "garden_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=120,
    task_soft_time_limit=90,

    # Worker settings
    worker_prefetch_multiplier=1,

    # Results expire after 1 hour
    result_expires=3600,

    # Retry settings
    task_default_retry_delay=60,
    task_max_retries=3,

    beat_schedule={
        "send-checkin-reminders": {
            "task": "app.tasks.send_checkin_reminders",
            "schedule": crontab(hour=settings.booking_reminder_hour, minute=0),
        },
    },
)


if __name__ == "__main__":
    celery_app.start()
