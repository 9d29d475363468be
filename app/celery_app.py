from celery import Celery
from celery.schedules import crontab

from app.config import settings

# Create Celery app
celery_app = Celery(
    "nexo",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],  # Auto-discover tasks from this module
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    "expire-subscriptions-hourly": {
        "task": "app.tasks.expire_subscriptions",
        "schedule": crontab(minute=0),  # every hour on the hour
        "args": [],
    },
    "mark-stale-users-offline": {
        "task": "app.tasks.mark_stale_users_offline",
        "schedule": crontab(minute="*/5"),
        "args": [],
    },
}
