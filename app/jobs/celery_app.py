"""Celery application configuration"""

from celery import Celery
from app.config import settings

# Create Celery app
celery_app = Celery(
    "venue_admin",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.jobs.tasks",
    ],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Asia/Seoul",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,
    worker_prefetch_multiplier=1,

    # Beat schedule: beat is the external caller of the cron endpoint
    beat_schedule={
        "trigger-sms-dispatch": {
            "task": "trigger_sms_dispatch",
            "schedule": settings.cron_interval_seconds,
        },
    },
)
