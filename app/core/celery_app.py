from celery import Celery
from app.core.config import settings
import sys

# Create Celery app
celery_app = Celery(
    "travel_agency_backend",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.workers.celery_tasks.shift_tasks",
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
)

# Windows-specific configuration
if sys.platform == 'win32':
    celery_app.conf.update(
        worker_pool='threads',
        worker_concurrency=4
    )

celery_app.conf.beat_schedule = {
    "auto-end-open-shifts": {
        "task": "app.workers.celery_tasks.shift_tasks.auto_end_open_shifts",
        "schedule": settings.AUTO_END_SHIFT_INTERVAL_SECONDS,  # Hourly by default
    },
}
