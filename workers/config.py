# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Two queues:
#   default   housekeeping (workers.healthcheck)
#   email     reminder batches, one Resend call per participant
#
# Run a worker on both with:  celery -A workers.celery_app worker -Q default,email
# =============================================================================

from app.config import settings

DEFAULT_QUEUE = "default"
EMAIL_QUEUE = "email"

REMINDER_TASK = "workers.tasks.send_shoot_reminders"


def _queue(name: str) -> dict[str, str]:
    return {"exchange": name, "routing_key": name}


class CeleryConfig:
    """Applied with app.config_from_object("workers.config:CeleryConfig")."""

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # Results are polled via GET /api/tasks/{task_id}; an hour is plenty
    result_expires = 3600

    # Re-queue on worker crash; a participant may get a duplicate reminder
    task_acks_late = True
    worker_prefetch_multiplier = 1

    task_track_started = True
    task_time_limit = 120
    task_soft_time_limit = 90

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    task_queues = {
        DEFAULT_QUEUE: _queue(DEFAULT_QUEUE),
        EMAIL_QUEUE: _queue(EMAIL_QUEUE),
    }
    task_default_queue = DEFAULT_QUEUE
    task_routes = {REMINDER_TASK: {"queue": EMAIL_QUEUE}}

    # Stay under Resend's per-account send rate
    task_annotations = {REMINDER_TASK: {"rate_limit": "30/m"}}

    worker_send_task_events = True
    task_send_sent_event = True

    timezone = "UTC"
    enable_utc = True
