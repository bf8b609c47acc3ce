# =============================================================================
# workers/celery_app.py - Celery Application
# =============================================================================
# Builds the Celery app used by both the API (to enqueue and poll) and the
# worker process. Broker and result backend are the same Redis instance.
#
# Usage:
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
#   celery -A workers.celery_app inspect active
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun
from dotenv import load_dotenv

# The worker isn't started through uvicorn, so .env has to be loaded here
# before app.config builds its settings
load_dotenv()

from app.config import settings  # noqa: E402

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def broker_host(url: str) -> str:
    """Strip credentials from a redis:// URL for logging."""
    return url.rsplit("@", 1)[-1]


def create_celery_app() -> Celery:
    app = Celery(
        "shoot_planner_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    # shared_task proxies resolve against the current app, which is
    # thread-local; request handler threads fall back to the default app
    app.set_default()

    logger.info(f"Celery app ready, broker {broker_host(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


@celery_app.task(name="workers.healthcheck")
def healthcheck():
    """Round-trip check for a running worker: healthcheck.delay().get(timeout=5)."""
    return {"status": "ok", "environment": settings.ENVIRONMENT}


# =============================================================================
# Task lifecycle logging
# =============================================================================

def _describe(task, args) -> str:
    # Reminder tasks take (shoot_id, team_id)
    if args:
        return f"{task.name} shoot={args[0]}"
    return task.name


@task_prerun.connect
def log_task_start(sender=None, task_id=None, task=None, args=None, **extra):
    logger.info(f"Task started: {_describe(task, args)} [{task_id}]")


@task_postrun.connect
def log_task_done(sender=None, task_id=None, task=None, args=None, state=None, **extra):
    logger.info(f"Task finished: {_describe(task, args)} [{task_id}] {state}")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, **extra):
    logger.error(f"Task failed: {sender.name} [{task_id}] {exception}")


if __name__ == "__main__":
    celery_app.start()
