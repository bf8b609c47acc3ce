#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a worker that consumes both the default and email queues.
#
# Usage:
#   python scripts/start_worker.py
#
#   # Or use the Celery CLI directly
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
#
# Prerequisites:
#   - Redis reachable at REDIS_URL
#   - RESEND_API_KEY / RESEND_FROM_EMAIL set, or reminder jobs will fail
# =============================================================================

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app


def main():
    """Start the Celery worker."""
    concurrency = os.getenv("WORKER_CONCURRENCY", "2")

    print("=" * 60)
    print("Shoot Planner Celery Worker")
    print("=" * 60)
    print(f"Queues: default, email | concurrency: {concurrency}")
    print("Press Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "-Q", "default,email",
        f"--concurrency={concurrency}",
    ])


if __name__ == "__main__":
    main()
