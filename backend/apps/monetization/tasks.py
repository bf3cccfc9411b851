# FILE: backend/apps/monetization/tasks.py
"""
Celery tasks for monetization.

- publish_monetization_usage: one-shot run that pushes usage recorded since the
  last successful publish to the billing engine.
"""
import logging

from celery import shared_task
from django.utils import timezone

from . import services
from .models import MonetizationUsagePublishInfo
from .publishers import UsagePublishError, get_usage_publisher

logger = logging.getLogger(__name__)


@shared_task(name="monetization.tasks.publish_monetization_usage", bind=True)
def publish_monetization_usage(self, job_id=MonetizationUsagePublishInfo.JOB_NAME):
    """
    Publish usage for the window ``(last_publish_time, now]``.

    The record is RUNNING for the duration of the run and IDLE afterwards, with
    status ACCEPTED (and an advanced ``last_publish_time``) or ERROR. A
    redelivered message resumes the run its killed worker left RUNNING.
    """
    delivery_info = self.request.delivery_info or {}
    info = services.begin_publish_run(
        job_id,
        task_id=self.request.id or '',
        redelivered=bool(delivery_info.get('redelivered')),
    )
    if info is None:
        logger.info("Monetization usage publisher already running; skipping run")
        return {'status': 'skipped', 'message': 'A job is already running'}

    from_time = info.last_publish_time
    to_time = timezone.now().replace(microsecond=0)
    logger.info(f"Monetization usage publishing started (task {self.request.id})")

    try:
        accepted = get_usage_publisher().publish_usage(from_time, to_time)
    except UsagePublishError as exc:
        logger.error(f"Monetization usage publishing failed: {exc}")
        services.finish_publish_run(info, accepted=False)
        return {'status': 'error', 'message': str(exc)}
    except Exception:
        logger.exception("Unexpected error while publishing monetization usage")
        services.finish_publish_run(info, accepted=False)
        raise

    services.finish_publish_run(info, accepted=accepted, published_until=to_time)
    if not accepted:
        logger.warning("Billing engine did not accept the published usage")
        return {'status': 'error', 'message': 'Usage was not accepted'}

    logger.info(f"Monetization usage published up to {to_time.isoformat()}")
    return {
        'status': 'success',
        'from_time': from_time.isoformat(),
        'to_time': to_time.isoformat(),
    }
