# FILE: backend/apps/monetization/services.py
"""
Admin business layer for monetization usage publishing.

Views and tasks go through these functions instead of touching the model
directly. Database failures surface as ``APIManagementError`` so the REST layer
can translate them uniformly.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from backend.core.exceptions import APIManagementError, ErrorKind

from .models import MonetizationUsagePublishInfo

logger = logging.getLogger(__name__)

DEFAULT_TIME_GAP_IN_DAYS = 1


def _now():
    # Publish timestamps have second precision
    return timezone.now().replace(microsecond=0)


def get_publish_time_gap_days():
    """
    Number of days to look back when there is no record of a previous publish.
    Falls back to DEFAULT_TIME_GAP_IN_DAYS when not configured.
    """
    gap = getattr(settings, 'MONETIZATION_USAGE_PUBLISH_FROM_TIME_DAYS', None)
    if gap is None or gap == '':
        return DEFAULT_TIME_GAP_IN_DAYS
    try:
        return int(gap)
    except (TypeError, ValueError) as exc:
        raise APIManagementError(
            f"Invalid monetization publish time gap: {gap!r}", ErrorKind.INTERNAL
        ) from exc


def get_usage_publish_info():
    """Return the publish-info record, or None if the job has never been triggered."""
    try:
        return MonetizationUsagePublishInfo.objects.filter(
            pk=MonetizationUsagePublishInfo.JOB_NAME
        ).first()
    except DatabaseError as exc:
        raise APIManagementError("Error while retrieving monetization usage publish info") from exc


def get_or_create_usage_publish_info():
    """
    Fetch the publish-info record, creating it on first use.

    A new record starts INITIATED/INPROGRESS with ``started_time`` set to now and
    ``last_publish_time`` set to now minus the configured look-back window.
    Returns ``(info, created)``.
    """
    try:
        with transaction.atomic():
            info = MonetizationUsagePublishInfo.objects.select_for_update().filter(
                pk=MonetizationUsagePublishInfo.JOB_NAME
            ).first()
            if info is not None:
                return info, False

            now = _now()
            gap = get_publish_time_gap_days()
            info = MonetizationUsagePublishInfo.objects.create(
                id=MonetizationUsagePublishInfo.JOB_NAME,
                state=MonetizationUsagePublishInfo.State.INITIATED,
                status=MonetizationUsagePublishInfo.Status.INPROGRESS,
                started_time=now,
                last_publish_time=now - timedelta(days=gap),
            )
            logger.info(
                "Created monetization usage publish info; last publish time seeded %s day(s) back",
                gap
            )
            return info, True
    except DatabaseError as exc:
        raise APIManagementError("Error while adding monetization usage publish info") from exc


def get_run_time_limit():
    """A RUNNING record older than this belongs to a worker that is gone."""
    return timedelta(seconds=getattr(settings, 'CELERY_TASK_TIME_LIMIT', 60 * 60))


def is_run_active(info):
    """True while a run holds the record and is still within the task time limit."""
    return info.is_running and info.started_time > _now() - get_run_time_limit()


def begin_publish_run(job_id, task_id='', redelivered=False):
    """
    Move the record to RUNNING/INPROGRESS under a row lock.

    Returns the record, or None when another live run holds it. A redelivered
    task, the task that already owns the record, or any task once the owning
    run has outlived the task time limit takes the record over.
    """
    with transaction.atomic():
        info = MonetizationUsagePublishInfo.objects.select_for_update().get(pk=job_id)
        owns_run = redelivered or (task_id and info.task_id == task_id)
        if is_run_active(info) and not owns_run:
            return None
        if info.is_running:
            logger.warning(
                "Taking over monetization usage publish run of task %s started at %s",
                info.task_id or 'unknown', info.started_time.isoformat()
            )
        info.state = MonetizationUsagePublishInfo.State.RUNNING
        info.status = MonetizationUsagePublishInfo.Status.INPROGRESS
        info.started_time = _now()
        info.task_id = task_id or ''
        info.save(update_fields=['state', 'status', 'started_time', 'task_id', 'updated_at'])
    return info


def finish_publish_run(info, accepted, published_until=None):
    """Return the record to IDLE with the outcome of the run."""
    info.state = MonetizationUsagePublishInfo.State.IDLE
    if accepted:
        info.status = MonetizationUsagePublishInfo.Status.ACCEPTED
        info.last_publish_time = published_until
    else:
        info.status = MonetizationUsagePublishInfo.Status.ERROR
    info.save(update_fields=['state', 'status', 'last_publish_time', 'updated_at'])
    return info
