# FILE: backend/apps/monetization/models.py
from django.db import models
from django.utils.translation import gettext_lazy as _


class MonetizationUsagePublishInfo(models.Model):
    """
    Bookkeeping for the usage publishing job.
    A single row keyed by the job name; the job advances ``last_publish_time``
    every time the billing engine accepts a batch of usage records.
    """
    JOB_NAME = "USAGE_PUBLISHER_JOB"

    class State(models.TextChoices):
        INITIATED = "INITIATED", _("Initiated")
        RUNNING = "RUNNING", _("Running")
        IDLE = "IDLE", _("Idle")

    class Status(models.TextChoices):
        INPROGRESS = "INPROGRESS", _("In progress")
        ACCEPTED = "ACCEPTED", _("Accepted")
        ERROR = "ERROR", _("Error")

    id = models.CharField(primary_key=True, max_length=100, default=JOB_NAME, editable=False)
    state = models.CharField(max_length=20, choices=State.choices, default=State.INITIATED)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.INPROGRESS)
    started_time = models.DateTimeField(
        help_text=_("When the current or most recent publishing run started")
    )
    last_publish_time = models.DateTimeField(
        help_text=_("Usage up to this instant has been published")
    )
    task_id = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Celery task that owns the current or most recent run")
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("monetization usage publish info")
        verbose_name_plural = _("monetization usage publish info")

    def __str__(self):
        return f"{self.id}: {self.state}/{self.status}"

    @property
    def is_running(self):
        return self.state == self.State.RUNNING
