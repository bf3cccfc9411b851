# FILE: backend/apps/monetization/publishers.py
"""
Pluggable usage publishers.

The billing engine integration lives outside this service. A deployment points
``MONETIZATION_USAGE_PUBLISHER`` at a subclass of ``UsagePublisher`` that pushes
usage for a time window to its billing provider.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class UsagePublishError(Exception):
    """Raised by a publisher when the billing engine rejects or cannot take the usage."""


class UsagePublisher:
    """Base class for usage publishers."""

    def publish_usage(self, from_time, to_time):
        """
        Publish usage recorded in ``[from_time, to_time)``.
        Returns True when the billing engine accepted the records.
        """
        raise NotImplementedError


class LoggingUsagePublisher(UsagePublisher):
    """Default publisher: records the window in the log and accepts it."""

    def publish_usage(self, from_time, to_time):
        logger.info(
            "Publishing monetization usage from %s to %s",
            from_time.isoformat(), to_time.isoformat()
        )
        return True


def get_usage_publisher():
    publisher_class = import_string(settings.MONETIZATION_USAGE_PUBLISHER)
    return publisher_class()
