# FILE: backend/apps/monetization/tests/test_services.py
from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from backend.apps.monetization import services
from backend.apps.monetization.models import MonetizationUsagePublishInfo
from backend.core.exceptions import APIManagementError, ErrorKind


class PublishTimeGapTests(TestCase):

    @override_settings(MONETIZATION_USAGE_PUBLISH_FROM_TIME_DAYS=None)
    def test_defaults_to_one_day(self):
        self.assertEqual(services.get_publish_time_gap_days(), services.DEFAULT_TIME_GAP_IN_DAYS)

    @override_settings(MONETIZATION_USAGE_PUBLISH_FROM_TIME_DAYS='7')
    def test_reads_configured_value(self):
        self.assertEqual(services.get_publish_time_gap_days(), 7)

    @override_settings(MONETIZATION_USAGE_PUBLISH_FROM_TIME_DAYS='a week')
    def test_invalid_value_is_internal_error(self):
        with self.assertRaises(APIManagementError) as ctx:
            services.get_publish_time_gap_days()
        self.assertIs(ctx.exception.kind, ErrorKind.INTERNAL)


class UsagePublishInfoTests(TestCase):

    def test_info_is_none_before_first_trigger(self):
        self.assertIsNone(services.get_usage_publish_info())

    def test_get_or_create_is_idempotent(self):
        info, created = services.get_or_create_usage_publish_info()
        again, created_again = services.get_or_create_usage_publish_info()

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(info.pk, again.pk)
        self.assertEqual(info.started_time - info.last_publish_time, timedelta(days=1))
        self.assertEqual(MonetizationUsagePublishInfo.objects.count(), 1)

    def test_begin_run_refuses_second_runner(self):
        services.get_or_create_usage_publish_info()

        first = services.begin_publish_run(MonetizationUsagePublishInfo.JOB_NAME)
        second = services.begin_publish_run(MonetizationUsagePublishInfo.JOB_NAME)

        self.assertEqual(first.state, MonetizationUsagePublishInfo.State.RUNNING)
        self.assertIsNone(second)

    def test_redelivered_run_takes_over(self):
        services.get_or_create_usage_publish_info()
        services.begin_publish_run(MonetizationUsagePublishInfo.JOB_NAME, task_id='first')

        info = services.begin_publish_run(
            MonetizationUsagePublishInfo.JOB_NAME, task_id='second', redelivered=True
        )

        self.assertEqual(info.task_id, 'second')
        self.assertEqual(info.state, MonetizationUsagePublishInfo.State.RUNNING)

    @override_settings(CELERY_TASK_TIME_LIMIT=60)
    def test_run_past_time_limit_is_not_active(self):
        info, _ = services.get_or_create_usage_publish_info()
        info.state = MonetizationUsagePublishInfo.State.RUNNING
        info.started_time = timezone.now() - timedelta(minutes=2)
        info.save()

        self.assertFalse(services.is_run_active(info))
        info.started_time = timezone.now()
        self.assertTrue(services.is_run_active(info))
