# FILE: backend/apps/monetization/tests/test_tasks.py
from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.utils import timezone

from backend.apps.monetization import services
from backend.apps.monetization.models import MonetizationUsagePublishInfo
from backend.apps.monetization.publishers import UsagePublishError
from backend.apps.monetization.tasks import publish_monetization_usage


class PublishMonetizationUsageTaskTests(TestCase):

    def setUp(self):
        self.last_publish_time = timezone.now().replace(microsecond=0) - timedelta(days=1)
        self.info = MonetizationUsagePublishInfo.objects.create(
            id=MonetizationUsagePublishInfo.JOB_NAME,
            state=MonetizationUsagePublishInfo.State.INITIATED,
            status=MonetizationUsagePublishInfo.Status.INPROGRESS,
            started_time=self.last_publish_time,
            last_publish_time=self.last_publish_time,
        )

    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_successful_publish_advances_last_publish_time(self, mock_get_publisher):
        mock_get_publisher.return_value.publish_usage.return_value = True

        result = publish_monetization_usage.apply().get()

        self.assertEqual(result['status'], 'success')
        from_time, to_time = mock_get_publisher.return_value.publish_usage.call_args[0]
        self.assertEqual(from_time, self.last_publish_time)
        self.info.refresh_from_db()
        self.assertEqual(self.info.state, MonetizationUsagePublishInfo.State.IDLE)
        self.assertEqual(self.info.status, MonetizationUsagePublishInfo.Status.ACCEPTED)
        self.assertEqual(self.info.last_publish_time, to_time)

    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_publisher_failure_marks_error(self, mock_get_publisher):
        mock_get_publisher.return_value.publish_usage.side_effect = UsagePublishError("billing down")

        result = publish_monetization_usage.apply().get()

        self.assertEqual(result['status'], 'error')
        self.assertEqual(result['message'], 'billing down')
        self.info.refresh_from_db()
        self.assertEqual(self.info.state, MonetizationUsagePublishInfo.State.IDLE)
        self.assertEqual(self.info.status, MonetizationUsagePublishInfo.Status.ERROR)
        self.assertEqual(self.info.last_publish_time, self.last_publish_time)

    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_rejected_usage_marks_error(self, mock_get_publisher):
        mock_get_publisher.return_value.publish_usage.return_value = False

        result = publish_monetization_usage.apply().get()

        self.assertEqual(result['status'], 'error')
        self.info.refresh_from_db()
        self.assertEqual(self.info.status, MonetizationUsagePublishInfo.Status.ERROR)

    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_skips_when_another_live_run_holds_the_record(self, mock_get_publisher):
        self.info.state = MonetizationUsagePublishInfo.State.RUNNING
        self.info.started_time = timezone.now()
        self.info.task_id = 'other-task'
        self.info.save()

        result = publish_monetization_usage.apply().get()

        self.assertEqual(result['status'], 'skipped')
        mock_get_publisher.assert_not_called()

    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_redelivered_task_resumes_run_left_by_killed_worker(self, mock_get_publisher):
        mock_get_publisher.return_value.publish_usage.return_value = True
        # The worker died after marking the record RUNNING
        services.begin_publish_run(MonetizationUsagePublishInfo.JOB_NAME, task_id='publish-1')

        result = publish_monetization_usage.apply(task_id='publish-1').get()

        self.assertEqual(result['status'], 'success')
        self.info.refresh_from_db()
        self.assertEqual(self.info.state, MonetizationUsagePublishInfo.State.IDLE)
        self.assertEqual(self.info.status, MonetizationUsagePublishInfo.Status.ACCEPTED)

    @override_settings(CELERY_TASK_TIME_LIMIT=60)
    @patch('backend.apps.monetization.tasks.get_usage_publisher')
    def test_run_older_than_time_limit_is_taken_over(self, mock_get_publisher):
        mock_get_publisher.return_value.publish_usage.return_value = True
        self.info.state = MonetizationUsagePublishInfo.State.RUNNING
        self.info.started_time = timezone.now() - timedelta(minutes=5)
        self.info.task_id = 'lost-task'
        self.info.save()

        result = publish_monetization_usage.apply().get()

        self.assertEqual(result['status'], 'success')
        self.info.refresh_from_db()
        self.assertEqual(self.info.state, MonetizationUsagePublishInfo.State.IDLE)
        self.assertNotEqual(self.info.task_id, 'lost-task')
