# FILE: tests/smoke/test_api_endpoints.py
from unittest.mock import patch

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import AdminFactory, PublisherFactory


class SmokeTests(APITestCase):
    def setUp(self):
        self.admin = AdminFactory()
        self.publisher = PublisherFactory()

    def test_schema(self):
        """The OpenAPI schema renders with every API view registered."""
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('schema'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_publish_status_reachable_by_admin(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('monetization:publish-usage-status'))
        # No run has happened yet
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(response.json()['error'])

    @patch('backend.apps.monetization.views.publish_monetization_usage')
    def test_publish_trigger_then_status(self, mock_task):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('monetization:publish-usage'))
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)

        response = self.client.get(reverse('monetization:publish-usage-status'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['state'], 'INITIATED')

    def test_gateway_policy_list_reachable_by_publisher(self):
        self.client.force_authenticate(user=self.publisher)
        response = self.client.get(reverse('gateway_policies:gateway-policy-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['count'], 0)

    def test_admin_endpoints_reject_publisher(self):
        self.client.force_authenticate(user=self.publisher)
        response = self.client.get(reverse('monetization:publish-usage-status'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_token_obtain(self):
        self.admin.set_password('testpass123')
        self.admin.save()
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': self.admin.email, 'password': 'testpass123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.json())
