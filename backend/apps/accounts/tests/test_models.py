# FILE: backend/apps/accounts/tests/test_models.py
from django.test import RequestFactory, TestCase, override_settings

from backend.apps.accounts.models import User
from backend.apps.accounts.permissions import IsAdmin, get_logged_in_user_tenant_domain


class UserModelTests(TestCase):

    @override_settings(DEFAULT_TENANT_DOMAIN='wso2.com')
    def test_new_user_gets_default_tenant(self):
        user = User.objects.create_user(email='Someone@Example.com', password='testpass123')

        self.assertEqual(user.tenant_domain, 'wso2.com')
        self.assertEqual(user.email, 'Someone@example.com')
        self.assertEqual(user.role, User.Role.USER)

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='testpass123')

    def test_superuser_is_super_admin(self):
        user = User.objects.create_superuser(email='root@example.com', password='testpass123')

        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_super_admin)
        self.assertTrue(user.is_admin)
        self.assertTrue(user.can_publish)

    def test_roles(self):
        publisher = User(email='pub@example.com', role=User.Role.PUBLISHER)
        plain = User(email='user@example.com', role=User.Role.USER)

        self.assertTrue(publisher.can_publish)
        self.assertFalse(publisher.is_admin)
        self.assertFalse(plain.can_publish)


class PermissionTests(TestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def request_for(self, user):
        request = self.factory.get('/')
        request.user = user
        return request

    def test_is_admin_permission(self):
        admin = User(email='admin@example.com', role=User.Role.ADMIN)
        publisher = User(email='pub@example.com', role=User.Role.PUBLISHER)

        self.assertTrue(IsAdmin().has_permission(self.request_for(admin), None))
        self.assertFalse(IsAdmin().has_permission(self.request_for(publisher), None))

    def test_tenant_domain_comes_from_user(self):
        user = User(email='t@example.com', tenant_domain='wso2.com')

        self.assertEqual(get_logged_in_user_tenant_domain(self.request_for(user)), 'wso2.com')
