# FILE: tests/test_settings.py
import importlib
import os
from unittest.mock import patch

from django.test import SimpleTestCase

from backend.config.settings import base, testing


class TestingSettingsTests(SimpleTestCase):

    def tearDown(self):
        # Restore module state computed from the real environment
        importlib.reload(base)
        importlib.reload(testing)

    def test_loads_with_empty_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            importlib.reload(testing)
            importlib.reload(base)
            settings_module = importlib.reload(testing)

        self.assertEqual(settings_module.DATABASES["default"]["ENGINE"], "django.db.backends.sqlite3")
        self.assertTrue(settings_module.CELERY_TASK_ALWAYS_EAGER)
        self.assertFalse(settings_module.DEBUG)
