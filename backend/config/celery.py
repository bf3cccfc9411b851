# FILE: /backend/config/celery.py
import os
from celery import Celery
from kombu import Queue
from django.conf import settings

# Deployments override this through the environment
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings.production')

# Create Celery app instance
app = Celery('api_management')

# Configure Celery using Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks from all registered Django apps
app.autodiscover_tasks(lambda: settings.INSTALLED_APPS)

# Explicitly define queues for routing
app.conf.task_queues = (
    Queue('default'),      # Fallback queue for unmatched tasks
    Queue('monetization'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

# Enforce JSON serialization
app.conf.task_serializer = 'json'
app.conf.result_serializer = 'json'
app.conf.accept_content = ['json']

app.conf.task_routes = {
    'monetization.tasks.*': {
        'queue': 'monetization'
    },
    # All other tasks fall back to default queue (handled by task_default_queue)
}

app.conf.result_expires = 60 * 60 * 24

app.conf.worker_prefetch_multiplier = 1
app.conf.worker_max_tasks_per_child = 1000

app.conf.task_acks_late = True
app.conf.task_reject_on_worker_lost = True

app.conf.broker_transport_options = {
    'visibility_timeout': 2 * 60 * 60,
    'socket_connect_timeout': 5,
    'retry_on_timeout': True,
}

