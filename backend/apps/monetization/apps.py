from django.apps import AppConfig


class MonetizationConfig(AppConfig):
    """Admin-side monetization: usage publishing to the billing engine."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.apps.monetization'
    verbose_name = 'Monetization'
