from django.apps import AppConfig


class ServiceCatalogConfig(AppConfig):
    """Service catalog helpers; holds no models."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.apps.service_catalog'
    verbose_name = 'Service Catalog'
