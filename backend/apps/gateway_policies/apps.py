from django.apps import AppConfig


class GatewayPoliciesConfig(AppConfig):
    """Publisher-side management of tenant-wide gateway policy mappings."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.apps.gateway_policies'
    verbose_name = 'Gateway Policies'
