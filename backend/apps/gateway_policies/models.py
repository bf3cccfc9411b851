# FILE: backend/apps/gateway_policies/models.py
"""
Gateway (global) policy mappings.

A mapping is a tenant-wide, ordered set of operation policies for the request,
response and fault flows. It is attached to gateway environments through
deployments; a gateway label carries at most one mapping per tenant.
"""
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class PolicyFlow(models.TextChoices):
    REQUEST = 'request', _('Request')
    RESPONSE = 'response', _('Response')
    FAULT = 'fault', _('Fault')


def default_applicable_flows():
    return [PolicyFlow.REQUEST.value, PolicyFlow.RESPONSE.value, PolicyFlow.FAULT.value]


class CommonOperationPolicy(models.Model):
    """
    An operation policy definition shared by the whole tenant.
    Mappings reference these by id, or by name and version.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_domain = models.CharField(max_length=255, db_index=True)
    name = models.CharField(max_length=255)
    version = models.CharField(max_length=30, default='v1')
    display_name = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    applicable_flows = models.JSONField(
        default=default_applicable_flows,
        help_text=_("Flows this policy may be attached to")
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("common operation policy")
        verbose_name_plural = _("common operation policies")
        ordering = ['name', 'version']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_domain', 'name', 'version'],
                name='unique_common_policy_per_tenant'
            )
        ]

    def __str__(self):
        return f"{self.name}_{self.version}"

    def is_applicable_to(self, flow):
        return flow in (self.applicable_flows or [])


class GatewayPolicyMapping(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_domain = models.CharField(max_length=255, db_index=True)
    display_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("gateway policy mapping")
        verbose_name_plural = _("gateway policy mappings")
        ordering = ['created_at', 'id']

    def __str__(self):
        return self.display_name

    @property
    def applied_gateway_labels(self):
        return [deployment.gateway_label for deployment in self.deployments.all()]


class GatewayPolicyMappingEntry(models.Model):
    """One operation policy placed in one flow of a mapping."""
    mapping = models.ForeignKey(
        GatewayPolicyMapping,
        on_delete=models.CASCADE,
        related_name='policies'
    )
    policy = models.ForeignKey(
        CommonOperationPolicy,
        on_delete=models.PROTECT,
        related_name='mapping_entries'
    )
    direction = models.CharField(max_length=10, choices=PolicyFlow.choices)
    order = models.PositiveIntegerField(default=1)
    parameters = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = _("gateway policy mapping entry")
        verbose_name_plural = _("gateway policy mapping entries")
        ordering = ['direction', 'order']

    def __str__(self):
        return f"{self.mapping_id}:{self.direction}:{self.order} {self.policy}"


class GatewayPolicyDeployment(models.Model):
    """A mapping engaged on a gateway environment."""
    mapping = models.ForeignKey(
        GatewayPolicyMapping,
        on_delete=models.PROTECT,
        related_name='deployments'
    )
    tenant_domain = models.CharField(max_length=255)
    gateway_label = models.CharField(max_length=255)
    deployed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("gateway policy deployment")
        verbose_name_plural = _("gateway policy deployments")
        ordering = ['gateway_label']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_domain', 'gateway_label'],
                name='unique_mapping_per_gateway'
            )
        ]

    def __str__(self):
        return f"{self.mapping_id} on {self.gateway_label}"
