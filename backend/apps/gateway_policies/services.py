# FILE: /backend/apps/gateway_policies/services.py
"""
Provider layer for gateway policy mappings.

A provider is bound to the calling user; every operation takes the tenant
domain explicitly and only ever sees rows of that tenant. Failures are raised
as ``APIManagementError`` with a kind the REST layer maps to a status code.

Operation policies are passed around as plain dicts::

    {'direction': 'request', 'order': 1, 'policy_name': 'addHeader',
     'policy_version': 'v1', 'policy_id': None, 'parameters': {...}}
"""
import logging

from django.db import DatabaseError, transaction

from backend.core.exceptions import APIManagementError, ErrorKind

from .models import (
    CommonOperationPolicy,
    GatewayPolicyDeployment,
    GatewayPolicyMapping,
    GatewayPolicyMappingEntry,
)

logger = logging.getLogger(__name__)


def get_logged_in_user_provider(request):
    """Provider acting on behalf of the authenticated caller."""
    return GatewayPolicyProvider(request.user)


class GatewayPolicyProvider:

    def __init__(self, user):
        self.user = user
        self.username = getattr(user, 'email', str(user))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _check_authorized(self, action):
        if not getattr(self.user, 'can_publish', False):
            raise APIManagementError(
                f"User {self.username} is not authorized to {action}",
                ErrorKind.UNAUTHORIZED
            )

    def _get_mapping(self, mapping_id, tenant_domain):
        mapping = GatewayPolicyMapping.objects.filter(
            pk=mapping_id, tenant_domain=tenant_domain
        ).first()
        if mapping is None:
            raise APIManagementError(
                f"Gateway policy mapping not found for the given Mapping ID : {mapping_id}",
                ErrorKind.NOT_FOUND
            )
        return mapping

    def _resolve_policy(self, operation_policy, tenant_domain):
        """Find the common policy an operation policy refers to and check its flow."""
        policies = CommonOperationPolicy.objects.filter(tenant_domain=tenant_domain)
        name = operation_policy.get('policy_name')
        version = operation_policy.get('policy_version')
        if operation_policy.get('policy_id'):
            policy = policies.filter(pk=operation_policy['policy_id']).first()
        else:
            policy = policies.filter(name=name, version=version).first()
        if policy is None:
            raise APIManagementError(
                f"Operation policy {name}_{version} was not found",
                ErrorKind.BAD_REQUEST
            )

        direction = operation_policy['direction']
        if not policy.is_applicable_to(direction):
            raise APIManagementError(
                f"Operation policy {policy} cannot be applied to the {direction} flow",
                ErrorKind.BAD_REQUEST
            )
        return policy

    def _write_entries(self, mapping, operation_policies, tenant_domain):
        if not operation_policies:
            raise APIManagementError(
                "A gateway policy mapping must contain at least one policy",
                ErrorKind.BAD_REQUEST
            )
        entries = [
            GatewayPolicyMappingEntry(
                mapping=mapping,
                policy=self._resolve_policy(operation_policy, tenant_domain),
                direction=operation_policy['direction'],
                order=operation_policy.get('order', 1),
                parameters=operation_policy.get('parameters') or {},
            )
            for operation_policy in operation_policies
        ]
        GatewayPolicyMappingEntry.objects.bulk_create(entries)

    # ------------------------------------------------------------------
    # Mapping lifecycle
    # ------------------------------------------------------------------
    def apply_gateway_global_policies(self, operation_policies, description, display_name, tenant_domain):
        """Create a mapping and return its id."""
        self._check_authorized("apply policies")
        try:
            with transaction.atomic():
                mapping = GatewayPolicyMapping.objects.create(
                    tenant_domain=tenant_domain,
                    display_name=display_name,
                    description=description or '',
                )
                self._write_entries(mapping, operation_policies, tenant_domain)
        except DatabaseError as exc:
            raise APIManagementError("Error while adding gateway policy mapping") from exc

        logger.info(f"Gateway policy mapping {mapping.id} added by {self.username} in {tenant_domain}")
        return str(mapping.id)

    def apply_global_policies(self, policies_by_name, tenant_domain):
        """
        Create one mapping per named flow set.
        Returns ``{name: mapping_id}``; either all mappings are created or none.
        """
        self._check_authorized("apply policies")
        created = {}
        try:
            with transaction.atomic():
                for name, operation_policies in policies_by_name.items():
                    mapping = GatewayPolicyMapping.objects.create(
                        tenant_domain=tenant_domain,
                        display_name=name,
                    )
                    self._write_entries(mapping, operation_policies, tenant_domain)
                    created[name] = str(mapping.id)
        except DatabaseError as exc:
            raise APIManagementError("Error while adding global policies") from exc

        logger.info(f"{len(created)} global policy mapping(s) added by {self.username} in {tenant_domain}")
        return created

    def update_gateway_global_policies(self, operation_policies, description, display_name,
                                       tenant_domain, mapping_id):
        """Replace the content of an existing mapping and return its id."""
        self._check_authorized("apply policies")
        try:
            with transaction.atomic():
                mapping = self._get_mapping(mapping_id, tenant_domain)
                mapping.display_name = display_name
                mapping.description = description or ''
                mapping.save(update_fields=['display_name', 'description', 'updated_at'])
                mapping.policies.all().delete()
                self._write_entries(mapping, operation_policies, tenant_domain)
        except DatabaseError as exc:
            raise APIManagementError("Error while updating gateway policy mapping") from exc

        logger.info(f"Gateway policy mapping {mapping.id} updated by {self.username}")
        return str(mapping.id)

    def get_gateway_policy_data_list_by_policy_id(self, mapping_id, tenant_domain):
        """Policies held by a mapping; empty when the mapping does not exist."""
        self._check_authorized("view policy mappings")
        try:
            return list(
                GatewayPolicyMappingEntry.objects.filter(
                    mapping_id=mapping_id, mapping__tenant_domain=tenant_domain
                ).select_related('policy')
            )
        except DatabaseError as exc:
            raise APIManagementError("Error while retrieving gateway policy mapping content") from exc

    def delete_gateway_policy_mapping_by_policy_mapping_id(self, mapping_id, tenant_domain):
        self._check_authorized("delete policy mappings")
        try:
            with transaction.atomic():
                mapping = self._get_mapping(mapping_id, tenant_domain)
                labels = mapping.applied_gateway_labels
                if labels:
                    raise APIManagementError(
                        f"Cannot delete gateway policy mapping {mapping_id} while it is deployed to "
                        f"gateway(s): {', '.join(labels)}",
                        ErrorKind.BAD_REQUEST
                    )
                mapping.delete()
        except DatabaseError as exc:
            raise APIManagementError("Error while deleting gateway policy mapping") from exc

        logger.info(f"Gateway policy mapping {mapping_id} deleted by {self.username}")

    def get_all_gateway_policy_mappings(self, tenant_domain):
        self._check_authorized("view policy mappings")
        try:
            return list(
                GatewayPolicyMapping.objects.filter(tenant_domain=tenant_domain)
                .prefetch_related('deployments')
            )
        except DatabaseError as exc:
            raise APIManagementError("Error while retrieving gateway policy mappings") from exc

    def get_gateway_policy_mapping_data_by_policy_mapping_id(self, mapping_id, tenant_domain):
        self._check_authorized("view policy mappings")
        try:
            mapping = self._get_mapping(mapping_id, tenant_domain)
            # Evaluate here so callers never hit the database lazily
            mapping.policy_entries = list(mapping.policies.select_related('policy'))
        except DatabaseError as exc:
            raise APIManagementError("Error while retrieving gateway policy mapping") from exc
        return mapping

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------
    def engage_gateway_global_policies(self, deployment_map, tenant_domain, mapping_id):
        """
        Deploy or undeploy a mapping.

        ``deployment_map`` is ``{True: [gateway labels to deploy on],
        False: [gateway labels to undeploy from]}``. A gateway already carrying a
        different mapping is rejected before anything changes.
        """
        self._check_authorized("deploy policies")
        to_deploy = deployment_map.get(True, [])
        to_undeploy = deployment_map.get(False, [])
        try:
            with transaction.atomic():
                mapping = self._get_mapping(mapping_id, tenant_domain)
                conflict = GatewayPolicyDeployment.objects.select_for_update().filter(
                    tenant_domain=tenant_domain, gateway_label__in=to_deploy
                ).exclude(mapping=mapping).first()
                if conflict is not None:
                    raise APIManagementError(
                        f"Gateway {conflict.gateway_label} already has the policy mapping "
                        f"{conflict.mapping_id} deployed",
                        ErrorKind.BAD_REQUEST
                    )

                GatewayPolicyDeployment.objects.filter(
                    mapping=mapping, gateway_label__in=to_undeploy
                ).delete()
                for label in to_deploy:
                    GatewayPolicyDeployment.objects.get_or_create(
                        tenant_domain=tenant_domain,
                        gateway_label=label,
                        defaults={'mapping': mapping},
                    )
        except DatabaseError as exc:
            raise APIManagementError("Error while deploying gateway policy mapping") from exc

        logger.info(
            f"Gateway policy mapping {mapping_id} deployed to {to_deploy} and undeployed from "
            f"{to_undeploy} by {self.username}"
        )
