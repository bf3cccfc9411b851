# FILE: backend/apps/gateway_policies/serializers.py
"""
Transport DTOs for the gateway policy API, plus the helpers that map them to
and from the provider's domain values.
"""
from rest_framework import serializers

from .models import GatewayPolicyMapping, PolicyFlow


class OperationPolicySerializer(serializers.Serializer):
    policyName = serializers.CharField(max_length=255)
    policyVersion = serializers.CharField(max_length=30, default='v1')
    policyId = serializers.UUIDField(required=False, allow_null=True)
    parameters = serializers.DictField(default=dict)


class APIOperationPoliciesSerializer(serializers.Serializer):
    """Operation policies grouped by flow."""
    request = OperationPolicySerializer(many=True, required=False, default=list)
    response = OperationPolicySerializer(many=True, required=False, default=list)
    fault = OperationPolicySerializer(many=True, required=False, default=list)


class GatewayPolicyMappingsSerializer(serializers.Serializer):
    """Full content of a gateway policy mapping."""
    id = serializers.CharField(read_only=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    displayName = serializers.CharField(max_length=255)
    policyMapping = APIOperationPoliciesSerializer()


class GatewayPolicyMappingInfoSerializer(serializers.ModelSerializer):
    """Summary row of the mapping list."""
    id = serializers.CharField(read_only=True)
    displayName = serializers.CharField(source='display_name', read_only=True)
    appliedGatewayLabels = serializers.ListField(
        source='applied_gateway_labels', child=serializers.CharField(), read_only=True
    )

    class Meta:
        model = GatewayPolicyMapping
        fields = ['id', 'description', 'displayName', 'appliedGatewayLabels']
        read_only_fields = fields


class GatewayPolicyDeploymentSerializer(serializers.Serializer):
    mappingUUID = serializers.CharField(read_only=True)
    gatewayLabel = serializers.CharField(max_length=255)
    gatewayDeployment = serializers.BooleanField()


class GlobalPoliciesField(serializers.DictField):
    """``{name: {request: [...], response: [...], fault: [...]}}``"""

    def __init__(self, **kwargs):
        kwargs.setdefault('child', APIOperationPoliciesSerializer())
        kwargs.setdefault('allow_empty', False)
        super().__init__(**kwargs)


# ----------------------------------------------------------------------
# DTO <-> domain mapping
# ----------------------------------------------------------------------
def operation_policies_from_dto(policy_mapping):
    """Flatten the per-flow DTO lists into provider operation policies, keeping order per flow."""
    operation_policies = []
    for flow in PolicyFlow.values:
        for position, dto in enumerate(policy_mapping.get(flow) or [], start=1):
            operation_policies.append({
                'direction': flow,
                'order': position,
                'policy_name': dto['policyName'],
                'policy_version': dto.get('policyVersion', 'v1'),
                'policy_id': dto.get('policyId'),
                'parameters': dto.get('parameters') or {},
            })
    return operation_policies


def operation_policy_to_dto(entry):
    return {
        'policyName': entry.policy.name,
        'policyVersion': entry.policy.version,
        'policyId': entry.policy.id,
        'parameters': entry.parameters,
    }


def mapping_to_dto(mapping, entries):
    """Build the mapping DTO; ``entries`` are the mapping's policy entries."""
    policy_mapping = {flow: [] for flow in PolicyFlow.values}
    for entry in sorted(entries, key=lambda e: (e.direction, e.order)):
        policy_mapping[entry.direction].append(operation_policy_to_dto(entry))
    return {
        'id': str(mapping.id),
        'description': mapping.description,
        'displayName': mapping.display_name,
        'policyMapping': policy_mapping,
    }


def deployment_map_from_dto(deployments):
    """Split deployment DTOs into ``{True: [labels to deploy], False: [labels to undeploy]}``."""
    deployment_map = {True: [], False: []}
    for dto in deployments:
        deployment_map[dto['gatewayDeployment']].append(dto['gatewayLabel'])
    return deployment_map
