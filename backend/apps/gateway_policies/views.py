# FILE: backend/apps/gateway_policies/views.py
"""
Publisher API for gateway (global) policy mappings.

Every handler resolves the caller's tenant and provider, delegates, maps the
result to a DTO and turns provider errors into HTTP responses by error kind.
"""
import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.apps.accounts.permissions import get_logged_in_user_tenant_domain
from backend.core.exceptions import (
    APIManagementError,
    handle_bad_request,
    handle_resource_not_found,
    raise_for_management_error,
)
from backend.core.pagination import OffsetLimitPagination

from .serializers import (
    GatewayPolicyDeploymentSerializer,
    GatewayPolicyMappingInfoSerializer,
    GatewayPolicyMappingsSerializer,
    GlobalPoliciesField,
    deployment_map_from_dto,
    mapping_to_dto,
    operation_policies_from_dto,
)
from .services import get_logged_in_user_provider

logger = logging.getLogger(__name__)


class GatewayPolicyBaseView(APIView):
    permission_classes = [IsAuthenticated]

    def get_context(self, request):
        """(tenant_domain, provider) for the authenticated caller."""
        return get_logged_in_user_tenant_domain(request), get_logged_in_user_provider(request)


class GatewayPolicyListCreateView(GatewayPolicyBaseView):
    pagination_class = OffsetLimitPagination

    @extend_schema(
        parameters=[
            OpenApiParameter('limit', int, description='Maximum number of mappings returned; all when omitted'),
            OpenApiParameter('offset', int, description='Starting index'),
        ],
        responses={200: GatewayPolicyMappingInfoSerializer(many=True)},
    )
    def get(self, request):
        """Retrieve all the gateway policy mappings of the caller's tenant."""
        try:
            tenant_domain, provider = self.get_context(request)
            mappings = provider.get_all_gateway_policy_mappings(tenant_domain)
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while retrieving the gateway policy mappings", logger,
                unauthorized_message="User is not authorized to retrieve policy mappings"
            )

        paginator = self.pagination_class()
        page = paginator.paginate_queryset(mappings, request, view=self)
        serializer = GatewayPolicyMappingInfoSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @extend_schema(request=GatewayPolicyMappingsSerializer, responses={200: GatewayPolicyMappingsSerializer})
    def post(self, request):
        """Add a gateway policy mapping."""
        if not request.data:
            handle_bad_request("Gateway policy mapping list is empty", logger)
        serializer = GatewayPolicyMappingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = serializer.validated_data

        try:
            tenant_domain, provider = self.get_context(request)
            mapping_id = provider.apply_gateway_global_policies(
                operation_policies_from_dto(dto['policyMapping']),
                dto.get('description', ''),
                dto['displayName'],
                tenant_domain,
            )
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while adding gateway policy mapping", logger,
                unauthorized_message="User is not authorized to apply policies"
            )

        return Response(
            GatewayPolicyMappingsSerializer({**dto, 'id': mapping_id}).data,
            status=status.HTTP_200_OK
        )


class GatewayPolicyDetailView(GatewayPolicyBaseView):

    @extend_schema(responses={200: GatewayPolicyMappingsSerializer})
    def get(self, request, mapping_id):
        """Retrieve gateway policy mapping content by policy mapping id."""
        try:
            tenant_domain, provider = self.get_context(request)
            mapping = provider.get_gateway_policy_mapping_data_by_policy_mapping_id(
                str(mapping_id), tenant_domain
            )
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while retrieving the gateway policy mapping", logger,
                unauthorized_message="User is not authorized to retrieve policy mapping"
            )

        dto = mapping_to_dto(mapping, mapping.policy_entries)
        return Response(GatewayPolicyMappingsSerializer(dto).data, status=status.HTTP_200_OK)

    @extend_schema(request=GatewayPolicyMappingsSerializer, responses={200: GatewayPolicyMappingsSerializer})
    def put(self, request, mapping_id):
        """Update gateway policy mapping."""
        if not request.data:
            handle_bad_request("Gateway policy mapping list is empty", logger)
        serializer = GatewayPolicyMappingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = serializer.validated_data

        try:
            tenant_domain, provider = self.get_context(request)
            updated_id = provider.update_gateway_global_policies(
                operation_policies_from_dto(dto['policyMapping']),
                dto.get('description', ''),
                dto['displayName'],
                tenant_domain,
                str(mapping_id),
            )
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while applying gateway policy", logger,
                unauthorized_message="User is not authorized to apply policies"
            )

        return Response(
            GatewayPolicyMappingsSerializer({**dto, 'id': updated_id}).data,
            status=status.HTTP_200_OK
        )

    @extend_schema(responses={200: None})
    def delete(self, request, mapping_id):
        """Delete gateway policy mapping."""
        mapping_id = str(mapping_id)
        try:
            tenant_domain, provider = self.get_context(request)
            policies = provider.get_gateway_policy_data_list_by_policy_id(mapping_id, tenant_domain)
            if policies:
                provider.delete_gateway_policy_mapping_by_policy_mapping_id(mapping_id, tenant_domain)
                return Response(status=status.HTTP_200_OK)
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while deleting the gateway policy mapping", logger,
                unauthorized_message="User is not authorized to delete policy mapping"
            )

        handle_resource_not_found(
            f"Gateway policy mapping not found for the given Mapping ID : {mapping_id}", logger
        )


class GatewayPolicyDeployView(GatewayPolicyBaseView):

    @extend_schema(
        request=GatewayPolicyDeploymentSerializer(many=True),
        responses={200: GatewayPolicyDeploymentSerializer(many=True)},
    )
    def post(self, request, mapping_id):
        """Deploy (or undeploy) a gateway policy mapping to gateway environments."""
        mapping_id = str(mapping_id)
        if not request.data:
            handle_bad_request("Gateway policy deployment list is empty", logger)
        serializer = GatewayPolicyDeploymentSerializer(data=request.data, many=True)
        serializer.is_valid(raise_exception=True)
        deployments = serializer.validated_data

        try:
            tenant_domain, provider = self.get_context(request)
            provider.engage_gateway_global_policies(
                deployment_map_from_dto(deployments), tenant_domain, mapping_id
            )
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while deploying gateway policy", logger,
                unauthorized_message="User is not authorized to apply policies"
            )

        result = [{**deployment, 'mappingUUID': mapping_id} for deployment in deployments]
        return Response(
            GatewayPolicyDeploymentSerializer(result, many=True).data,
            status=status.HTTP_200_OK
        )


class GlobalPolicyView(GatewayPolicyBaseView):

    @extend_schema(request=OpenApiTypes.OBJECT, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        """
        Add global policies given as ``{name: {request, response, fault}}``.
        Each entry becomes a mapping named after its key; returns ``{name: id}``.
        """
        if not request.data:
            handle_bad_request("Global policy list is empty", logger)
        policies = GlobalPoliciesField().run_validation(request.data)

        try:
            tenant_domain, provider = self.get_context(request)
            created = provider.apply_global_policies(
                {name: operation_policies_from_dto(flows) for name, flows in policies.items()},
                tenant_domain,
            )
        except APIManagementError as e:
            raise_for_management_error(
                e, "Error while adding global policies", logger,
                unauthorized_message="User is not authorized to apply policies"
            )

        return Response(created, status=status.HTTP_200_OK)
