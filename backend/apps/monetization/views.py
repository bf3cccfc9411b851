# FILE: backend/apps/monetization/views.py
"""
Admin API for monetization usage publishing.
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.apps.accounts.permissions import IsAdmin
from backend.core.exceptions import (
    APIManagementError,
    handle_internal_server_error,
    handle_resource_not_found,
)

from . import services
from .serializers import MonetizationUsagePublishInfoSerializer, PublishStatusSerializer
from .tasks import publish_monetization_usage

logger = logging.getLogger(__name__)


class MonetizationPublishUsageView(APIView):
    """
    Run the monetization usage publish job.
    Returns 202 when the job was handed to the worker pool, 500 when a run is
    already in progress.
    """
    permission_classes = [IsAdmin]

    @extend_schema(request=None, responses={202: PublishStatusSerializer, 500: PublishStatusSerializer})
    def post(self, request):
        try:
            info, _ = services.get_or_create_usage_publish_info()
        except APIManagementError as e:
            handle_internal_server_error(
                "Could not add or derive monetization usage publish info", e, logger
            )

        if not services.is_run_active(info):
            result = publish_monetization_usage.delay(info.pk)
            logger.info(f"Monetization usage publish job submitted (task {result.id})")
            payload = {
                'status': 'Request Accepted',
                'message': 'Server is running the usage publisher',
            }
            return Response(PublishStatusSerializer(payload).data, status=status.HTTP_202_ACCEPTED)

        logger.warning("Monetization usage publish requested while a job is already running")
        payload = {
            'status': 'Server could not accept the request',
            'message': 'A job is already running',
        }
        return Response(
            PublishStatusSerializer(payload).data,
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class MonetizationPublishUsageStatusView(APIView):
    """
    Retrieve the status of the last monetization usage publishing job.
    """
    permission_classes = [IsAdmin]

    @extend_schema(responses={200: MonetizationUsagePublishInfoSerializer})
    def get(self, request):
        try:
            info = services.get_usage_publish_info()
        except APIManagementError as e:
            handle_internal_server_error("Could not derive monetization usage publish info", e, logger)

        if info is None:
            handle_resource_not_found("Monetization usage publish info not found", logger)

        serializer = MonetizationUsagePublishInfoSerializer(info)
        return Response(serializer.data, status=status.HTTP_200_OK)
