"""
Custom exceptions and DRF exception handler for the API management REST layer.
"""
import enum

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF.
    Standardizes all API error responses into a consistent format.
    """
    response = exception_handler(exc, context)

    if response is not None:
        # response.data may be a dict, list, or string; we preserve it in 'details'
        if isinstance(response.data, dict) and 'detail' in response.data:
            message = response.data['detail']
        elif isinstance(response.data, dict):
            message = 'Invalid request.'
        else:
            message = response.data

        response.data = {
            'error': True,
            'code': response.status_code,
            'message': message,
            'details': response.data,
        }
    elif isinstance(exc, APIManagementError):
        # A business error that escaped a view without being translated
        response = Response({
            'error': True,
            'code': exc.kind.status_code,
            'message': exc.message,
            'details': exc.kind.name,
        }, status=exc.kind.status_code)
    else:
        response = Response({
            'error': True,
            'code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'message': 'Internal server error',
            'details': str(exc),
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response


class ErrorKind(enum.Enum):
    """Category of a business-layer failure; decides the HTTP status it maps to."""

    BAD_REQUEST = status.HTTP_400_BAD_REQUEST
    UNAUTHORIZED = status.HTTP_403_FORBIDDEN
    NOT_FOUND = status.HTTP_404_NOT_FOUND
    INTERNAL = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def status_code(self):
        return self.value


class APIManagementError(Exception):
    """
    Raised by the provider/admin business layer.
    Carries an explicit ErrorKind so controllers never inspect the message text.
    """

    def __init__(self, message, kind=ErrorKind.INTERNAL):
        super().__init__(message)
        self.message = message
        self.kind = kind

    @property
    def is_authorization_failure(self):
        return self.kind is ErrorKind.UNAUTHORIZED

    def __repr__(self):
        return f"APIManagementError({self.message!r}, kind={self.kind.name})"


class BadRequest(APIException):
    """HTTP 400 carrying a plain message."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request.'
    default_code = 'bad_request'


class InternalServerError(APIException):
    """HTTP 500 carrying the controller's error message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error.'
    default_code = 'internal_error'


def raise_for_management_error(exc, error_message, logger, unauthorized_message=None):
    """
    Translate an APIManagementError into the matching DRF exception.

    ``error_message`` is used for internal failures; ``unauthorized_message``
    (when given) replaces it for authorization failures. Always logs, always raises.
    """
    kind = exc.kind
    if kind is ErrorKind.UNAUTHORIZED:
        message = unauthorized_message or error_message
        logger.warning("%s: %s", message.strip(), exc.message)
        raise PermissionDenied(message.strip()) from exc
    if kind is ErrorKind.NOT_FOUND:
        logger.info("%s", exc.message)
        raise NotFound(exc.message) from exc
    if kind is ErrorKind.BAD_REQUEST:
        logger.info("%s", exc.message)
        raise BadRequest(exc.message) from exc

    logger.error("%s", error_message.strip(), exc_info=exc)
    raise InternalServerError(error_message.strip()) from exc


def handle_bad_request(message, logger):
    """Log and raise an HTTP 400."""
    logger.info(message)
    raise BadRequest(message)


def handle_resource_not_found(message, logger):
    """Log and raise an HTTP 404."""
    logger.info(message)
    raise NotFound(message)


def handle_internal_server_error(message, exc, logger):
    """Log with traceback and raise an HTTP 500."""
    logger.error(message, exc_info=exc)
    raise InternalServerError(message) from exc
