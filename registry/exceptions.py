"""
Domain exceptions and the API exception handler.

Services raise these; the handler below turns them (and everything DRF
raises on its own) into one error body::

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "...", "validationErrors": {...}}
"""
from __future__ import annotations

import logging
from http import HTTPStatus

from django.db import IntegrityError
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ResourceNotFound(NotFound):
    """Referenced entity is absent or excluded by soft delete."""

    def __init__(self, resource: str, field: str | None = None, value=None):
        if field is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} not found with {field}: '{value}'"
        super().__init__(message)


class DuplicateResource(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'duplicate'

    def __init__(self, resource: str, field: str, value):
        super().__init__(f"{resource} already exists with {field}: '{value}'")


class BusinessRuleViolation(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violated.'
    default_code = 'business_rule'


class InsufficientStock(BusinessRuleViolation):
    default_code = 'insufficient_stock'


def _error_body(code: int, error: str, message, validation_errors=None) -> dict:
    body = {
        'timestamp': timezone.now().isoformat(),
        'status': code,
        'error': error,
        'message': message,
    }
    if validation_errors:
        body['validationErrors'] = validation_errors
    return body


def _flatten_errors(detail) -> dict:
    """Reduce DRF's nested error lists to one message per field."""
    if not isinstance(detail, dict):
        return {'non_field_errors': str(detail[0]) if isinstance(detail, list) and detail else str(detail)}
    flat = {}
    for field, errors in detail.items():
        if isinstance(errors, list) and errors:
            first = errors[0]
            flat[field] = _flatten_errors(first) if isinstance(first, dict) else str(first)
        elif isinstance(errors, dict):
            flat[field] = _flatten_errors(errors)
        else:
            flat[field] = str(errors)
    return flat


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError):
        logger.warning("integrity error: %s", exc)
        return Response(
            _error_body(409, 'Conflict', 'Data integrity violation'),
            status=status.HTTP_409_CONFLICT,
        )

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("unhandled error in %s", getattr(view, '__name__', view.__class__.__name__ if view else None))
        return Response(
            _error_body(500, 'Internal Server Error', 'An unexpected error occurred'),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        body = _error_body(400, 'Validation Failed', 'Input validation failed', _flatten_errors(exc.detail))
        return Response(body, status=resp.status_code)

    if isinstance(resp.data, dict) and 'detail' in resp.data:
        message = str(resp.data['detail'])
    else:
        message = str(resp.data)
    try:
        error = HTTPStatus(resp.status_code).phrase
    except ValueError:
        error = 'Error'
    resp.data = _error_body(resp.status_code, error, message)
    return resp
