"""
Error taxonomy and the unified API exception handler.

Every failure leaves the API as ``{"message": ...}``; validation
failures also carry an ``errors`` list with one entry per field error so
that the UI can highlight individual inputs.  Storage and unexpected
errors are logged here and answered with a generic message.
"""
from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

logger = logging.getLogger(__name__)


class PreconditionFailed(APIException):
    """A referenced record the operation depends on does not exist."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Precondition failed'
    default_code = 'precondition_failed'

    def __init__(self, detail=None, code=None, field: str | None = None):
        super().__init__(detail, code)
        self.field = field


class PatientHasBills(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Patient has bills and cannot be deleted'
    default_code = 'patient_has_bills'


class StatusTransitionError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Bill status change not allowed'
    default_code = 'invalid_transition'


def flatten_errors(detail, path=None) -> list[dict]:
    """Turn a DRF error structure into ``[{path, message, code}]``."""
    path = path or []
    errors: list[dict] = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            sub = path if key == api_settings.NON_FIELD_ERRORS_KEY else path + [key]
            errors.extend(flatten_errors(value, sub))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                errors.extend(flatten_errors(value, path + [index]))
            else:
                errors.append(_error_entry(value, path))
    else:
        errors.append(_error_entry(detail, path))
    return errors


def _error_entry(value, path: list) -> dict:
    return {'path': list(path), 'message': str(value), 'code': getattr(value, 'code', 'invalid')}


def _view_name(context) -> str:
    view = context.get('view') if context else None
    return type(view).__name__ if view is not None else 'unknown view'


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        logger.error('storage error in %s', _view_name(context), exc_info=exc)
        set_rollback()
        return Response({'message': 'Storage error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error('unhandled error in %s', _view_name(context), exc_info=exc)
        set_rollback()
        return Response({'message': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        resp.data = {'message': 'Validation error', 'errors': flatten_errors(exc.detail)}
        return resp

    detail = resp.data.get('detail', resp.data) if isinstance(resp.data, dict) else resp.data
    data = {'message': str(detail)}
    field = getattr(exc, 'field', None)
    if field:
        data['errors'] = [{'path': [field], 'message': str(detail), 'code': exc.get_codes()}]
    resp.data = data
    return resp
