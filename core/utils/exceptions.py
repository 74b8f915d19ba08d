import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class RoomFull(APIException):
    """Raised when every winner slot of a room is already claimed"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Too late! All winner slots are already taken.'
    default_code = 'room_full'


def _flatten_detail(detail):
    """Returns the first human-readable message out of a DRF error structure"""
    if isinstance(detail, list) and detail:
        return _flatten_detail(detail[0])
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _flatten_detail(detail['detail'])
        for value in detail.values():
            return _flatten_detail(value)
    return str(detail)


def api_exception_handler(exc, context):
    """
    Project-wide DRF exception handler.

    - Known API errors keep their status code. Validation errors keep the
      per-field structure and add a top-level 'detail' summary.
    - RoomFull responses carry 'too_late': true so clients can tell them
      apart from a missing room.
    - Anything else is logged and turned into a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'unknown view')
        return Response({'detail': 'Internal server error.'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    data = response.data
    if isinstance(data, dict):
        data.setdefault('detail', _flatten_detail(data))
    else:
        data = {'detail': _flatten_detail(data), 'errors': data}

    if isinstance(exc, RoomFull):
        data['too_late'] = True

    response.data = data
    return response
