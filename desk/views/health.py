"""
Plain Django views outside the DRF stack: the liveness probe and the
JSON 404 handler.
"""
import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def healthz(request):
    """Report whether the process is up and the database answers."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            db_ok = cursor.fetchone() == (1,)
    except DatabaseError as exc:
        logger.error('health check could not reach the database: %s', exc)
        return JsonResponse({'ok': False, 'db': False}, status=503)
    return JsonResponse({'ok': True, 'db': db_ok})


def not_found(request, exception=None):
    return JsonResponse({'message': 'Not found'}, status=404)
