"""
Monitoring & Health Check Endpoints
===================================

Provides:
1. /health/ - Basic liveness check (for load balancers/Docker)
2. /health/ready/ - Readiness check (database, badge catalog)
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection, DatabaseError
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt
from django.utils import timezone

logger = logging.getLogger('giller.monitoring')

SERVICE_NAME = 'giller-progression'


@csrf_exempt
@require_GET
def health_check(request):
    """
    Basic liveness probe.
    Returns 200 if the Django process is alive.
    """
    return JsonResponse({
        'status': 'ok',
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness probe - checks the progression engine's dependencies.
    Returns 200 only if ALL dependencies are healthy, 503 otherwise.
    """
    from progression.catalog import CATALOG, EXPECTED_BADGE_COUNT

    checks = {}
    all_healthy = True

    # 1. Database Check
    try:
        start = time.time()
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        db_time = round((time.time() - start) * 1000, 2)
        checks['database'] = {
            'status': 'healthy',
            'response_time_ms': db_time,
            'engine': connection.vendor,
        }
    except DatabaseError as e:
        checks['database'] = {
            'status': 'unhealthy',
            'error': str(e),
        }
        all_healthy = False
        logger.error(f"Health check - Database unhealthy: {e}")

    # 2. Badge catalog loaded with the full badge set
    badge_count = len(CATALOG)
    if badge_count == EXPECTED_BADGE_COUNT:
        checks['badge_catalog'] = {'status': 'healthy', 'badges': badge_count}
    else:
        checks['badge_catalog'] = {
            'status': 'unhealthy',
            'badges': badge_count,
            'expected': EXPECTED_BADGE_COUNT,
        }
        all_healthy = False
        logger.error(f"Health check - Badge catalog has {badge_count} entries")

    status_code = 200 if all_healthy else 503
    overall_status = 'healthy' if all_healthy else 'unhealthy'

    return JsonResponse({
        'status': overall_status,
        'service': SERVICE_NAME,
        'timestamp': timezone.now().isoformat(),
        'checks': checks,
    }, status=status_code)
