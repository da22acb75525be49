"""
Health and Monitoring Router

Provides health checks and service info.
"""

import logging
import os

import psutil
from fastapi import APIRouter
from sqlalchemy import text

from fashion_api.config import get_settings
from fashion_api.core.dependencies import DbDep
from fashion_api.schemas.common import HealthResponse, ServiceInfoResponse


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=['Health & Monitoring'],
)


@router.get('/', response_model=ServiceInfoResponse)
def root():
    """
    Service information endpoint.

    Returns the API areas and their base paths.
    """
    settings = get_settings()

    return {
        'service': settings.api_title,
        'version': settings.api_version,
        'status': 'running',
        'areas': {
            'ai': {
                'endpoints': ['/ai/process', '/ai/analyze-url', '/ai/batch-process', '/ai/extract-vufs'],
                'description': 'Image analysis (background removal, label and brand detection)',
            },
            'wardrobe': {'endpoint': '/wardrobe/*', 'description': 'VUFS wardrobe cataloging'},
            'marketplace': {'endpoint': '/marketplace/*', 'description': 'Listings, likes, search'},
            'social': {'endpoint': '/social/*', 'description': 'Posts, follows, comments, feed'},
            'messaging': {'endpoint': '/messaging/*', 'description': 'Direct and group chat'},
            'advertising': {'endpoint': '/advertising/*', 'description': 'Campaigns and analytics'},
            'brands': {'endpoint': '/brands/*', 'description': 'Brand partner accounts, catalogs, analytics'},
            'admin': {'endpoint': '/admin/*', 'description': 'Size standards and sizes'},
        },
    }


@router.get('/health', response_model=HealthResponse)
def health(db: DbDep):
    """
    Health check with process metrics.

    Returns:
    - Service status (degraded when the database is unreachable)
    - Database connectivity
    - Memory and CPU usage
    """
    settings = get_settings()

    try:
        db.execute(text('SELECT 1'))
        database = 'ok'
    except Exception as e:
        logger.error(f'Database health check failed: {e}')
        database = 'error'

    process = psutil.Process(os.getpid())
    memory_info = process.memory_info()

    return {
        'status': 'healthy' if database == 'ok' else 'degraded',
        'database': database,
        'performance': {
            'memory_mb': round(memory_info.rss / 1024 / 1024, 2),
            'cpu_percent': process.cpu_percent(),
            'max_file_size_mb': settings.max_file_size_mb,
            'slow_request_threshold_ms': settings.slow_request_threshold_ms,
        },
    }
