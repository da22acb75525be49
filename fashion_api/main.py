"""
Fashion Social-Commerce API

Single FastAPI application serving every area of the product:
- AI: image analysis, batch processing, VUFS extraction (/ai)
- Wardrobe: VUFS-coded item catalog (/wardrobe)
- Marketplace: listings, search, likes (/marketplace)
- Social: posts, comments, follows, feed (/social)
- Messaging: direct and group conversations (/messaging)
- Advertising: campaigns, tracking, analytics (/advertising)
- Admin: size standards and sizes (/admin, public catalog at /sizes)

Run with: uvicorn fashion_api.main:app --host 0.0.0.0 --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fashion_api.config import get_settings
from fashion_api.core.dependencies import ImageFetcherFactory
from fashion_api.core.exceptions import FashionAPIError
from fashion_api.db import dispose_engine, init_db
from fashion_api.routers import (
    admin_router,
    advertising_router,
    ai_router,
    brands_router,
    health_router,
    marketplace_router,
    messaging_router,
    sizes_router,
    social_router,
    wardrobe_router,
)


# =============================================================================
# Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: 'BAD_REQUEST',
    401: 'UNAUTHORIZED',
    403: 'FORBIDDEN',
    404: 'NOT_FOUND',
    405: 'METHOD_NOT_ALLOWED',
    409: 'CONFLICT',
    413: 'FILE_TOO_LARGE',
}


def error_response(status_code: int, code: str, message: str) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content={'error': {'code': code, 'message': message}})


# =============================================================================
# Lifespan Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Startup:
    - Create database tables if missing
    - AWS and HTTP clients are created lazily on first use

    Shutdown:
    - Close the shared image fetcher
    - Dispose the database engine
    """
    logger.info('=== STARTUP ===')
    init_db()
    logger.info(f'Database ready: {settings.database_url.split("://", 1)[0]}')
    logger.info(f'Background removal: {"ENABLED" if settings.enable_background_removal else "DISABLED"}')
    logger.info('=== SERVICE READY ===')

    yield

    logger.info('=== SHUTDOWN ===')
    try:
        await ImageFetcherFactory.close()
    except Exception as e:
        logger.warning(f'Error closing image fetcher: {e}')
    dispose_engine()
    logger.info('=== SHUTDOWN COMPLETE ===')


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)


# =============================================================================
# Performance Monitoring Middleware
# =============================================================================
@app.middleware('http')
async def performance_middleware(request: Request, call_next):
    """Reject oversized uploads early, add X-Process-Time and log slow requests."""
    start_time = time.time()

    if request.method == 'POST' and request.url.path.startswith('/ai'):
        content_length = request.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > settings.max_file_size_bytes:
            logger.warning(
                f'Request rejected: {int(content_length) / 1024 / 1024:.2f}MB exceeds '
                f'{settings.max_file_size_mb}MB limit'
            )
            return error_response(
                413, 'FILE_TOO_LARGE', f'File too large. Maximum size: {settings.max_file_size_mb}MB'
            )

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers['X-Process-Time'] = f'{duration_ms:.2f}ms'

    if duration_ms > settings.slow_request_threshold_ms:
        logger.warning(
            f'Slow request: {request.method} {request.url.path} - '
            f'{duration_ms:.2f}ms (threshold: {settings.slow_request_threshold_ms}ms)'
        )

    return response


# =============================================================================
# Exception Handlers
# =============================================================================
@app.exception_handler(FashionAPIError)
async def fashion_api_error_handler(request: Request, exc: FashionAPIError):
    if exc.status_code >= 500:
        logger.error(f'{request.method} {request.url.path} failed: {exc.code} {exc.message}')
    return error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
        message = first.get('msg', 'Invalid request')
        if location:
            message = f'{location}: {message}'
    else:
        message = 'Invalid request'
    return error_response(400, 'VALIDATION_ERROR', message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, 'HTTP_ERROR')
    return error_response(exc.status_code, code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f'Unhandled error on {request.method} {request.url.path}')
    return error_response(500, 'INTERNAL_SERVER_ERROR', 'Internal server error')


# =============================================================================
# Routers
# =============================================================================
app.include_router(health_router)
app.include_router(ai_router)
app.include_router(wardrobe_router)
app.include_router(marketplace_router)
app.include_router(social_router)
app.include_router(messaging_router)
app.include_router(advertising_router)
app.include_router(brands_router)
app.include_router(admin_router)
app.include_router(sizes_router)
