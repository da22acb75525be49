"""
FastAPI dependency injection for shared resources.

Uses FastAPI's Depends() pattern for proper lifecycle management.
Clients are created once and reused across requests; database sessions
are request scoped.
"""

import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from fashion_api.clients.aws import AWSClient
from fashion_api.clients.http import ImageFetcher
from fashion_api.config.settings import Settings, get_settings
from fashion_api.db.base import get_db
from fashion_api.services.analysis import FashionAnalysisService
from fashion_api.services.batch import BatchProcessor
from fashion_api.services.image import ImageService


logger = logging.getLogger(__name__)


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================
SettingsDep = Annotated[Settings, Depends(get_settings)]
DbDep = Annotated[Session, Depends(get_db)]


# =============================================================================
# Application State (managed by lifespan context)
# =============================================================================
class AppState:
    """
    Application state container for shared clients.

    Clients are created lazily on first use and released in lifespan.
    """

    def __init__(self):
        self.aws_client: AWSClient | None = None
        self.image_fetcher: ImageFetcher | None = None


# Global app state - initialized in lifespan
app_state = AppState()


# =============================================================================
# Client Factories
# =============================================================================
class AWSClientFactory:
    """Factory for the shared AWS client (lazy initialization)."""

    @staticmethod
    def get_client() -> AWSClient:
        if app_state.aws_client is None:
            settings = get_settings()
            logger.info(f'Initializing AWS clients (region={settings.aws_region}, bucket={settings.aws_s3_bucket})')
            app_state.aws_client = AWSClient(settings)
        return app_state.aws_client


class ImageFetcherFactory:
    """Factory for the shared HTTP image fetcher."""

    @staticmethod
    def get_fetcher() -> ImageFetcher:
        if app_state.image_fetcher is None:
            app_state.image_fetcher = ImageFetcher(get_settings())
            logger.info('Image fetcher ready')
        return app_state.image_fetcher

    @staticmethod
    async def close():
        if app_state.image_fetcher is not None:
            await app_state.image_fetcher.close()
            app_state.image_fetcher = None
            logger.info('Image fetcher closed')


# =============================================================================
# FastAPI Dependencies (use with Depends())
# =============================================================================
def get_aws_client() -> AWSClient:
    """Dependency for the AWS client."""
    return AWSClientFactory.get_client()


def get_image_fetcher() -> ImageFetcher:
    """Dependency for the image fetcher."""
    return ImageFetcherFactory.get_fetcher()


def get_image_service(settings: SettingsDep) -> ImageService:
    return ImageService(settings)


def get_analysis_service(
    aws: Annotated[AWSClient, Depends(get_aws_client)],
    image_service: Annotated[ImageService, Depends(get_image_service)],
    settings: SettingsDep,
) -> FashionAnalysisService:
    """Dependency for the analysis orchestrator."""
    return FashionAnalysisService(aws, image_service, settings)


def get_batch_processor(
    fetcher: Annotated[ImageFetcher, Depends(get_image_fetcher)],
    analysis: Annotated[FashionAnalysisService, Depends(get_analysis_service)],
) -> BatchProcessor:
    return BatchProcessor(fetcher, analysis)


# Type aliases for cleaner endpoint signatures
AWSClientDep = Annotated[AWSClient, Depends(get_aws_client)]
ImageFetcherDep = Annotated[ImageFetcher, Depends(get_image_fetcher)]
ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
AnalysisServiceDep = Annotated[FashionAnalysisService, Depends(get_analysis_service)]
BatchProcessorDep = Annotated[BatchProcessor, Depends(get_batch_processor)]
