"""
AI Image Analysis Router.

Architecture:
- ASYNC endpoints: the orchestrator awaits its cloud sub-calls concurrently
  (blocking boto3/rembg work runs in worker threads).
- SYNC endpoint for feedback storage (database only).

Endpoints:
- /process: Analyze an uploaded image
- /analyze-url: Fetch and analyze a remote image
- /batch-process: Analyze up to AI_MAX_BATCH_SIZE remote images
- /extract-vufs: Uploaded image -> VUFS draft (category, brand, metadata, condition)
- /feedback: Store corrections/confirmations of AI suggestions
- /capabilities: Static description of what the analysis detects
"""

import logging
from typing import Any
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, Body, File, UploadFile, status
from fastapi.responses import ORJSONResponse

from fashion_api.clients.http import filename_from_url
from fashion_api.core.dependencies import (
    AnalysisServiceDep,
    BatchProcessorDep,
    DbDep,
    ImageFetcherDep,
    ImageServiceDep,
    SettingsDep,
)
from fashion_api.core.exceptions import FashionAPIError, ImageFetchError
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.analysis import (
    AnalysisResponse,
    AnalyzeUrlRequest,
    BatchProcessResponse,
    FeedbackRequest,
    FeedbackResponse,
    VUFSExtractionResponse,
)
from fashion_api.services.feedback import FeedbackService
from fashion_api.services.image import ALLOWED_CONTENT_TYPES
from fashion_api.services.vufs import SUPPORTED_BRANDS


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/ai', tags=['AI Image Analysis'], default_response_class=ORJSONResponse)


async def _read_upload(image: UploadFile | None, image_service) -> tuple[bytes, str]:
    if image is None or not image.filename:
        raise FashionAPIError('Image file is required', code='NO_IMAGE', status_code=400)

    data = await image.read()
    image_service.validate_upload(image.filename, image.content_type, data)
    return data, image.filename


# =============================================================================
# Analysis Endpoints (ASYNC)
# =============================================================================
@router.post('/process', response_model=AnalysisResponse)
async def process_image(
    user: CurrentUserDep,
    analysis_service: AnalysisServiceDep,
    image_service: ImageServiceDep,
    image: UploadFile | None = File(default=None, description='Image file (JPEG/PNG/WebP)'),
):
    """
    Analyze an uploaded fashion item photo.

    Background removal, label detection, text detection and the custom
    classifier run concurrently; whichever fail leave their fields empty.
    """
    image_bytes, filename = await _read_upload(image, image_service)

    try:
        analysis = await analysis_service.process_item_image(image_bytes, filename)
    except FashionAPIError:
        raise
    except Exception as e:
        logger.exception(f'Image processing failed for user {user.id}: {e}')
        raise FashionAPIError(
            'An error occurred while processing the image', code='PROCESSING_ERROR', status_code=500
        ) from e

    return AnalysisResponse(
        message='Image processed successfully',
        analysis=analysis,
        suggestions=analysis_service.build_suggestions(analysis),
    )


@router.post('/analyze-url', response_model=AnalysisResponse)
async def analyze_image_url(
    user: CurrentUserDep,
    analysis_service: AnalysisServiceDep,
    fetcher: ImageFetcherDep,
    image_service: ImageServiceDep,
    body: AnalyzeUrlRequest | None = None,
):
    """Fetch an image by URL and analyze it."""
    if body is None or not body.image_url:
        raise FashionAPIError('Image URL is required', code='MISSING_URL', status_code=400)
    if urlparse(body.image_url).scheme not in ('http', 'https'):
        raise FashionAPIError('Image URL must use http or https', code='INVALID_URL', status_code=400)

    try:
        image_bytes = await fetcher.fetch(body.image_url)
    except ImageFetchError:
        raise
    except httpx.HTTPError as e:
        logger.warning(f'Image fetch failed ({body.image_url}): {e}')
        raise ImageFetchError(body.image_url) from e

    filename = filename_from_url(body.image_url)
    image_service.validate_size(image_bytes, filename)

    try:
        analysis = await analysis_service.process_item_image(image_bytes, filename)
    except Exception as e:
        logger.exception(f'URL analysis failed for user {user.id}: {e}')
        raise FashionAPIError(
            'An error occurred while analyzing the image', code='ANALYSIS_ERROR', status_code=500
        ) from e

    return AnalysisResponse(
        message='Image analyzed successfully',
        analysis=analysis,
        suggestions=analysis_service.build_suggestions(analysis),
    )


@router.post('/batch-process', response_model=BatchProcessResponse)
async def batch_process(
    user: CurrentUserDep,
    processor: BatchProcessorDep,
    settings: SettingsDep,
    body: dict[str, Any] | None = Body(default=None),
):
    """
    Analyze several remote images.

    Each URL succeeds or fails on its own; the response lists one entry
    per URL, in request order, plus a summary.
    """
    urls = (body or {}).get('imageUrls')
    if not isinstance(urls, list) or not urls or not all(isinstance(u, str) for u in urls):
        raise FashionAPIError('Array of image URLs is required', code='INVALID_INPUT', status_code=400)
    if len(urls) > settings.ai_max_batch_size:
        raise FashionAPIError(
            f'Maximum {settings.ai_max_batch_size} images allowed per batch',
            code='TOO_MANY_IMAGES',
            status_code=400,
        )

    logger.info(f'Batch of {len(urls)} images requested by user {user.id}')
    return await processor.process_urls(urls)


@router.post('/extract-vufs', response_model=VUFSExtractionResponse)
async def extract_vufs(
    user: CurrentUserDep,
    analysis_service: AnalysisServiceDep,
    image_service: ImageServiceDep,
    image: UploadFile | None = File(default=None, description='Image file (JPEG/PNG/WebP)'),
):
    """Draft VUFS properties (category, brand, metadata, condition) from a photo."""
    image_bytes, filename = await _read_upload(image, image_service)

    try:
        extraction = await analysis_service.extract_vufs_properties(image_bytes, filename)
    except Exception as e:
        logger.exception(f'VUFS extraction failed for user {user.id}: {e}')
        raise FashionAPIError(
            'An error occurred while extracting VUFS properties', code='PROCESSING_ERROR', status_code=500
        ) from e

    return VUFSExtractionResponse(message='VUFS properties extracted successfully', extraction=extraction)


# =============================================================================
# Feedback + Capabilities (SYNC)
# =============================================================================
@router.post('/feedback', response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(user: CurrentUserDep, db: DbDep, feedback: FeedbackRequest):
    record = FeedbackService(db).store(user.id, feedback)
    return FeedbackResponse(message='Feedback stored successfully', feedback_id=record.id)


@router.get('/capabilities')
def capabilities(settings: SettingsDep):
    """What the analysis pipeline can detect, and its limits."""
    return {
        'capabilities': {
            'backgroundRemoval': settings.enable_background_removal,
            'brandDetection': True,
            'pieceTypeDetection': True,
            'colorDetection': True,
            'materialDetection': True,
            'textRecognition': True,
            'customModelSupport': True,
        },
        'supportedDomains': ['APPAREL', 'FOOTWEAR'],
        'supportedBrands': SUPPORTED_BRANDS,
        'supportedFormats': ALLOWED_CONTENT_TYPES,
        'maxFileSize': f'{settings.max_file_size_mb}MB',
        'maxBatchSize': settings.ai_max_batch_size,
        'processingTime': 'Typically 3-10 seconds',
        'confidenceThreshold': settings.ai_review_threshold,
    }
