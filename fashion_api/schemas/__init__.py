"""
Pydantic schemas for API request/response models.

Every public model serializes with camelCase keys and accepts either
camelCase or snake_case on input.
"""

from fashion_api.schemas.analysis import (
    AnalysisResponse,
    BatchProcessResponse,
    ImageAnalysisResult,
    VUFSExtractionResponse,
)
from fashion_api.schemas.common import (
    CamelModel,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    Pagination,
    ServiceInfoResponse,
)


__all__ = [
    # Analysis schemas
    'AnalysisResponse',
    'BatchProcessResponse',
    # Common schemas
    'CamelModel',
    'ErrorDetail',
    'ErrorResponse',
    'HealthResponse',
    'ImageAnalysisResult',
    'Pagination',
    'ServiceInfoResponse',
    'VUFSExtractionResponse',
]
