"""
Common Pydantic models used across multiple endpoints.

Camel-case base model, error envelope, pagination, health and service info.
"""

from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys; accepts either form on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ErrorDetail(BaseModel):
    code: str = Field(..., description='Stable machine-readable error code')
    message: str = Field(..., description='Human-readable error message')


class ErrorResponse(BaseModel):
    """Envelope returned for every error response."""

    error: ErrorDetail


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PerformanceMetrics(BaseModel):
    """Process metrics for health check."""

    memory_mb: float
    cpu_percent: float
    max_file_size_mb: int
    slow_request_threshold_ms: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default='healthy', description='Service health status')
    database: str = Field(..., description='Database connectivity (ok / error)')
    performance: PerformanceMetrics = Field(..., description='Performance metrics')


class ServiceInfoResponse(BaseModel):
    """Root endpoint response with service information."""

    service: str
    version: str
    status: str = Field(default='running')
    areas: dict[str, Any]
