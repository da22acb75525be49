"""
Centralized configuration using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
Use get_settings() to access the singleton settings instance.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: DATABASE_URL=postgresql+psycopg://... AWS_S3_BUCKET=my-bucket uvicorn fashion_api.main:app
    """

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_title: str = Field(default='Fashion Social-Commerce API', description='API title for OpenAPI docs')

    api_description: str = Field(
        default='Wardrobe cataloging, AI image analysis, marketplace, social and advertising',
        description='API description for OpenAPI docs',
    )

    api_version: str = Field(default='1.0.0', description='API version')

    log_level: str = Field(default='INFO', description='Root logging level')

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    database_url: str = Field(
        default='sqlite:///./fashion.db', description='SQLAlchemy database URL'
    )

    database_echo: bool = Field(default=False, description='Log every SQL statement')

    # ==========================================================================
    # Authentication
    # ==========================================================================
    jwt_secret: str = Field(default='change-me-in-production', description='HS256 signing secret')

    jwt_algorithm: str = Field(default='HS256', description='JWT signing algorithm')

    jwt_expires_minutes: int = Field(default=60, description='Lifetime of issued access tokens')

    # ==========================================================================
    # AWS Configuration (S3, Rekognition, SageMaker)
    # ==========================================================================
    aws_region: str = Field(default='us-east-1', description='AWS region for all clients')

    aws_s3_bucket: str = Field(default='fashion-images-dev', description='Image bucket name')

    s3_object_acl: str | None = Field(
        default='public-read', description='ACL applied to uploaded images (empty to skip)'
    )

    s3_public_base_url: str | None = Field(
        default=None, description='Public base URL for uploaded objects (defaults to the S3 URL)'
    )

    presigned_url_expires: int = Field(default=3600, description='Presigned URL lifetime in seconds')

    rekognition_max_labels: int = Field(default=20, description='DetectLabels MaxLabels')

    rekognition_min_confidence: float = Field(default=70.0, description='DetectLabels MinConfidence')

    fashion_model_endpoint: str = Field(
        default='fashion-classifier', description='SageMaker fashion classification endpoint'
    )

    # ==========================================================================
    # AI Image Analysis
    # ==========================================================================
    enable_background_removal: bool = Field(
        default=True, description='Run background removal before re-upload'
    )

    rembg_model: str = Field(default='u2net', description='rembg segmentation model name')

    image_fetch_timeout: float = Field(default=30.0, description='Remote image fetch timeout in seconds')

    ai_review_threshold: int = Field(
        default=70, ge=0, le=100, description='Overall confidence below this needs manual review'
    )

    ai_max_batch_size: int = Field(default=10, ge=1, description='Maximum image URLs per batch')

    # ==========================================================================
    # Performance Configuration
    # ==========================================================================
    max_file_size_mb: int = Field(default=10, description='Maximum upload file size in MB')

    slow_request_threshold_ms: int = Field(
        default=3000, description='Log requests slower than this threshold'
    )

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def max_file_size_bytes(self) -> int:
        """Maximum file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def s3_base_url(self) -> str:
        """Base URL used to build public object URLs."""
        if self.s3_public_base_url:
            return self.s3_public_base_url.rstrip('/')
        return f'https://{self.aws_s3_bucket}.s3.{self.aws_region}.amazonaws.com'

    class Config:
        env_prefix = ''  # No prefix for env vars
        case_sensitive = False
        extra = 'ignore'


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance (singleton pattern).

    Returns:
        Settings: Application settings
    """
    return Settings()
