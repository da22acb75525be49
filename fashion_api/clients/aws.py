"""
AWS client wrapper for object storage and vision services.

Wraps three boto3 clients behind one object:
- S3: image uploads and presigned upload URLs
- Rekognition: label and text detection
- SageMaker runtime: custom fashion classification endpoint

All methods are blocking; async callers run them with asyncio.to_thread.
boto3 clients are thread-safe, so one instance is shared by the process.
"""

import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from fashion_api.config import Settings, get_settings


logger = logging.getLogger(__name__)


class AWSClient:
    """
    Thin facade over the boto3 clients the service needs.

    Clients are created lazily so that importing the application never
    requires AWS credentials; tests pass stubbed clients instead.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        s3: Any = None,
        rekognition: Any = None,
        sagemaker: Any = None,
    ):
        self.settings = settings or get_settings()
        self._s3 = s3
        self._rekognition = rekognition
        self._sagemaker = sagemaker

    # =========================================================================
    # Lazy client creation
    # =========================================================================
    @property
    def s3(self):
        if self._s3 is None:
            self._s3 = boto3.client('s3', region_name=self.settings.aws_region)
        return self._s3

    @property
    def rekognition(self):
        if self._rekognition is None:
            self._rekognition = boto3.client('rekognition', region_name=self.settings.aws_region)
        return self._rekognition

    @property
    def sagemaker(self):
        if self._sagemaker is None:
            self._sagemaker = boto3.client('sagemaker-runtime', region_name=self.settings.aws_region)
        return self._sagemaker

    # =========================================================================
    # S3
    # =========================================================================
    def object_url(self, key: str) -> str:
        return f'{self.settings.s3_base_url}/{key}'

    def upload_image(self, data: bytes, key: str, content_type: str = 'image/jpeg') -> str:
        """
        Upload image bytes to the configured bucket.

        Args:
            data: Encoded image bytes
            key: Object key (e.g. processed/1700000000000-shirt.png)
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded object
        """
        params = {
            'Bucket': self.settings.aws_s3_bucket,
            'Key': key,
            'Body': data,
            'ContentType': content_type,
        }
        if self.settings.s3_object_acl:
            params['ACL'] = self.settings.s3_object_acl

        self.s3.put_object(**params)
        logger.debug(f'Uploaded {len(data)} bytes to s3://{self.settings.aws_s3_bucket}/{key}')
        return self.object_url(key)

    def generate_presigned_upload(
        self, key: str, content_type: str, expires_in: int | None = None
    ) -> str:
        """Presigned PUT URL letting clients upload directly to the bucket."""
        return self.s3.generate_presigned_url(
            'put_object',
            Params={
                'Bucket': self.settings.aws_s3_bucket,
                'Key': key,
                'ContentType': content_type,
            },
            ExpiresIn=expires_in or self.settings.presigned_url_expires,
        )

    # =========================================================================
    # Rekognition
    # =========================================================================
    def detect_labels(self, image_bytes: bytes) -> list[dict[str, Any]]:
        """Run DetectLabels and return the raw label list."""
        response = self.rekognition.detect_labels(
            Image={'Bytes': image_bytes},
            MaxLabels=self.settings.rekognition_max_labels,
            MinConfidence=self.settings.rekognition_min_confidence,
        )
        return response.get('Labels', [])

    def detect_text(self, image_bytes: bytes) -> list[dict[str, Any]]:
        """Run DetectText and return the raw text detections."""
        response = self.rekognition.detect_text(Image={'Bytes': image_bytes})
        return response.get('TextDetections', [])

    # =========================================================================
    # SageMaker
    # =========================================================================
    def invoke_fashion_model(
        self, image_bytes: bytes, endpoint_name: str | None = None
    ) -> dict[str, Any] | None:
        """
        Classify an image with the custom fashion model.

        The endpoint is optional infrastructure: any failure (missing
        endpoint, empty body, non-JSON payload) returns None and callers
        fall back to label heuristics.
        """
        endpoint = endpoint_name or self.settings.fashion_model_endpoint
        try:
            response = self.sagemaker.invoke_endpoint(
                EndpointName=endpoint,
                ContentType='application/x-image',
                Body=image_bytes,
            )
            body = response.get('Body')
            if body is None:
                return None
            raw = body.read() if hasattr(body, 'read') else body
            if not raw:
                return None
            result = json.loads(raw)
            return result if isinstance(result, dict) else None
        except (BotoCoreError, ClientError, ValueError) as e:
            logger.warning(f'Custom fashion model not available, using fallback detection: {e}')
            return None

