"""
Image processing service.

Provides upload validation and background removal.
"""

import io
import logging
import threading
from pathlib import PurePath
from typing import Any

from PIL import Image

from fashion_api.config import Settings, get_settings
from fashion_api.core.exceptions import InvalidImageError


logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ['image/jpeg', 'image/png', 'image/webp']
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}


class ImageService:
    """
    Image preprocessing service.

    Handles:
    - Upload validation (type and size)
    - Background removal with rembg
    """

    _rembg_sessions: dict[str, Any] = {}
    _session_lock = threading.Lock()

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def validate_upload(self, filename: str, content_type: str | None, data: bytes) -> None:
        """
        Validate an uploaded image before analysis.

        Args:
            filename: Client-supplied filename
            content_type: Client-supplied MIME type
            data: Raw file bytes

        Raises:
            InvalidImageError: Unsupported type (INVALID_FILE_TYPE) or too large (FILE_TOO_LARGE)
        """
        extension = PurePath(filename or '').suffix.lower()
        allowed = content_type in ALLOWED_CONTENT_TYPES or (
            content_type in (None, '', 'application/octet-stream') and extension in ALLOWED_EXTENSIONS
        )
        if not allowed:
            raise InvalidImageError(
                filename, 'Only JPEG, PNG, and WebP images are allowed', code='INVALID_FILE_TYPE'
            )

        self.validate_size(data, filename)

    def validate_size(self, image_bytes: bytes, filename: str = '', max_size_mb: int | None = None) -> bool:
        """
        Validate image file size.

        Returns:
            True if valid, raises InvalidImageError if too large
        """
        max_size_mb = max_size_mb or self.settings.max_file_size_mb
        size_mb = len(image_bytes) / (1024 * 1024)

        if size_mb > max_size_mb:
            raise InvalidImageError(
                filename,
                f'File size {size_mb:.2f}MB exceeds maximum {max_size_mb}MB',
                code='FILE_TOO_LARGE',
            )

        return True

    @classmethod
    def _get_rembg_session(cls, model_name: str):
        """Load each segmentation model once per process (lazy, thread-safe)."""
        session = cls._rembg_sessions.get(model_name)
        if session is None:
            with cls._session_lock:
                session = cls._rembg_sessions.get(model_name)
                if session is None:
                    from rembg import new_session

                    logger.info(f'Loading rembg model ({model_name})...')
                    session = new_session(model_name)
                    cls._rembg_sessions[model_name] = session
                    logger.info(f'rembg model {model_name} ready')
        return session

    def remove_background(self, image_bytes: bytes) -> bytes:
        """
        Strip the background from a product photo.

        Blocking (model inference); call via asyncio.to_thread from async code.

        Args:
            image_bytes: Original encoded image

        Returns:
            PNG bytes with an alpha channel
        """
        from rembg import remove

        session = self._get_rembg_session(self.settings.rembg_model)
        img = Image.open(io.BytesIO(image_bytes))
        cutout = remove(img, session=session)

        buffer = io.BytesIO()
        cutout.save(buffer, format='PNG', optimize=True)
        logger.debug(f'Background removed ({img.size[0]}x{img.size[1]})')
        return buffer.getvalue()
