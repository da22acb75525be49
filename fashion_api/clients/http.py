"""
Remote image fetching over HTTP.
"""

import logging
from urllib.parse import unquote, urlparse

import httpx

from fashion_api.config import Settings, get_settings
from fashion_api.core.exceptions import ImageFetchError, InvalidImageError


logger = logging.getLogger(__name__)

# Generic binary types some object stores serve images with
OPAQUE_CONTENT_TYPES = {'application/octet-stream', 'binary/octet-stream'}


def filename_from_url(url: str, default: str = 'image.jpg') -> str:
    """Last path segment of a URL, or the default when there is none."""
    path = urlparse(url).path
    name = unquote(path.rsplit('/', 1)[-1]) if path else ''
    return name or default


class ImageFetcher:
    """
    Downloads images with a shared httpx.AsyncClient.

    The client is created on first use and closed from the application
    lifespan.
    """

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.image_fetch_timeout, follow_redirects=True
            )
        return self._client

    async def fetch(self, url: str) -> bytes:
        """
        Fetch image bytes from a URL.

        The body is streamed and the download is abandoned as soon as it
        passes the upload size limit, so an oversized remote file is never
        held in memory in full.

        Raises:
            ImageFetchError: The server answered with a non-2xx status
            InvalidImageError: Non-image content type (INVALID_FILE_TYPE) or body over the limit (FILE_TOO_LARGE)
            httpx.HTTPError: Network-level failure (DNS, timeout, reset)
        """
        filename = filename_from_url(url)
        limit = self.settings.max_file_size_bytes

        async with self.client.stream('GET', url) as response:
            if not response.is_success:
                logger.warning(f'Image fetch failed ({response.status_code}): {url}')
                raise ImageFetchError(url, response.status_code)

            content_type = response.headers.get('content-type', '').split(';')[0].strip().lower()
            if content_type and not (content_type.startswith('image/') or content_type in OPAQUE_CONTENT_TYPES):
                raise InvalidImageError(
                    filename, f'URL did not return an image ({content_type})', code='INVALID_FILE_TYPE'
                )

            content_length = response.headers.get('content-length', '')
            if content_length.isdigit() and int(content_length) > limit:
                logger.warning(f'Image at {url} declares {content_length} bytes, over the {limit} byte limit')
                raise self._too_large(filename)

            chunks = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if received > limit:
                    logger.warning(f'Image download from {url} aborted after {received} bytes')
                    raise self._too_large(filename)
                chunks.append(chunk)

        return b''.join(chunks)

    def _too_large(self, filename: str) -> InvalidImageError:
        return InvalidImageError(
            filename,
            f'File too large. Maximum size: {self.settings.max_file_size_mb}MB',
            code='FILE_TOO_LARGE',
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
