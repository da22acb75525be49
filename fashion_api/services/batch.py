"""
Batch image analysis over remote URLs.
"""

import asyncio
import logging

from fashion_api.clients.http import ImageFetcher, filename_from_url
from fashion_api.core.exceptions import ImageFetchError
from fashion_api.schemas.analysis import BatchItemResult, BatchProcessResponse, BatchSummary
from fashion_api.services.analysis import FashionAnalysisService


logger = logging.getLogger(__name__)


class BatchProcessor:
    """
    Fetches and analyzes a list of image URLs.

    Every URL is handled independently and all of them are issued at
    once; a failure is recorded on its own entry and never aborts the
    rest of the batch. Results stay index-aligned with the input.
    """

    def __init__(self, fetcher: ImageFetcher, analysis: FashionAnalysisService):
        self.fetcher = fetcher
        self.analysis = analysis

    async def _process_one(self, index: int, url: str) -> BatchItemResult:
        try:
            filename = filename_from_url(url)
            image_bytes = await self.fetcher.fetch(url)
            self.analysis.image_service.validate_size(image_bytes, filename)
            result = await self.analysis.process_item_image(image_bytes, filename)
            return BatchItemResult(index=index, image_url=url, success=True, analysis=result)
        except ImageFetchError:
            return BatchItemResult(index=index, image_url=url, success=False, error='Could not fetch image')
        except Exception as e:
            logger.warning(f'Batch item {index} failed ({url}): {e}')
            return BatchItemResult(
                index=index, image_url=url, success=False, error=str(e) or type(e).__name__
            )

    async def process_urls(self, urls: list[str]) -> BatchProcessResponse:
        """
        Analyze every URL.

        Returns:
            Per-item results plus {total, successful, failed}
        """
        results = await asyncio.gather(*(self._process_one(i, url) for i, url in enumerate(urls)))
        successful = sum(1 for r in results if r.success)
        summary = BatchSummary(total=len(urls), successful=successful, failed=len(urls) - successful)

        logger.info(f'Batch processed: {successful}/{len(urls)} succeeded')
        return BatchProcessResponse(
            message=f'Batch processing completed: {successful}/{len(urls)} images processed successfully',
            results=list(results),
            summary=summary,
        )
