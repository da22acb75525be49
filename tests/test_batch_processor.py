import asyncio

import httpx
from conftest import FakeAWSClient, FakeImageFetcher

from fashion_api.config import Settings
from fashion_api.services.analysis import FashionAnalysisService
from fashion_api.services.batch import BatchProcessor


GOOD_URL = 'https://images.example.com/shirt.jpg'
MISSING_URL = 'https://images.example.com/missing.jpg'


class TimeoutFetcher(FakeImageFetcher):
    async def fetch(self, url):
        raise httpx.ConnectTimeout('timed out')


class CrashingAnalysisService(FashionAnalysisService):
    async def process_item_image(self, image_bytes, filename):
        raise RuntimeError('model crashed')


def make_processor(fetcher, analysis_class=FashionAnalysisService, **overrides):
    settings = Settings(**{'enable_background_removal': False, **overrides})
    return BatchProcessor(fetcher, analysis_class(FakeAWSClient(), settings=settings))


def test_batch_results_stay_index_aligned():
    fetcher = FakeImageFetcher({GOOD_URL: b'jpeg'})
    processor = make_processor(fetcher)

    response = asyncio.run(processor.process_urls([MISSING_URL, GOOD_URL, MISSING_URL]))

    assert [r.index for r in response.results] == [0, 1, 2]
    assert [r.success for r in response.results] == [False, True, False]
    assert response.results[0].error == 'Could not fetch image'
    assert response.results[1].analysis.detected_brand == 'Nike®'
    assert response.summary.total == 3
    assert response.summary.successful == 1
    assert response.summary.failed == 2
    assert response.message == 'Batch processing completed: 1/3 images processed successfully'


def test_network_failure_is_per_item():
    processor = make_processor(TimeoutFetcher())

    response = asyncio.run(processor.process_urls([GOOD_URL]))

    assert response.results[0].success is False
    assert response.results[0].error == 'timed out'
    assert response.summary.failed == 1


def test_oversized_image_fails_only_its_item():
    big_url = 'https://images.example.com/huge.jpg'
    fetcher = FakeImageFetcher({GOOD_URL: b'jpeg', big_url: b'\0' * (2 * 1024 * 1024)})
    processor = make_processor(fetcher, max_file_size_mb=1)

    response = asyncio.run(processor.process_urls([GOOD_URL, big_url]))

    assert [r.success for r in response.results] == [True, False]
    assert response.results[1].error == 'File size 2.00MB exceeds maximum 1MB'
    assert response.results[1].analysis is None
    assert response.summary.successful == 1
    assert response.summary.failed == 1


def test_analysis_exception_message_becomes_item_error():
    fetcher = FakeImageFetcher({GOOD_URL: b'jpeg'})
    processor = make_processor(fetcher, analysis_class=CrashingAnalysisService)

    response = asyncio.run(processor.process_urls([GOOD_URL, MISSING_URL]))

    assert response.results[0].success is False
    assert response.results[0].error == 'model crashed'
    assert response.results[1].error == 'Could not fetch image'
    assert response.summary.failed == 2
