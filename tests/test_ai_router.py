"""
AI endpoints: upload validation, URL and batch analysis, feedback, capabilities.
"""

from fashion_api.config import Settings
from fashion_api.core.dependencies import get_analysis_service, get_image_service
from fashion_api.main import app
from fashion_api.services.analysis import FashionAnalysisService
from fashion_api.services.image import ImageService


JPEG = ('shirt.jpg', b'\xff\xd8\xff\xe0 fake jpeg', 'image/jpeg')


class ExplodingAnalysisService(FashionAnalysisService):
    async def process_item_image(self, image_bytes, filename):
        raise RuntimeError('model crashed')


def test_process_requires_auth(client):
    response = client.post('/ai/process', files={'image': JPEG})

    assert response.status_code == 401
    assert response.json() == {'error': {'code': 'UNAUTHORIZED', 'message': 'Authentication required'}}


def test_process_rejects_invalid_token(client):
    response = client.post('/ai/process', files={'image': JPEG}, headers={'Authorization': 'Bearer nope'})

    assert response.status_code == 401
    assert response.json()['error']['code'] == 'TOKEN_INVALID'


def test_process_requires_image(client, auth_headers):
    response = client.post('/ai/process', headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error'] == {'code': 'NO_IMAGE', 'message': 'Image file is required'}


def test_process_rejects_non_image(client, auth_headers):
    response = client.post(
        '/ai/process', files={'image': ('notes.txt', b'hello', 'text/plain')}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'INVALID_FILE_TYPE'


def test_process_accepts_octet_stream_with_image_extension(client, auth_headers):
    response = client.post(
        '/ai/process',
        files={'image': ('photo.webp', b'RIFF....WEBP', 'application/octet-stream')},
        headers=auth_headers(),
    )

    assert response.status_code == 200


def test_process_returns_analysis_and_suggestions(client, auth_headers):
    response = client.post('/ai/process', files={'image': JPEG}, headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Image processed successfully'
    analysis = body['analysis']
    assert analysis['domain'] == 'APPAREL'
    assert analysis['detectedBrand'] == 'Nike®'
    assert analysis['detectedPieceType'] == 'Shirts'
    assert analysis['detectedMaterial'] == 'Cotton'
    assert analysis['backgroundRemoved'] is False
    assert body['suggestions']['vufsData']['brand'] == 'Nike®'
    assert body['suggestions']['needsReview'] is True
    assert 'X-Process-Time' in response.headers


def test_process_rejects_upload_over_configured_limit(client, auth_headers):
    app.dependency_overrides[get_image_service] = lambda: ImageService(Settings(max_file_size_mb=1))
    photo = ('big.jpg', b'\xff\xd8' + b'\0' * (2 * 1024 * 1024), 'image/jpeg')

    response = client.post('/ai/process', files={'image': photo}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error'] == {
        'code': 'FILE_TOO_LARGE',
        'message': 'File size 2.00MB exceeds maximum 1MB',
    }


def test_process_unexpected_failure_is_500(client, auth_headers, fake_aws):
    app.dependency_overrides[get_analysis_service] = lambda: ExplodingAnalysisService(fake_aws)

    response = client.post('/ai/process', files={'image': JPEG}, headers=auth_headers())

    assert response.status_code == 500
    assert response.json()['error'] == {
        'code': 'PROCESSING_ERROR',
        'message': 'An error occurred while processing the image',
    }


def test_analyze_url_requires_url(client, auth_headers):
    response = client.post('/ai/analyze-url', json={}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error'] == {'code': 'MISSING_URL', 'message': 'Image URL is required'}


def test_analyze_url_rejects_other_schemes(client, auth_headers):
    response = client.post('/ai/analyze-url', json={'imageUrl': 'ftp://example.com/a.jpg'}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'INVALID_URL'


def test_analyze_url_unreachable_image(client, auth_headers):
    response = client.post(
        '/ai/analyze-url', json={'imageUrl': 'https://images.example.com/gone.jpg'}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert response.json()['error'] == {'code': 'INVALID_URL', 'message': 'Could not fetch image from URL'}


def test_analyze_url_success(client, auth_headers, fake_fetcher):
    url = 'https://images.example.com/shirt.jpg'

    response = client.post('/ai/analyze-url', json={'imageUrl': url}, headers=auth_headers())

    assert response.status_code == 200
    assert response.json()['message'] == 'Image analyzed successfully'
    assert fake_fetcher.requested == [url]


def test_analyze_url_rejects_oversized_image(client, auth_headers, fake_fetcher):
    url = 'https://images.example.com/poster.jpg'
    fake_fetcher.images[url] = b'\0' * (11 * 1024 * 1024)

    response = client.post('/ai/analyze-url', json={'imageUrl': url}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'FILE_TOO_LARGE'


def test_batch_fails_only_oversized_item(client, auth_headers, fake_fetcher):
    big_url = 'https://images.example.com/poster.jpg'
    fake_fetcher.images[big_url] = b'\0' * (11 * 1024 * 1024)
    urls = ['https://images.example.com/shirt.jpg', big_url]

    response = client.post('/ai/batch-process', json={'imageUrls': urls}, headers=auth_headers())

    assert response.status_code == 200
    results = response.json()['results']
    assert [r['success'] for r in results] == [True, False]
    assert results[1]['error'] == 'File size 11.00MB exceeds maximum 10MB'


def test_batch_requires_url_array(client, auth_headers):
    for body in ({}, {'imageUrls': []}, {'imageUrls': 'https://images.example.com/shirt.jpg'}):
        response = client.post('/ai/batch-process', json=body, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()['error'] == {'code': 'INVALID_INPUT', 'message': 'Array of image URLs is required'}


def test_batch_limits_size(client, auth_headers):
    urls = [f'https://images.example.com/{i}.jpg' for i in range(11)]

    response = client.post('/ai/batch-process', json={'imageUrls': urls}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error'] == {'code': 'TOO_MANY_IMAGES', 'message': 'Maximum 10 images allowed per batch'}


def test_batch_reports_each_url(client, auth_headers):
    urls = ['https://images.example.com/shirt.jpg', 'https://images.example.com/gone.jpg']

    response = client.post('/ai/batch-process', json={'imageUrls': urls}, headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body['summary'] == {'total': 2, 'successful': 1, 'failed': 1}
    assert body['results'][0]['success'] is True
    assert body['results'][1]['error'] == 'Could not fetch image'
    assert body['message'] == 'Batch processing completed: 1/2 images processed successfully'


def test_extract_vufs(client, auth_headers):
    response = client.post('/ai/extract-vufs', files={'image': JPEG}, headers=auth_headers())

    assert response.status_code == 200
    extraction = response.json()['extraction']
    assert extraction['category']['page'] == 'Apparel'
    assert extraction['category']['whiteSubcategory'] == 'Shirts'
    assert extraction['brand']['brand'] == 'Nike®'
    assert extraction['metadata']['careInstructions'][0] == 'Machine wash cold'


def test_feedback_is_stored(client, auth_headers, db_session):
    from fashion_api.db.models import AIFeedback

    payload = {
        'feedbackType': 'correction',
        'aiSuggestions': {'brand': 'Nike®'},
        'userCorrections': {'brand': 'Adidas®'},
    }

    response = client.post('/ai/feedback', json=payload, headers=auth_headers('user-7'))

    assert response.status_code == 201
    feedback_id = response.json()['feedbackId']
    record = db_session.get(AIFeedback, feedback_id)
    assert record.user_id == 'user-7'
    assert record.user_corrections == {'brand': 'Adidas®'}


def test_feedback_validates_type(client, auth_headers):
    response = client.post('/ai/feedback', json={'feedbackType': 'rating'}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'VALIDATION_ERROR'


def test_capabilities_is_public(client):
    response = client.get('/ai/capabilities')

    assert response.status_code == 200
    body = response.json()
    assert body['supportedDomains'] == ['APPAREL', 'FOOTWEAR']
    assert body['supportedBrands'] == ['Adidas®', 'Nike®', 'Zara®', 'H&M', 'Uniqlo®']
    assert body['maxFileSize'] == '10MB'
    assert body['maxBatchSize'] == 10
    assert body['confidenceThreshold'] == 70
    assert body['capabilities']['backgroundRemoval'] is False
