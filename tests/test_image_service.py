import sys
import types

import pytest

from fashion_api.config import Settings
from fashion_api.core.exceptions import InvalidImageError
from fashion_api.services.image import ImageService


@pytest.fixture
def service():
    return ImageService(Settings(max_file_size_mb=1))


@pytest.fixture
def session_loader(monkeypatch):
    """Swap rembg's session factory for one that records each model it builds."""
    loaded = []

    def new_session(model_name):
        loaded.append(model_name)
        return object()

    monkeypatch.setitem(sys.modules, 'rembg', types.SimpleNamespace(new_session=new_session))
    monkeypatch.setattr(ImageService, '_rembg_sessions', {})
    return loaded


@pytest.mark.parametrize(
    'filename,content_type',
    [
        ('shirt.jpg', 'image/jpeg'),
        ('shirt', 'image/webp'),
        ('shirt.png', 'application/octet-stream'),
        ('shirt.jpeg', None),
    ],
)
def test_accepted_uploads(service, filename, content_type):
    service.validate_upload(filename, content_type, b'bytes')


@pytest.mark.parametrize(
    'filename,content_type',
    [
        ('shirt.jpg', 'text/plain'),
        ('notes.txt', 'application/octet-stream'),
        ('shirt', None),
    ],
)
def test_rejected_upload_types(service, filename, content_type):
    with pytest.raises(InvalidImageError) as exc_info:
        service.validate_upload(filename, content_type, b'bytes')

    assert exc_info.value.code == 'INVALID_FILE_TYPE'


def test_upload_over_size_limit(service):
    with pytest.raises(InvalidImageError) as exc_info:
        service.validate_upload('shirt.jpg', 'image/jpeg', b'\0' * (2 * 1024 * 1024))

    assert exc_info.value.code == 'FILE_TOO_LARGE'
    assert '2.00MB exceeds maximum 1MB' in exc_info.value.message


def test_rembg_sessions_cached_per_model(session_loader):
    first = ImageService._get_rembg_session('u2net')
    other = ImageService._get_rembg_session('isnet-general-use')

    assert first is not other
    assert ImageService._get_rembg_session('u2net') is first
    assert ImageService._get_rembg_session('isnet-general-use') is other
    assert session_loader == ['u2net', 'isnet-general-use']
