"""
Shared fixtures.

The application runs against an in-memory SQLite database and fake AWS /
HTTP clients; no network access or credentials are needed.
"""

import os


os.environ.update(
    {
        'DATABASE_URL': 'sqlite://',
        'JWT_SECRET': 'test-secret',
        'ENABLE_BACKGROUND_REMOVAL': 'false',
        'AWS_S3_BUCKET': 'test-bucket',
        'AWS_REGION': 'us-east-1',
        'S3_PUBLIC_BASE_URL': 'https://cdn.example.com',
    }
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fashion_api.core.dependencies import get_aws_client, get_image_fetcher  # noqa: E402
from fashion_api.core.exceptions import ImageFetchError  # noqa: E402
from fashion_api.core.security import create_access_token  # noqa: E402
from fashion_api.db import get_db, init_db  # noqa: E402
from fashion_api.main import app  # noqa: E402


SHIRT_LABELS = [
    {'Name': 'Shirt', 'Confidence': 97.1},
    {'Name': 'Clothing', 'Confidence': 99.0},
    {'Name': 'Blue', 'Confidence': 88.4},
]

TAG_TEXT = [
    {'Type': 'LINE', 'DetectedText': 'NIKE'},
    {'Type': 'WORD', 'DetectedText': 'NIKE'},
    {'Type': 'LINE', 'DetectedText': '100% COTTON'},
]


class FakeAWSClient:
    """Stands in for AWSClient; records uploads and returns canned detections."""

    def __init__(self, labels=None, text=None, prediction=None):
        self.labels = SHIRT_LABELS if labels is None else labels
        self.text = TAG_TEXT if text is None else text
        self.prediction = prediction
        self.uploads = []
        self.fail_labels = False
        self.fail_text = False
        self.fail_model = False

    def object_url(self, key):
        return f'https://cdn.example.com/{key}'

    def upload_image(self, data, key, content_type='image/jpeg'):
        self.uploads.append((key, content_type, len(data)))
        return self.object_url(key)

    def generate_presigned_upload(self, key, content_type, expires_in=None):
        return f'https://test-bucket.s3.amazonaws.com/{key}?signature=abc&expires={expires_in}'

    def detect_labels(self, image_bytes):
        if self.fail_labels:
            raise RuntimeError('rekognition unavailable')
        return list(self.labels)

    def detect_text(self, image_bytes):
        if self.fail_text:
            raise RuntimeError('text detection unavailable')
        return list(self.text)

    def invoke_fashion_model(self, image_bytes, endpoint_name=None):
        if self.fail_model:
            raise RuntimeError('endpoint crashed')
        return self.prediction


class FakeImageFetcher:
    """Serves bytes for known URLs; unknown URLs behave like a 404."""

    def __init__(self, images=None):
        self.images = images or {}
        self.requested = []

    async def fetch(self, url):
        self.requested.append(url)
        if url not in self.images:
            raise ImageFetchError(url, 404)
        return self.images[url]

    async def close(self):
        pass


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_aws():
    return FakeAWSClient()


@pytest.fixture
def fake_fetcher():
    return FakeImageFetcher(
        {
            'https://images.example.com/shirt.jpg': b'\xff\xd8\xff fake jpeg',
            'https://images.example.com/sneaker.jpg': b'\xff\xd8\xff another jpeg',
        }
    )


@pytest.fixture
def client(session_factory, fake_aws, fake_fetcher):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_aws_client] = lambda: fake_aws
    app.dependency_overrides[get_image_fetcher] = lambda: fake_fetcher

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(user_id='user-1', roles=None):
        return {'Authorization': f'Bearer {create_access_token(user_id, roles=roles)}'}

    return make
