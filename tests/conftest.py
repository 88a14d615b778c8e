import os
import sys
import pytest
from fastapi.testclient import TestClient

# Add the project root to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings
from core.exceptions import MediaHostFailure
from database import Database
from main import create_app
from services.media_host import CloudinaryClient, MediaUploadResult
from services.user_service import UserService

TEST_PASSWORD = "secret123"


class FakeMediaHost(CloudinaryClient):
    """Records calls instead of talking to Cloudinary."""

    def __init__(self):
        super().__init__(cloud_name="demo", api_key="key", api_secret="secret")
        self.uploads = []
        self.destroyed = []
        self.fail_upload = False
        self.fail_destroy = False

    def upload_video(self, data, filename="reel.mp4"):
        if self.fail_upload:
            raise MediaHostFailure()
        self.uploads.append((filename, data))
        public_id = f"reels/video{len(self.uploads)}"
        return MediaUploadResult(
            public_id=public_id,
            secure_url=f"https://res.cloudinary.com/demo/video/upload/v1/{public_id}.mp4",
        )

    def destroy(self, public_id):
        if self.fail_destroy:
            raise MediaHostFailure("Failed to delete media")
        self.destroyed.append(public_id)
        return True


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.create_tables()
    yield db
    db.drop_tables()
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def media_host():
    return FakeMediaHost()


@pytest.fixture
def app(settings, database, media_host):
    return create_app(settings=settings, database=database, media_host=media_host)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


# Model factories
@pytest.fixture
def create_user(db_session):
    """Factory to create a test user through the credential store."""
    counter = {"n": 0}

    def _create_user(**kwargs):
        counter["n"] += 1
        user_data = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "password": TEST_PASSWORD,
        }
        user_data.update(kwargs)
        return UserService(db_session).create_user(**user_data)
    return _create_user


# Authentication helpers
def login(client, email, password=TEST_PASSWORD):
    """Replace the client's session with a fresh login."""
    client.cookies.clear()
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


def register_and_login(client, name, email, password=TEST_PASSWORD):
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return login(client, email, password)


def upload(client, caption=None, content=b"\x00\x00\x00\x18ftypmp42", filename="clip.mp4"):
    data = {"caption": caption} if caption is not None else {}
    return client.post(
        "/reels/upload",
        files={"video": (filename, content, "video/mp4")},
        data=data,
    )
