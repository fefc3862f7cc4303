import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="meetfood-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp}/test.db"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["LOG_FILE"] = os.path.join(_tmp, "app.log")
os.environ["MEDIA_BASE_URL"] = "http://testserver"

import pytest
from httpx import ASGITransport, AsyncClient

from meetfood.api.deps import get_blob_store, get_identity
from meetfood.core.exceptions import StorageError
from meetfood.core.security import create_access_token
from meetfood.db.base import Base
from meetfood.db.session import async_session_maker, engine
from meetfood.main import app
from meetfood.schemas.video_post import VideoPostCreate
from meetfood.services.identity_service import LocalIdentityProvider
from meetfood.services.user_service import create_user
from meetfood.services.video_service import create_video_post


class FakeStorage:
    """In-memory blob store that records requests and can be told to fail."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self._n = 0

    def put(self, data, content_class, ext):
        self._n += 1
        url = f"http://blobs/{content_class.value}/{self._n}{ext}"
        self.objects[url] = data
        return url

    def delete(self, url, content_class):
        if url in self.fail_on:
            raise StorageError(f"cannot delete {url}")
        self.deleted.append((url, content_class.value))
        return self.objects.pop(url, None) is not None


class FakeIdentity(LocalIdentityProvider):
    """Real token verification; account deletion is only recorded."""

    def __init__(self):
        super().__init__()
        self.deleted_emails: list[str] = []

    async def delete_account(self, email):
        self.deleted_emails.append(email)
        return True


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db():
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
async def client(storage, identity):
    app.dependency_overrides[get_blob_store] = lambda: storage
    app.dependency_overrides[get_identity] = lambda: identity
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(subject: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject)}"}


async def make_user(db, subject: str, email: str | None = None):
    user = await create_user(db, subject, email or f"{subject}@example.com")
    await db.commit()
    return user


async def make_post(db, author, title: str = "Ramen night", **overrides):
    data = VideoPostCreate(
        post_title=title,
        image_url=overrides.pop("image_url", f"http://blobs/coverImage/{title}.jpg"),
        video_url=overrides.pop("video_url", f"http://blobs/video/{title}.mp4"),
        restaurant_name=overrides.pop("restaurant_name", "Ippudo"),
        restaurant_address=overrides.pop("restaurant_address", "65 4th Ave, New York"),
        ordered_via=overrides.pop("ordered_via", "dine-in"),
    )
    post = await create_video_post(db, author, data)
    for key, value in overrides.items():
        setattr(post, key, value)
    await db.commit()
    return post
