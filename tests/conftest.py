"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DISTRIBUTION_API_URL", "")

import artist_hub.models  # noqa: E402,F401 - registers tables on Base.metadata
from artist_hub.database import Base, get_db  # noqa: E402
from artist_hub.main import app  # noqa: E402
from artist_hub.models.release import Release, ReleaseStatus  # noqa: E402
from artist_hub.models.user import User  # noqa: E402
from artist_hub.services.base import APIError  # noqa: E402
from artist_hub.services.distribution import (  # noqa: E402
    DistributionClient,
    get_distribution_client,
)
from artist_hub.services.storage import (  # noqa: E402
    ArtworkStorage,
    StorageObjectNotFoundError,
    artwork_object_key,
    get_artwork_storage,
)
from artist_hub.utils.security import create_access_token, hash_password  # noqa: E402


class FakeArtworkStorage(ArtworkStorage):
    """In-memory artwork store with optional fault injection."""

    base_url = "https://storage.test"

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.delete_error: Exception | None = None
        self.upload_error: Exception | None = None

    async def upload(self, user_id: int, filename: str, content: bytes, content_type: str) -> str:
        if self.upload_error is not None:
            raise self.upload_error
        reference = f"{self.base_url}/{artwork_object_key(user_id, filename)}"
        self.objects[reference] = content
        return reference

    async def delete(self, reference: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        if reference not in self.objects:
            raise StorageObjectNotFoundError(reference)
        del self.objects[reference]
        self.deleted.append(reference)

    def put(self, user_id: int, name: str = "cover.png", content: bytes = b"image") -> str:
        """Seed an object stored for a user and return its reference."""
        reference = f"{self.owner_prefix(user_id)}{user_id}_1700000000000_{name}"
        self.objects[reference] = content
        return reference


class RecordingDistributionClient(DistributionClient):
    """Distribution client that records notifications instead of sending them."""

    def __init__(self) -> None:
        super().__init__(base_url="", api_key="")
        self.takedowns: list[str] = []
        self.cancellations: list[str] = []
        self.error: APIError | None = None

    async def request_takedown(self, release: Release, requested_at: datetime) -> None:
        if self.error is not None:
            raise self.error
        self.takedowns.append(release.id)

    async def cancel_takedown(self, release: Release) -> None:
        if self.error is not None:
            raise self.error
        self.cancellations.append(release.id)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession]:
    """Session bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def storage() -> FakeArtworkStorage:
    return FakeArtworkStorage()


@pytest.fixture
def distribution() -> RecordingDistributionClient:
    return RecordingDistributionClient()


async def _create_user(
    db: AsyncSession,
    username: str = "ada",
    email: str = "ada.lovelace@example.com",
    display_name: str | None = None,
) -> User:
    """Insert a user account."""
    user = User(
        username=username,
        email=email,
        display_name=display_name,
        hashed_password=hash_password("securepassword123"),
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def _create_release(
    db: AsyncSession,
    user: User,
    *,
    title: str = "Night Shift",
    release_date: str = "2024-03-15",
    status: ReleaseStatus = ReleaseStatus.COMPLETED,
    artwork_url: str | None = None,
    tracks: list[str] | None = None,
    upload_reference: str | None = "upload_1_1700000000000",
    created_at: datetime | None = None,
) -> Release:
    """Insert a release directly, bypassing the lifecycle manager."""
    release = Release(
        user_id=user.id,
        title=title,
        artist="Ada",
        release_date=release_date,
        artwork_url=artwork_url,
        tracks=tracks if tracks is not None else ["Intro", "Outro"],
        status=status,
        upload_reference=upload_reference,
    )
    if created_at is not None:
        release.created_at = created_at
    db.add(release)
    await db.flush()
    return release


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory inserting user accounts."""

    async def factory(**kwargs) -> User:
        return await _create_user(db_session, **kwargs)

    return factory


@pytest.fixture
def make_release(db_session: AsyncSession):
    """Factory inserting releases directly, bypassing the lifecycle manager."""

    async def factory(user: User, **kwargs) -> Release:
        return await _create_release(db_session, user, **kwargs)

    return factory


@pytest.fixture
async def user(make_user) -> User:
    return await make_user()


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(
    db_session: AsyncSession,
    storage: FakeArtworkStorage,
    distribution: RecordingDistributionClient,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client with the database, storage and distribution overridden."""

    async def override_get_db():
        yield db_session

    async def override_get_artwork_storage():
        yield storage

    async def override_get_distribution_client():
        yield distribution

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_artwork_storage] = override_get_artwork_storage
    app.dependency_overrides[get_distribution_client] = override_get_distribution_client

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
