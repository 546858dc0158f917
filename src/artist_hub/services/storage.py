"""Artwork object storage backends."""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

from artist_hub.config import Settings, get_settings
from artist_hub.services.base import APIError, BaseAPIClient, NotFoundError

logger = logging.getLogger(__name__)

ARTWORK_PREFIX = "release-artwork"
PLACEHOLDER_MARKER = "placeholder"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageError(Exception):
    """Raised when the object store cannot complete an operation."""


class StorageObjectNotFoundError(StorageError):
    """Raised when a referenced object does not exist."""


def is_placeholder_artwork(reference: str | None) -> bool:
    """Placeholder references are never deleted by cleanup."""
    return bool(reference) and PLACEHOLDER_MARKER in reference


def sanitize_filename(filename: str) -> str:
    """Reduce an uploaded filename to a safe single path segment."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
    return name or "artwork"


def artwork_object_key(user_id: int, filename: str, now: datetime | None = None) -> str:
    """Build the storage key for an artwork upload.

    Keys are derived from the owner, the upload time in epoch milliseconds and
    the original filename.
    """
    now = now or datetime.now(UTC)
    timestamp = int(now.timestamp() * 1000)
    return f"{ARTWORK_PREFIX}/{user_id}/{user_id}_{timestamp}_{sanitize_filename(filename)}"


class ArtworkStorage(ABC):
    """Interface of the artwork object store."""

    base_url: str

    def owner_prefix(self, user_id: int) -> str:
        """Reference prefix of every object stored for a user."""
        return f"{self.base_url}/{ARTWORK_PREFIX}/{user_id}/"

    def owns(self, reference: str | None, user_id: int) -> bool:
        """Whether a reference was issued by this store for the given user."""
        if not reference:
            return False
        prefix = self.owner_prefix(user_id)
        return reference.startswith(prefix) and ".." not in reference[len(prefix) :].split("/")

    @abstractmethod
    async def upload(self, user_id: int, filename: str, content: bytes, content_type: str) -> str:
        """Store an artwork file and return its durable retrieval reference."""
        ...

    @abstractmethod
    async def delete(self, reference: str) -> None:
        """Delete the object behind a reference.

        Raises:
            StorageObjectNotFoundError: If no such object exists.
            StorageError: For any other failure.
        """
        ...


class LocalArtworkStorage(ArtworkStorage):
    """Stores artwork on the local filesystem, served under ``base_url``."""

    def __init__(self, root: str | Path, base_url: str = "/artwork") -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path_for(self, reference: str) -> Path:
        prefix = f"{self.base_url}/"
        if not reference.startswith(prefix):
            raise StorageObjectNotFoundError(f"Not a stored artwork reference: {reference}")
        key = reference[len(prefix) :]
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageObjectNotFoundError(f"Not a stored artwork reference: {reference}")
        return path

    async def upload(self, user_id: int, filename: str, content: bytes, content_type: str) -> str:
        key = artwork_object_key(user_id, filename)
        path = self.root / key

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise StorageError(f"Failed to store artwork: {e}") from e

        logger.info("Stored artwork %s (%d bytes, %s)", key, len(content), content_type)
        return f"{self.base_url}/{key}"

    async def delete(self, reference: str) -> None:
        path = self._path_for(reference)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as e:
            raise StorageObjectNotFoundError(f"Artwork not found: {reference}") from e
        except OSError as e:
            raise StorageError(f"Failed to delete artwork: {e}") from e
        logger.info("Deleted artwork %s", reference)


class HttpArtworkStorage(BaseAPIClient, ArtworkStorage):
    """Stores artwork in a remote object store over HTTP.

    Objects are written with ``PUT <base_url>/<key>`` and removed with
    ``DELETE <base_url>/<key>``; the object URL is the retrieval reference.
    References that do not point into ``base_url`` are never requested.
    """

    def __init__(self, base_url: str, token: str = "", timeout: float = 30.0) -> None:
        if not base_url:
            raise ValueError("Artwork storage URL is required")
        self._token = token
        super().__init__(base_url=base_url, timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def upload(self, user_id: int, filename: str, content: bytes, content_type: str) -> str:
        key = artwork_object_key(user_id, filename)
        try:
            await self.put(f"/{key}", content=content, headers={"Content-Type": content_type})
        except APIError as e:
            raise StorageError(f"Failed to store artwork: {e}") from e
        logger.info("Uploaded artwork %s to object store", key)
        return f"{self.base_url}/{key}"

    async def delete(self, reference: str) -> None:
        key = reference.removeprefix(f"{self.base_url}/")
        if key == reference or not key or ".." in key.split("/"):
            raise StorageObjectNotFoundError(f"Not a stored artwork reference: {reference}")
        try:
            await self._request("DELETE", f"/{key}")
        except NotFoundError as e:
            raise StorageObjectNotFoundError(f"Artwork not found: {reference}") from e
        except APIError as e:
            raise StorageError(f"Failed to delete artwork: {e}") from e
        logger.info("Deleted artwork %s from object store", reference)


def build_artwork_storage(settings: Settings) -> ArtworkStorage:
    """Create the artwork storage backend selected in settings."""
    if settings.artwork_storage_backend == "http":
        return HttpArtworkStorage(
            base_url=settings.artwork_storage_url,
            token=settings.artwork_storage_token,
        )
    return LocalArtworkStorage(settings.artwork_storage_dir, settings.artwork_base_url)


async def get_artwork_storage() -> AsyncGenerator[ArtworkStorage]:
    """Dependency that provides the configured artwork storage backend.

    HTTP-backed storage is closed once the request is done.
    """
    storage = build_artwork_storage(get_settings())
    try:
        yield storage
    finally:
        if isinstance(storage, BaseAPIClient):
            await storage.close()
