"""Release lifecycle manager.

Creates, reads, updates and removes releases owned by the current identity.
Every operation takes the identity explicitly; without one, reads return
empty results and writes raise ``AuthenticationRequiredError``.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.config import get_settings
from artist_hub.database import utcnow
from artist_hub.models.release import Release, ReleaseStatus, new_release_id
from artist_hub.models.user import User
from artist_hub.schemas.release import ExistingReleaseCreate, ReleaseUpdate, ReleaseUploadCreate
from artist_hub.services.errors import (
    AuthenticationRequiredError,
    PersistenceError,
    ReleaseNotFoundError,
    ReleaseValidationError,
)
from artist_hub.services.identity import resolve_artist_name
from artist_hub.services.storage import (
    ArtworkStorage,
    StorageError,
    StorageObjectNotFoundError,
    is_placeholder_artwork,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtworkUpload:
    """An artwork file supplied with a release update."""

    filename: str
    content: bytes
    content_type: str


def require_identity(user: User | None) -> User:
    """Return the identity or fail with ``AuthenticationRequiredError``."""
    if user is None:
        raise AuthenticationRequiredError()
    return user


@contextmanager
def backing_store(action: str) -> Iterator[None]:
    """Translate database failures into a generic ``PersistenceError``."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Backing store failure while trying to %s", action)
        raise PersistenceError() from e


def upload_reference(user_id: int, now: datetime) -> str:
    """Reference for a release archive handed to the upload pipeline."""
    return f"upload_{user_id}_{int(now.timestamp() * 1000)}"


def validate_artwork(artwork: ArtworkUpload, max_bytes: int) -> None:
    """Reject artwork files that are not acceptable images.

    Raises:
        ReleaseValidationError: If the file is empty, too large or not an image.
    """
    if not artwork.filename.strip():
        raise ReleaseValidationError("Artwork filename is required.")
    if not artwork.content_type.startswith("image/"):
        raise ReleaseValidationError("Artwork must be an image file.")
    if not artwork.content:
        raise ReleaseValidationError("Artwork file is empty.")
    if len(artwork.content) > max_bytes:
        raise ReleaseValidationError(
            f"Artwork must be {max_bytes // (1024 * 1024)}MB or less."
        )


async def discard_artwork(storage: ArtworkStorage, reference: str | None, user_id: int) -> bool:
    """Best-effort removal of stored artwork owned by ``user_id``.

    Placeholder and empty references are skipped, as are references the store
    did not issue under the owner's prefix. A missing object is ignored and
    any other failure is logged and swallowed.

    Returns:
        True if an object was deleted.
    """
    if not reference or is_placeholder_artwork(reference):
        return False
    if not storage.owns(reference, user_id):
        logger.info("Skipping cleanup of artwork %s not stored for user %s", reference, user_id)
        return False
    try:
        await storage.delete(reference)
    except StorageObjectNotFoundError:
        logger.debug("Artwork %s was already gone", reference)
        return False
    except Exception:
        logger.warning("Failed to delete artwork %s", reference, exc_info=True)
        return False
    return True


async def get_owned_release(db: AsyncSession, user_id: int, release_id: str) -> Release:
    """Load a release by ``(user_id, release_id)``.

    Raises:
        ReleaseNotFoundError: If the user owns no such release.
    """
    with backing_store("load release"):
        result = await db.execute(
            select(Release).where(Release.id == release_id, Release.user_id == user_id)
        )
        release = result.scalar_one_or_none()
    if release is None:
        raise ReleaseNotFoundError()
    return release


async def list_releases(
    db: AsyncSession,
    user: User | None,
    *,
    page: int = 1,
    page_size: int = 20,
    status: ReleaseStatus | None = None,
) -> tuple[list[Release], int]:
    """List the user's releases, newest release date first.

    Returns:
        The requested page of releases and the total count.
    """
    if user is None:
        return [], 0

    base_query = select(Release).where(Release.user_id == user.id)
    if status is not None:
        base_query = base_query.where(Release.status == status)

    with backing_store("list releases"):
        count_query = select(func.count()).select_from(base_query.subquery())
        total = (await db.execute(count_query)).scalar_one()

        offset = (page - 1) * page_size
        results_query = (
            base_query.order_by(Release.release_date.desc(), Release.created_at.desc())
            .offset(offset)
            .limit(page_size)
        )
        releases = list((await db.execute(results_query)).scalars().all())

    return releases, total


async def get_release(db: AsyncSession, user: User | None, release_id: str) -> Release:
    """Get one of the user's releases."""
    if user is None:
        raise ReleaseNotFoundError()
    return await get_owned_release(db, user.id, release_id)


async def latest_artwork_url(db: AsyncSession, user: User | None) -> str | None:
    """Artwork of the most recently created release, if it has any."""
    if user is None:
        return None

    with backing_store("load latest artwork"):
        result = await db.execute(
            select(Release.artwork_url)
            .where(Release.user_id == user.id)
            .order_by(Release.created_at.desc())
            .limit(1)
        )
        artwork_url = result.scalar_one_or_none()

    if artwork_url and artwork_url.strip():
        return artwork_url
    return None


async def release_summary(db: AsyncSession, user: User | None) -> dict[ReleaseStatus, int]:
    """Count the user's releases in each status."""
    counts = dict.fromkeys(ReleaseStatus, 0)
    if user is None:
        return counts

    with backing_store("summarize releases"):
        result = await db.execute(
            select(Release.status, func.count())
            .where(Release.user_id == user.id)
            .group_by(Release.status)
        )
        for status, count in result.all():
            counts[ReleaseStatus(status)] = count

    return counts


async def create_from_upload(
    db: AsyncSession,
    user: User | None,
    meta: ReleaseUploadCreate,
    *,
    now: datetime | None = None,
) -> Release:
    """Register an uploaded release; the upload pipeline fills in tracks and artwork."""
    user = require_identity(user)
    now = now or utcnow()

    with backing_store("create release"):
        artist = await resolve_artist_name(db, user)
        release = Release(
            id=new_release_id(),
            user_id=user.id,
            title=meta.title,
            artist=artist,
            release_date=meta.release_date,
            artwork_url=None,
            tracks=[],
            spotify_link=None,
            upload_reference=upload_reference(user.id, now),
            status=ReleaseStatus.PROCESSING,
            created_at=now,
            updated_at=now,
        )
        db.add(release)
        await db.flush()

    logger.info(
        "Release %s created from upload %s (%s) for user %s",
        release.id,
        release.upload_reference,
        meta.archive_name or "unnamed archive",
        user.id,
    )
    return release


async def create_existing(
    db: AsyncSession,
    user: User | None,
    data: ExistingReleaseCreate,
    *,
    now: datetime | None = None,
) -> Release:
    """Add a release that is already live outside this system."""
    user = require_identity(user)
    now = now or utcnow()

    with backing_store("create release"):
        artist = await resolve_artist_name(db, user, data.artist)
        release = Release(
            id=new_release_id(),
            user_id=user.id,
            title=data.title,
            artist=artist,
            release_date=data.release_date,
            artwork_url=data.artwork_url,
            tracks=list(data.tracks),
            spotify_link=str(data.spotify_link) if data.spotify_link else None,
            upload_reference=None,
            status=ReleaseStatus.EXISTING,
            created_at=now,
            updated_at=now,
        )
        db.add(release)
        await db.flush()

    logger.info("Existing release %s added for user %s", release.id, user.id)
    return release


async def update_release(
    db: AsyncSession,
    user: User | None,
    release_id: str,
    patch: ReleaseUpdate,
    storage: ArtworkStorage,
    artwork: ArtworkUpload | None = None,
    *,
    max_artwork_bytes: int | None = None,
    now: datetime | None = None,
) -> Release:
    """Update the editable fields of a release.

    Artwork follows exactly one of three paths: a new file replaces it, an
    explicit null in the patch clears it, otherwise it is left untouched.
    Replaced artwork is removed best-effort once the record is written.
    """
    user = require_identity(user)
    if artwork is not None:
        if max_artwork_bytes is None:
            max_artwork_bytes = get_settings().artwork_max_bytes
        validate_artwork(artwork, max_artwork_bytes)

    release = await get_owned_release(db, user.id, release_id)
    previous_artwork = release.artwork_url
    changes = patch.model_dump(exclude_unset=True, exclude={"artwork_url"})

    for field in ("title", "artist", "release_date", "tracks"):
        if changes.get(field) is not None:
            setattr(release, field, changes[field])
    if "spotify_link" in changes:
        release.spotify_link = str(patch.spotify_link) if patch.spotify_link else None

    replaced_artwork: str | None = None
    new_artwork: str | None = None
    if artwork is not None:
        try:
            new_artwork = await storage.upload(
                user.id, artwork.filename, artwork.content, artwork.content_type
            )
        except StorageError as e:
            logger.error("Artwork upload failed for release %s: %s", release_id, e)
            raise PersistenceError() from e
        release.artwork_url = new_artwork
        replaced_artwork = previous_artwork
    elif patch.clears_artwork:
        release.artwork_url = None
        replaced_artwork = previous_artwork

    release.updated_at = now or utcnow()

    try:
        with backing_store("update release"):
            await db.flush()
    except PersistenceError:
        await discard_artwork(storage, new_artwork, user.id)
        raise

    if replaced_artwork and replaced_artwork != release.artwork_url:
        await discard_artwork(storage, replaced_artwork, user.id)

    logger.info("Release %s updated for user %s", release.id, user.id)
    return release


async def remove_release(
    db: AsyncSession,
    user: User | None,
    release_id: str,
    storage: ArtworkStorage,
) -> None:
    """Delete a release and, best-effort, its stored artwork.

    Artwork cleanup never blocks the record deletion.
    """
    user = require_identity(user)
    release = await get_owned_release(db, user.id, release_id)

    await discard_artwork(storage, release.artwork_url, user.id)
    if release.upload_reference:
        logger.warning(
            "Uploaded archive %s for release %s must be removed from the upload pipeline",
            release.upload_reference,
            release.id,
        )

    with backing_store("remove release"):
        await db.delete(release)
        await db.flush()

    logger.info("Release %s removed for user %s", release_id, user.id)
