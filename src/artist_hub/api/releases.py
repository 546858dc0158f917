"""Release API endpoints."""

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.config import Settings, get_settings
from artist_hub.database import get_db, utcnow
from artist_hub.models.release import Release, ReleaseStatus
from artist_hub.schemas.release import (
    ExistingReleaseCreate,
    LatestArtworkResponse,
    ReleaseListResponse,
    ReleaseResponse,
    ReleaseSummary,
    ReleaseUpdate,
    ReleaseUploadCreate,
)
from artist_hub.services import releases as release_service
from artist_hub.services import takedown as takedown_service
from artist_hub.services.distribution import DistributionClient, get_distribution_client
from artist_hub.services.errors import ReleaseValidationError
from artist_hub.services.releases import ArtworkUpload
from artist_hub.services.storage import ArtworkStorage, get_artwork_storage
from artist_hub.utils.security import OptionalUser

router = APIRouter(prefix="/releases", tags=["releases"])


def cancel_window(settings: Settings) -> timedelta:
    return timedelta(hours=settings.takedown_cancel_window_hours)


async def read_artwork_body(request: Request, max_bytes: int) -> bytes:
    """Read an artwork upload, stopping as soon as it exceeds ``max_bytes``.

    A declared ``Content-Length`` over the limit is rejected before any of
    the body is read.
    """
    too_large = ReleaseValidationError(
        f"Artwork must be {max_bytes // (1024 * 1024)}MB or less."
    )
    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > max_bytes:
        raise too_large

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise too_large
    return bytes(body)


def release_to_response(
    release: Release, settings: Settings, now: datetime | None = None
) -> ReleaseResponse:
    """Convert a Release model to ReleaseResponse, including takedown eligibility."""
    window = cancel_window(settings)
    deadline = None
    if release.takedown_requested_at is not None:
        deadline = takedown_service.takedown_cancel_deadline(release.takedown_requested_at, window)

    return ReleaseResponse(
        id=release.id,
        user_id=release.user_id,
        title=release.title,
        artist=release.artist,
        release_date=release.release_date,
        artwork_url=release.artwork_url,
        display_artwork_url=release.artwork_url or settings.placeholder_artwork_url,
        tracks=list(release.tracks or []),
        spotify_link=release.spotify_link,
        status=release.status,
        takedown_requested_at=release.takedown_requested_at,
        takedown_cancel_deadline=deadline,
        can_cancel_takedown=takedown_service.can_cancel_takedown(release, now, window),
        created_at=release.created_at,
        updated_at=release.updated_at,
    )


@router.get("", response_model=ReleaseListResponse)
async def list_releases(
    current_user: OptionalUser,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    status: ReleaseStatus | None = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReleaseListResponse:
    """List the caller's releases, newest release date first.

    Anonymous callers get an empty list.
    """
    releases, total = await release_service.list_releases(
        db, current_user, page=page, page_size=page_size, status=status
    )
    now = utcnow()
    return ReleaseListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[release_to_response(release, settings, now) for release in releases],
    )


@router.get("/summary", response_model=ReleaseSummary)
async def release_summary(
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> ReleaseSummary:
    """Count the caller's releases per status."""
    counts = await release_service.release_summary(db, current_user)
    return ReleaseSummary(total=sum(counts.values()), by_status=counts)


@router.get("/latest-artwork", response_model=LatestArtworkResponse)
async def latest_artwork(
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> LatestArtworkResponse:
    """Artwork of the caller's most recently created release."""
    artwork_url = await release_service.latest_artwork_url(db, current_user)
    return LatestArtworkResponse(artwork_url=artwork_url)


@router.post("/uploads", response_model=ReleaseResponse, status_code=201)
async def create_upload_release(
    current_user: OptionalUser,
    release_data: ReleaseUploadCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Register a newly uploaded release.

    The release starts in ``processing`` with no tracks or artwork; the
    upload pipeline fills those in. Requires authentication.
    """
    release = await release_service.create_from_upload(db, current_user, release_data)
    return release_to_response(release, settings)


@router.post("/existing", response_model=ReleaseResponse, status_code=201)
async def create_existing_release(
    current_user: OptionalUser,
    release_data: ExistingReleaseCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Add a release that is already live elsewhere.

    The artist defaults to the caller's profile or account name when omitted.
    Requires authentication.
    """
    release = await release_service.create_existing(db, current_user, release_data)
    return release_to_response(release, settings)


@router.get("/{release_id}", response_model=ReleaseResponse)
async def get_release(
    release_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Get one of the caller's releases."""
    release = await release_service.get_release(db, current_user, release_id)
    return release_to_response(release, settings)


@router.patch("/{release_id}", response_model=ReleaseResponse)
async def update_release(
    release_id: str,
    current_user: OptionalUser,
    release_data: ReleaseUpdate,
    db: AsyncSession = Depends(get_db),
    storage: ArtworkStorage = Depends(get_artwork_storage),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Update a release's editable fields.

    Sending ``"artwork_url": null`` clears the artwork. Requires authentication.
    """
    release = await release_service.update_release(
        db, current_user, release_id, release_data, storage
    )
    return release_to_response(release, settings)


@router.put("/{release_id}/artwork", response_model=ReleaseResponse)
async def replace_artwork(
    release_id: str,
    current_user: OptionalUser,
    request: Request,
    filename: str = Query(..., min_length=1, max_length=255, description="Original filename"),
    content_type: str = Header("application/octet-stream"),
    db: AsyncSession = Depends(get_db),
    storage: ArtworkStorage = Depends(get_artwork_storage),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Upload new artwork for a release from the raw request body.

    The previous artwork is removed once the release is updated.
    Requires authentication.
    """
    release_service.require_identity(current_user)
    artwork = ArtworkUpload(
        filename=filename,
        content=await read_artwork_body(request, settings.artwork_max_bytes),
        content_type=content_type,
    )
    release = await release_service.update_release(
        db,
        current_user,
        release_id,
        ReleaseUpdate(),
        storage,
        artwork,
        max_artwork_bytes=settings.artwork_max_bytes,
    )
    return release_to_response(release, settings)


@router.delete("/{release_id}/artwork", response_model=ReleaseResponse)
async def clear_artwork(
    release_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
    storage: ArtworkStorage = Depends(get_artwork_storage),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Remove a release's artwork so the placeholder is shown.

    Requires authentication.
    """
    release = await release_service.update_release(
        db, current_user, release_id, ReleaseUpdate(artwork_url=None), storage
    )
    return release_to_response(release, settings)


@router.delete("/{release_id}", status_code=204)
async def delete_release(
    release_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
    storage: ArtworkStorage = Depends(get_artwork_storage),
) -> None:
    """Permanently delete a release and its stored artwork.

    This is not a takedown; use the takedown endpoints for that.
    Requires authentication.
    """
    await release_service.remove_release(db, current_user, release_id, storage)


@router.post("/{release_id}/takedown", response_model=ReleaseResponse)
async def request_takedown(
    release_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
    distribution: DistributionClient = Depends(get_distribution_client),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Request a takedown of a live release.

    The request can be cancelled within the configured window.
    Requires authentication.
    """
    now = utcnow()
    release = await takedown_service.initiate_takedown(
        db, current_user, release_id, distribution, now=now
    )
    return release_to_response(release, settings, now)


@router.delete("/{release_id}/takedown", response_model=ReleaseResponse)
async def cancel_takedown(
    release_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
    distribution: DistributionClient = Depends(get_distribution_client),
    settings: Settings = Depends(get_settings),
) -> ReleaseResponse:
    """Cancel a pending takedown request.

    Rejected with 409 once the cancellation window has passed.
    Requires authentication.
    """
    now = utcnow()
    release = await takedown_service.cancel_takedown(
        db,
        current_user,
        release_id,
        distribution,
        now=now,
        window=cancel_window(settings),
    )
    return release_to_response(release, settings, now)
