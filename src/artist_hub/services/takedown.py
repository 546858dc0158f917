"""Takedown requests and their time-boxed cancellation."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.database import utcnow
from artist_hub.models.release import LIVE_STATUSES, Release, ReleaseStatus
from artist_hub.models.user import User
from artist_hub.services.base import APIError
from artist_hub.services.distribution import DistributionClient
from artist_hub.services.errors import InvalidStatusTransitionError, TakedownWindowExpiredError
from artist_hub.services.releases import backing_store, get_owned_release, require_identity

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_WINDOW = timedelta(hours=24)


def takedown_cancel_deadline(
    requested_at: datetime, window: timedelta = DEFAULT_CANCEL_WINDOW
) -> datetime:
    """Last instant at which a takedown request can still be cancelled."""
    return requested_at + window


def can_cancel_takedown(
    release: Release,
    now: datetime | None = None,
    window: timedelta = DEFAULT_CANCEL_WINDOW,
) -> bool:
    """Whether the release's pending takedown is inside its reversal window.

    Both ends of the window are inclusive.
    """
    requested_at = release.takedown_requested_at
    if not release.is_takedown_pending or requested_at is None:
        return False
    now = now or utcnow()
    return requested_at <= now <= takedown_cancel_deadline(requested_at, window)


def restored_status(release: Release) -> ReleaseStatus:
    """The live status a release returns to when its takedown is cancelled."""
    if release.previous_status in LIVE_STATUSES:
        return ReleaseStatus(release.previous_status)
    # Rows written before previous_status was recorded
    if release.upload_reference:
        return ReleaseStatus.COMPLETED
    return ReleaseStatus.EXISTING


async def initiate_takedown(
    db: AsyncSession,
    user: User | None,
    release_id: str,
    distribution: DistributionClient,
    *,
    now: datetime | None = None,
) -> Release:
    """Request that a live release be taken down.

    The status change is committed before the distribution platform is
    notified, and stays durable whether or not the platform accepts it.

    Raises:
        InvalidStatusTransitionError: If the release is not in a live status.
    """
    user = require_identity(user)
    release = await get_owned_release(db, user.id, release_id)

    if release.status not in LIVE_STATUSES:
        raise InvalidStatusTransitionError(
            f"A takedown cannot be requested for a release with status '{release.status}'."
        )

    now = now or utcnow()
    release.previous_status = release.status
    release.status = ReleaseStatus.TAKEDOWN_REQUESTED
    release.takedown_requested_at = now
    release.updated_at = now

    with backing_store("request takedown"):
        await db.commit()

    logger.info("Takedown requested for release %s by user %s", release.id, user.id)

    try:
        await distribution.request_takedown(release, now)
    except APIError as e:
        logger.warning("Takedown notification for release %s failed: %s", release.id, e)

    return release


async def cancel_takedown(
    db: AsyncSession,
    user: User | None,
    release_id: str,
    distribution: DistributionClient,
    *,
    now: datetime | None = None,
    window: timedelta = DEFAULT_CANCEL_WINDOW,
) -> Release:
    """Cancel a pending takedown within its reversal window.

    The platform is only told about the cancellation once it is committed.

    Raises:
        InvalidStatusTransitionError: If no takedown is pending.
        TakedownWindowExpiredError: If the reversal window has passed.
    """
    user = require_identity(user)
    release = await get_owned_release(db, user.id, release_id)

    if not release.is_takedown_pending or release.takedown_requested_at is None:
        raise InvalidStatusTransitionError("No takedown request is pending for this release.")

    now = now or utcnow()
    if not can_cancel_takedown(release, now, window):
        logger.info(
            "Rejected takedown cancellation for release %s requested at %s",
            release.id,
            release.takedown_requested_at.isoformat(),
        )
        raise TakedownWindowExpiredError()

    release.status = restored_status(release)
    release.previous_status = None
    release.takedown_requested_at = None
    release.updated_at = now

    with backing_store("cancel takedown"):
        await db.commit()

    logger.info(
        "Takedown cancelled for release %s by user %s, status restored to %s",
        release.id,
        user.id,
        release.status,
    )

    try:
        await distribution.cancel_takedown(release)
    except APIError as e:
        logger.warning("Takedown cancellation notice for release %s failed: %s", release.id, e)

    return release
