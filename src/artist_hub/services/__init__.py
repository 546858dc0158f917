"""Release lifecycle services and outbound integrations."""

from artist_hub.services.base import (
    APIError,
    BaseAPIClient,
    NotFoundError,
    RateLimitError,
)
from artist_hub.services.errors import (
    AuthenticationRequiredError,
    InvalidStatusTransitionError,
    PersistenceError,
    ReleaseNotFoundError,
    ReleaseServiceError,
    ReleaseValidationError,
    TakedownWindowExpiredError,
)

__all__ = [
    "APIError",
    "BaseAPIClient",
    "NotFoundError",
    "RateLimitError",
    "AuthenticationRequiredError",
    "InvalidStatusTransitionError",
    "PersistenceError",
    "ReleaseNotFoundError",
    "ReleaseServiceError",
    "ReleaseValidationError",
    "TakedownWindowExpiredError",
]
