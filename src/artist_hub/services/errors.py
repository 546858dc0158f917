"""Domain errors raised by the release and calendar services."""


class ReleaseServiceError(Exception):
    """Base exception for release lifecycle failures.

    The message is safe to show to the caller; internal causes are logged
    where the error is raised.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class AuthenticationRequiredError(ReleaseServiceError):
    """Raised when a write is attempted without an identity."""

    status_code = 401

    def __init__(self, message: str = "Authentication required. Please log in.") -> None:
        super().__init__(message)


class ReleaseNotFoundError(ReleaseServiceError):
    """Raised when a release does not exist for the current user."""

    status_code = 404

    def __init__(self, message: str = "Release not found") -> None:
        super().__init__(message)


class EventNotFoundError(ReleaseServiceError):
    """Raised when an event does not exist on the current user's calendar."""

    status_code = 404

    def __init__(self, message: str = "Event not found") -> None:
        super().__init__(message)


class ReleaseValidationError(ReleaseServiceError):
    """Raised when input is rejected before any write is attempted."""

    status_code = 422


class InvalidStatusTransitionError(ReleaseServiceError):
    """Raised when a lifecycle transition is not legal from the current status."""

    status_code = 409


class TakedownWindowExpiredError(InvalidStatusTransitionError):
    """Raised when a takedown cancellation falls outside the reversal window."""

    def __init__(
        self, message: str = "The takedown request can no longer be cancelled."
    ) -> None:
        super().__init__(message)


class PersistenceError(ReleaseServiceError):
    """Raised when the backing store fails; the prior state remains durable."""

    status_code = 500

    def __init__(self, message: str = "Could not complete operation.") -> None:
        super().__init__(message)
