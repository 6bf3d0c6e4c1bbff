"""
Failure types raised while talking to the remote board controller.

Both are handled the same way by the synchronizer: log, discard the update,
keep the previous snapshot.
"""


class SyncError(RuntimeError):
    """Base class for failed snapshot or action round-trips."""


class TransportFailure(SyncError):
    """Remote unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(SyncError):
    """Remote answered, but the body does not have the expected shape."""
