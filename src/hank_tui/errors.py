"""Error taxonomy for hank-tui.

None of these errors is fatal to the application. Remote errors are
surfaced in the transcript or status bar, persistence errors are logged.
"""


class HankError(Exception):
    """Base class for all hank-tui errors."""


class RemoteStoreError(HankError):
    """Base class for failures talking to the remote chat store."""


class NetworkError(RemoteStoreError):
    """Connection failure or timeout."""


class ServerError(RemoteStoreError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(ServerError):
    """The server answered, but the body could not be decoded."""


class PersistenceError(HankError):
    """Loading, saving or deleting the local transcript history failed."""
