"""Error taxonomy shared by the core and the HTTP layer."""


class BridgeError(Exception):
    """Base error for print bridge operations.

    Attributes:
        status_code: HTTP status the API reports for this error.
        message: Human-readable message returned to the caller.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BridgeError):
    """Malformed or missing request fields."""

    status_code = 400


class NotFoundError(BridgeError):
    """Requested printer is not known, even after a refresh."""

    status_code = 404


class DownloadError(BridgeError):
    """The document could not be fetched."""

    status_code = 500


class PrintError(BridgeError):
    """The OS print capability rejected the job."""

    status_code = 500


class PersistenceError(BridgeError):
    """Settings could not be read or written. Logged, never reported."""
