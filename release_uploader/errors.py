"""Fatal error taxonomy for release asset uploads."""
from __future__ import annotations


class ReleaseUploadError(Exception):
    """Base class for errors that abort the whole run."""

    kind = "unknown"

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ConfigurationError(ReleaseUploadError):
    """Inputs are missing or malformed."""

    kind = "configuration"


class FileReadError(ReleaseUploadError):
    """A local file listed for upload could not be read."""

    kind = "io"


class TransportError(ReleaseUploadError):
    """A request to the release API failed below the HTTP layer."""

    kind = "transport"


class ReleaseLookupError(ReleaseUploadError):
    """The release API answered the release lookup with an error status."""

    kind = "release_lookup"

    def __init__(self, release_id: int, status: int, body: str) -> None:
        super().__init__(
            f"Could not get release {release_id}: HTTP {status}",
            hint=body.strip()[:500] if body else "",
        )
        self.release_id = release_id
        self.status = status
        self.body = body
