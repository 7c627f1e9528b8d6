"""
Protocols (Interfaces) for Dependency Inversion.

The pipeline only talks to the release API through these.
"""
from typing import Protocol, runtime_checkable

from .models import LoadedFile, ReleaseRef, UploadResponse


@runtime_checkable
class IReleaseClient(Protocol):
    """Interface for release API operations."""

    async def get_release(self, release_id: int) -> ReleaseRef:
        """Fetch a release by numeric id."""
        ...

    async def upload_asset(self, release: ReleaseRef, file: LoadedFile) -> UploadResponse:
        """POST one file to the release's upload endpoint."""
        ...
