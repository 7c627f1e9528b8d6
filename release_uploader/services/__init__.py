"""Services for release_uploader module."""
from .api_client import GitHubReleaseClient, expand_upload_url
from .loader import FileLoader
from .release_resolver import resolve_release_id

__all__ = [
    "GitHubReleaseClient",
    "expand_upload_url",
    "FileLoader",
    "resolve_release_id",
]
