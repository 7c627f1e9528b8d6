"""HTTP adapter for release API operations."""
from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx
from uritemplate import URITemplate

from ..errors import ReleaseLookupError, TransportError
from ..models import LoadedFile, ReleaseRef, UploadResponse

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubReleaseClient:
    """
    HTTP client adapter for the GitHub releases API.

    Implements IReleaseClient protocol. No retries: a rejected upload is
    returned to the caller, a transport failure is raised.
    """

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token = token
        self._repository = repository
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers=self._auth_headers(),
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _auth_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("GitHubReleaseClient not initialized. Use 'async with' context.")
        return self._client

    async def get_release(self, release_id: int) -> ReleaseRef:
        client = self._require_client()
        endpoint = f"/repos/{self._repository}/releases/{release_id}"
        try:
            response = await client.get(endpoint)
        except httpx.TransportError as exc:
            raise TransportError(f"GET {endpoint} failed: {exc}") from exc

        if not response.is_success:
            raise ReleaseLookupError(release_id, response.status_code, response.text)

        try:
            data = response.json()
            return ReleaseRef(
                id=int(data["id"]),
                upload_url=str(data["upload_url"]),
                tag_name=data.get("tag_name"),
                html_url=data.get("html_url"),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ReleaseLookupError(
                release_id,
                response.status_code,
                f"unexpected release payload ({type(exc).__name__}: {exc}): {response.text}",
            ) from exc

    async def upload_asset(self, release: ReleaseRef, file: LoadedFile) -> UploadResponse:
        client = self._require_client()
        url = expand_upload_url(release.upload_url, file.name)
        try:
            response = await client.post(
                url,
                content=file.data,
                headers={"Content-Type": file.mime_type},
            )
        except httpx.TransportError as exc:
            raise TransportError(f"Upload of {file.name} failed: {exc}") from exc

        return UploadResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            body=response.text,
        )


def expand_upload_url(upload_url: str, name: str) -> str:
    """Bind ``name`` into the release's ``upload_url`` URI template."""
    return URITemplate(upload_url).expand(name=name)
