"""End-to-end tests for ReleaseAssetUploader."""
import asyncio

import httpx
import pytest

from release_uploader.config import ActionConfig
from release_uploader.errors import TransportError
from release_uploader.models import ReleaseRef, RunStatus, UploadResponse
from release_uploader.orchestrator.core import ReleaseAssetUploader
from release_uploader.services.api_client import GitHubReleaseClient

UPLOAD_URL = "https://uploads.github.com/repos/octo/app/releases/12345/assets{?name,label}"


class FakeReleaseClient:
    """In-memory IReleaseClient."""

    def __init__(self, statuses=None):
        self.statuses = statuses or {}
        self.requested_releases = []
        self.uploaded = []

    async def get_release(self, release_id):
        self.requested_releases.append(release_id)
        return ReleaseRef(id=release_id, upload_url=UPLOAD_URL)

    async def upload_asset(self, release, file):
        self.uploaded.append(file)
        status = self.statuses.get(file.name, 201)
        body = '{"message":"Validation Failed"}' if status >= 400 else "{}"
        return UploadResponse(status=status, status_text="", body=body)


@pytest.fixture
def dist(tmp_path):
    for name in ("app-linux.tar.gz", "app-macos.tar.gz", "app-windows.zip"):
        (tmp_path / name).write_bytes(name.encode())
    return tmp_path


def _files_input(dist, *lines):
    return "\n".join(line.format(dist=dist) for line in lines)


async def _run(config, client):
    async with ReleaseAssetUploader(config, client=client) as uploader:
        return await uploader.run()


@pytest.mark.asyncio
async def test_all_files_uploaded(dist):
    config = ActionConfig(
        release_id="12345",
        files=_files_input(
            dist,
            "{dist}/app-linux.tar.gz; type=application/gzip",
            "{dist}/app-macos.tar.gz",
        ),
    )
    client = FakeReleaseClient()

    result = await _run(config, client)

    assert result.status == RunStatus.SUCCESS
    assert result.exit_code == 0
    assert client.requested_releases == [12345]
    assert sorted(f.name for f in client.uploaded) == ["app-linux.tar.gz", "app-macos.tar.gz"]


@pytest.mark.asyncio
async def test_one_rejected_upload_fails_run_but_others_complete(dist):
    config = ActionConfig(
        release_id="12345",
        files=_files_input(
            dist,
            "{dist}/app-linux.tar.gz",
            "{dist}/app-macos.tar.gz",
            "{dist}/app-windows.zip",
        ),
    )
    client = FakeReleaseClient(statuses={"app-macos.tar.gz": 422})

    result = await _run(config, client)

    assert result.status == RunStatus.UPLOAD_FAILED
    assert result.exit_code == 1
    assert [a.file.name for a in result.failed_attempts] == ["app-macos.tar.gz"]
    assert len(client.uploaded) == 3
    assert sum(1 for a in result.attempts if a.ok) == 2


@pytest.mark.asyncio
async def test_if_false_line_is_not_uploaded(dist):
    config = ActionConfig(
        release_id="12345",
        files=_files_input(
            dist,
            "{dist}/app-linux.tar.gz",
            "{dist}/app-windows.zip; if=false",
        ),
    )
    client = FakeReleaseClient()

    result = await _run(config, client)

    assert result.success
    assert [f.name for f in client.uploaded] == ["app-linux.tar.gz"]


@pytest.mark.asyncio
async def test_nothing_left_to_upload_skips_release_lookup(dist):
    config = ActionConfig(release_id="1", files=f"{dist}/app-linux.tar.gz; if=false")
    client = FakeReleaseClient()

    result = await _run(config, client)

    assert result.success
    assert client.requested_releases == []


@pytest.mark.asyncio
async def test_release_inferred_from_event(dist):
    config = ActionConfig(
        files=f"{dist}/app-linux.tar.gz",
        event_name="release",
        event_payload={"release": {"id": 555}},
    )
    client = FakeReleaseClient()

    await _run(config, client)

    assert client.requested_releases == [555]


@pytest.mark.asyncio
async def test_unresolvable_release_is_fatal(dist):
    config = ActionConfig(files=f"{dist}/app-linux.tar.gz", event_name="push")
    client = FakeReleaseClient()

    result = await _run(config, client)

    assert result.status == RunStatus.FATAL
    assert result.error_kind == "configuration"
    assert "not a release event" in result.message
    assert client.uploaded == []


@pytest.mark.asyncio
async def test_missing_file_is_fatal_before_any_upload(dist):
    config = ActionConfig(
        release_id="1",
        files=_files_input(dist, "{dist}/app-linux.tar.gz", "{dist}/not-built.zip"),
    )
    client = FakeReleaseClient()

    result = await _run(config, client)

    assert result.status == RunStatus.FATAL
    assert result.error_kind == "io"
    assert client.requested_releases == []
    assert client.uploaded == []


@pytest.mark.asyncio
async def test_run_requires_context():
    uploader = ReleaseAssetUploader(ActionConfig(release_id="1"))
    with pytest.raises(RuntimeError, match="async with"):
        await uploader.run()


@pytest.mark.asyncio
async def test_owned_client_requires_token(dist):
    config = ActionConfig(release_id="1", files=f"{dist}/app-linux.tar.gz", repository="octo/app")

    async with ReleaseAssetUploader(config) as uploader:
        result = await uploader.run()

    assert result.status == RunStatus.FATAL
    assert "token" in result.message


@pytest.mark.asyncio
async def test_with_http_client(dist):
    uploads = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"id": 12345, "upload_url": UPLOAD_URL})
        uploads.append((request.url.params["name"], request.headers["Content-Type"]))
        if request.url.params["name"] == "app-windows.zip":
            return httpx.Response(422, json={"message": "Validation Failed"})
        return httpx.Response(201, json={"state": "uploaded"})

    config = ActionConfig(
        release_id="12345",
        files=_files_input(
            dist,
            "{dist}/app-linux.tar.gz; type=application/gzip; filename=linux.tgz",
            "{dist}/app-windows.zip; type=application/zip",
        ),
        token="t",
        repository="octo/app",
    )
    client = GitHubReleaseClient(
        token=config.token,
        repository=config.repository,
        transport=httpx.MockTransport(handler),
    )

    async with client:
        result = await _run(config, client)

    assert sorted(uploads) == [
        ("app-windows.zip", "application/zip"),
        ("linux.tgz", "application/gzip"),
    ]
    assert result.status == RunStatus.UPLOAD_FAILED
    assert [a.file.name for a in result.failed_attempts] == ["app-windows.zip"]


@pytest.mark.asyncio
async def test_transport_error_is_fatal_and_stops_other_uploads(dist):
    finished = []

    class FlakyClient(FakeReleaseClient):
        async def upload_asset(self, release, file):
            if file.name == "app-linux.tar.gz":
                raise TransportError("connection reset by peer")
            await asyncio.sleep(0.05)
            finished.append(file.name)
            return await super().upload_asset(release, file)

    config = ActionConfig(
        release_id="12345",
        files=_files_input(
            dist,
            "{dist}/app-linux.tar.gz",
            "{dist}/app-macos.tar.gz",
            "{dist}/app-windows.zip",
        ),
    )

    result = await _run(config, FlakyClient())
    await asyncio.sleep(0.1)

    assert result.status == RunStatus.FATAL
    assert result.error_kind == "transport"
    assert finished == []


@pytest.mark.asyncio
async def test_release_lookup_redirect_is_fatal_result(dist):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, json={"message": "Moved Permanently"})

    config = ActionConfig(release_id="12345", files=f"{dist}/app-linux.tar.gz")
    client = GitHubReleaseClient(
        token="t",
        repository="octo/app",
        transport=httpx.MockTransport(handler),
    )

    async with client:
        result = await _run(config, client)

    assert result.status == RunStatus.FATAL
    assert result.error_kind == "release_lookup"
    assert "HTTP 301" in result.message
