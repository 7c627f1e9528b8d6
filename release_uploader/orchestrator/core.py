"""Core orchestrator - runs one release asset upload end to end."""
import logging
from typing import Optional

from ..config import ActionConfig
from ..errors import ConfigurationError, ReleaseUploadError
from ..file_spec import parse_file_specs
from ..models import RunResult
from ..protocols import IReleaseClient
from ..services.api_client import GitHubReleaseClient
from ..services.loader import FileLoader
from ..services.release_resolver import resolve_release_id
from .coordinator import UploadCoordinator
from .reporter import ResultReporter

logger = logging.getLogger(__name__)


class ReleaseAssetUploader:
    """
    Orchestrates a release asset upload using injected services.

    Usage:
        async with ReleaseAssetUploader(config) as uploader:
            result = await uploader.run()

        # With a pre-built client (tests, other API hosts)
        async with ReleaseAssetUploader(config, client=fake) as uploader:
            result = await uploader.run()

    ``run`` never exits the process; fatal errors come back as
    ``RunResult.fatal``.
    """

    def __init__(
        self,
        config: ActionConfig,
        client: Optional[IReleaseClient] = None,
        loader: Optional[FileLoader] = None,
        reporter: Optional[ResultReporter] = None,
    ):
        self._config = config
        self._external_client = client
        self._owned_client: Optional[GitHubReleaseClient] = None
        self._client: Optional[IReleaseClient] = client
        self._loader = loader or FileLoader()
        self._reporter = reporter or ResultReporter()

    async def __aenter__(self):
        if self._external_client is None:
            self._owned_client = GitHubReleaseClient(
                token=self._config.token,
                repository=self._config.repository,
                api_url=self._config.api_url,
            )
            self._client = await self._owned_client.__aenter__()
        return self

    async def __aexit__(self, *args):
        if self._owned_client:
            await self._owned_client.__aexit__(*args)
            self._owned_client = None

    async def run(self) -> RunResult:
        """Run the whole pipeline and return its result."""
        if self._client is None:
            raise RuntimeError("ReleaseAssetUploader not initialized. Use 'async with' context.")

        try:
            return await self._run()
        except ReleaseUploadError as exc:
            return RunResult.fatal(str(exc), exc.kind)

    def _check_credentials(self) -> None:
        if not self._config.token:
            raise ConfigurationError(
                "GitHub token is not set",
                hint="Pass GITHUB_TOKEN to the step environment",
            )
        if "/" not in self._config.repository:
            raise ConfigurationError(
                f"Repository must be owner/repo, got {self._config.repository!r}",
                hint="GITHUB_REPOSITORY is set by GitHub Actions",
            )

    async def _run(self) -> RunResult:
        config = self._config
        release_id = resolve_release_id(config.release_id, config.event_name, config.event_payload)
        descriptors = parse_file_specs(config.files, config.spec_format)

        logger.info("Reading files...")
        files = await self._loader.load_all(descriptors)
        if not files:
            logger.info("No files to upload.")
            return RunResult.ok([], "No files to upload.")

        if self._owned_client is not None:
            self._check_credentials()

        logger.info("Getting release...")
        release = await self._client.get_release(release_id)
        logger.debug(f"Release {release.id} ({release.tag_name or 'untagged'})")

        logger.info("Uploading files...")
        coordinator = UploadCoordinator(self._client, max_parallel=config.max_parallel)
        attempts = await coordinator.upload_all(release, files)
        return self._reporter.report(attempts)
