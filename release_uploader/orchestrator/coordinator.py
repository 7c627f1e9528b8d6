"""Concurrent asset uploads."""
import asyncio
import contextlib
import logging
from typing import List, Optional, Sequence

from ..models import LoadedFile, ReleaseRef, UploadAttempt
from ..protocols import IReleaseClient

logger = logging.getLogger(__name__)


class UploadCoordinator:
    """
    Uploads every file to a release at once and collects the outcomes.

    A rejected upload is recorded and never stops the others. Only transport
    failures raised by the client propagate.
    """

    def __init__(self, client: IReleaseClient, max_parallel: int = 0):
        self._client = client
        self._max_parallel = max_parallel

    def _limiter(self) -> Optional[asyncio.Semaphore]:
        if self._max_parallel > 0:
            return asyncio.Semaphore(self._max_parallel)
        return None

    async def upload_all(
        self,
        release: ReleaseRef,
        files: Sequence[LoadedFile],
    ) -> List[UploadAttempt]:
        """
        Upload files concurrently.

        Args:
            release: Target release (provides the upload URL template)
            files: Files to attach

        Returns:
            One UploadAttempt per file, in completion order
        """
        limiter = self._limiter()
        attempts: List[UploadAttempt] = []

        async def _upload(file: LoadedFile) -> None:
            async with limiter if limiter else contextlib.nullcontext():
                logger.info(f"Uploading {file.name}...")
                response = await self._client.upload_asset(release, file)
            if response.ok:
                logger.debug(f"Uploaded {file.name}: {response.status}")
            attempts.append(UploadAttempt(file=file, response=response))

        tasks = [asyncio.create_task(_upload(file)) for file in files]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            await self._cancel_remaining_tasks(tasks)
            raise
        logger.info("Done uploading files.")
        return attempts

    async def _cancel_remaining_tasks(self, tasks: List[asyncio.Task]) -> None:
        """Cancel uploads still in flight once the batch has failed."""
        for task in tasks:
            if not task.done():
                task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)
