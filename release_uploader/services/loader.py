"""
Loader Service - Single Responsibility: turn file specs into bytes in memory.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import FileReadError
from ..models import FileDescriptor, LoadedFile

logger = logging.getLogger(__name__)


class FileLoader:
    """
    Reads the files named by descriptors.

    Reads run in worker threads so every file is loaded concurrently.
    """

    async def load(self, descriptor: FileDescriptor) -> Optional[LoadedFile]:
        """
        Load one descriptor.

        Args:
            descriptor: Parsed file spec

        Returns:
            LoadedFile, or None when the ``if`` condition is ``false``

        Raises:
            FileReadError: If the file cannot be read
        """
        condition = descriptor.condition
        if condition == "false":
            logger.debug(f"Skipping {descriptor.path} (if=false)")
            return None
        if condition is not None and condition != "true":
            logger.warning(
                f"Unrecognized value for 'if' on {descriptor.path}: {condition!r}, "
                "uploading anyway"
            )

        path = Path(descriptor.path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise FileReadError(
                f"Could not read {descriptor.path}: {exc.strerror or exc}",
            ) from exc

        loaded = LoadedFile(
            name=descriptor.display_name,
            mime_type=descriptor.mime_type,
            data=data,
            source_path=path,
        )
        logger.info(
            f"Read file {descriptor.path} "
            f"(type {loaded.mime_type}, name {loaded.name}, size {loaded.size} bytes)"
        )
        return loaded

    async def load_all(self, descriptors: Sequence[FileDescriptor]) -> List[LoadedFile]:
        """Load every descriptor concurrently; the first read failure aborts the batch."""
        tasks = [asyncio.create_task(self.load(descriptor)) for descriptor in descriptors]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [loaded for loaded in results if loaded is not None]
