"""
release_uploader - attach local files to an existing GitHub release.

Usage:
    from release_uploader import ActionConfig, ReleaseAssetUploader

    config = ActionConfig.from_env(os.environ)
    async with ReleaseAssetUploader(config) as uploader:
        result = await uploader.run()
    sys.exit(result.exit_code)

Files are described one per line, with optional parameters:

    dist/app.tar.gz; type=application/gzip; filename=app-linux.tar.gz
    dist/debug.zip; if=${{ inputs.debug }}
"""
from .config import ActionConfig
from .errors import (
    ConfigurationError,
    FileReadError,
    ReleaseLookupError,
    ReleaseUploadError,
    TransportError,
)
from .file_spec import parse_file_spec, parse_file_specs, parse_legacy_file_spec
from .models import (
    FileDescriptor,
    LoadedFile,
    ReleaseRef,
    RunResult,
    RunStatus,
    UploadAttempt,
    UploadResponse,
)
from .orchestrator import ReleaseAssetUploader

__version__ = "1.0.0"
__all__ = [
    # Main
    "ReleaseAssetUploader",
    "ActionConfig",
    # Parsing
    "parse_file_spec",
    "parse_file_specs",
    "parse_legacy_file_spec",
    # Models
    "FileDescriptor",
    "LoadedFile",
    "ReleaseRef",
    "RunResult",
    "RunStatus",
    "UploadAttempt",
    "UploadResponse",
    # Errors
    "ReleaseUploadError",
    "ConfigurationError",
    "FileReadError",
    "ReleaseLookupError",
    "TransportError",
]
