"""Orchestrator package - coordinates the upload workflow."""
from .coordinator import UploadCoordinator
from .core import ReleaseAssetUploader
from .reporter import ResultReporter, format_response_body

__all__ = [
    "ReleaseAssetUploader",
    "UploadCoordinator",
    "ResultReporter",
    "format_response_body",
]
