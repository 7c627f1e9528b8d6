"""
Models for release_uploader module.

Immutable dataclasses following Single Responsibility Principle.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


DEFAULT_MIME_TYPE = "application/octet-stream"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace(";", "\\;")


@dataclass(frozen=True)
class FileDescriptor:
    """One parsed line of the files input: a path plus its parameters."""
    path: str
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def condition(self) -> Optional[str]:
        return self.params.get("if")

    @property
    def mime_type(self) -> str:
        return self.params.get("type", DEFAULT_MIME_TYPE)

    @property
    def display_name(self) -> str:
        if "filename" in self.params:
            return self.params["filename"]
        return Path(self.path).name

    def to_line(self) -> str:
        """Rebuild a file spec line that parses back to this descriptor."""
        parts = [_escape(self.path)]
        for key, value in self.params.items():
            parts.append(f"{_escape(key)}={_escape(value)}" if value else _escape(key))
        return "; ".join(parts)


@dataclass(frozen=True)
class LoadedFile:
    """File contents ready to be attached to a release."""
    name: str
    mime_type: str
    data: bytes = field(repr=False)
    source_path: Optional[Path] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ReleaseRef:
    """Release fetched from the API; only what uploads need."""
    id: int
    upload_url: str
    tag_name: Optional[str] = None
    html_url: Optional[str] = None


@dataclass(frozen=True)
class UploadResponse:
    """HTTP outcome of a single asset upload, body already read."""
    status: int
    status_text: str
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class UploadAttempt:
    """Pairs a file with the response its upload produced."""
    file: LoadedFile
    response: UploadResponse

    @property
    def ok(self) -> bool:
        return self.response.ok


class RunStatus(Enum):
    """Run outcome status."""
    SUCCESS = "success"
    UPLOAD_FAILED = "upload_failed"  # Every upload ran, at least one rejected
    FATAL = "fatal"


@dataclass(frozen=True)
class RunResult:
    """Immutable result of a whole upload run."""
    status: RunStatus = RunStatus.SUCCESS
    message: str = ""
    attempts: List[UploadAttempt] = field(default_factory=list)
    error_kind: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    @property
    def failed_attempts(self) -> List[UploadAttempt]:
        return [attempt for attempt in self.attempts if not attempt.ok]

    @classmethod
    def ok(cls, attempts: List[UploadAttempt], message: str = ""):
        return cls(status=RunStatus.SUCCESS, message=message, attempts=list(attempts))

    @classmethod
    def upload_failed(cls, attempts: List[UploadAttempt], message: str):
        return cls(
            status=RunStatus.UPLOAD_FAILED,
            message=message,
            attempts=list(attempts),
        )

    @classmethod
    def fatal(cls, message: str, error_kind: str):
        return cls(status=RunStatus.FATAL, message=message, error_kind=error_kind)
