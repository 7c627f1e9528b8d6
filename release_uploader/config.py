"""
Configuration for a release asset upload run.

Built once from the process environment; the rest of the package only sees
the resulting ActionConfig.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError
from .file_spec import SPEC_FORMAT_PARAMS, SPEC_FORMATS
from .services.api_client import DEFAULT_API_URL


def _parse_inputs(environ: Mapping[str, str]) -> Dict[str, str]:
    """Action inputs from ``GH_INPUTS`` JSON, else from ``INPUT_*`` variables."""
    raw = environ.get("GH_INPUTS")
    if raw:
        try:
            inputs = json.loads(raw)
        except ValueError as exc:
            raise ConfigurationError(f"GH_INPUTS is not valid JSON: {exc}") from exc
        if not isinstance(inputs, dict):
            raise ConfigurationError("GH_INPUTS must be a JSON object")
        return {str(key): "" if value is None else str(value) for key, value in inputs.items()}

    return {
        key[len("INPUT_"):].lower(): value
        for key, value in environ.items()
        if key.startswith("INPUT_")
    }


def _load_event_payload(event_path: Optional[str]) -> Dict[str, Any]:
    if not event_path:
        return {}
    path = Path(event_path)
    if not path.is_file():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read event payload {path}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _parse_max_parallel(value: str) -> int:
    if not value.strip():
        return 0
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"max-parallel must be an integer, got {value!r}") from exc
    if parsed < 0:
        raise ConfigurationError(f"max-parallel must not be negative, got {parsed}")
    return parsed


@dataclass(frozen=True)
class ActionConfig:
    """Immutable configuration for one upload run."""
    files: str = ""
    release_id: str = ""
    token: str = ""
    repository: str = ""
    event_name: str = ""
    event_payload: Dict[str, Any] = field(default_factory=dict)
    api_url: str = DEFAULT_API_URL
    spec_format: str = SPEC_FORMAT_PARAMS
    max_parallel: int = 0  # 0 = no limit

    def __post_init__(self) -> None:
        if self.spec_format not in SPEC_FORMATS:
            raise ConfigurationError(
                f"Unknown file spec format: {self.spec_format!r}",
                hint=f"Use one of: {', '.join(SPEC_FORMATS)}",
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ActionConfig":
        """
        Build configuration from a GitHub Actions style environment.

        Args:
            environ: Environment mapping (usually ``os.environ``)

        Raises:
            ConfigurationError: If inputs or the event payload are malformed
        """
        inputs = _parse_inputs(environ)
        return cls(
            files=inputs.get("files", ""),
            release_id=inputs.get("release-id", ""),
            token=environ.get("GITHUB_TOKEN", ""),
            repository=environ.get("GITHUB_REPOSITORY", ""),
            event_name=environ.get("GITHUB_EVENT_NAME", ""),
            event_payload=_load_event_payload(environ.get("GITHUB_EVENT_PATH")),
            api_url=environ.get("GITHUB_API_URL") or DEFAULT_API_URL,
            spec_format=inputs.get("spec-format") or SPEC_FORMAT_PARAMS,
            max_parallel=_parse_max_parallel(inputs.get("max-parallel", "")),
        )

    def with_overrides(self, **overrides: Any) -> "ActionConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self
