"""Command line interface for release_uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import re
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from rich.logging import RichHandler

from .cli_progress import render_configuration_summary, render_upload_summary
from .config import ActionConfig
from .errors import ConfigurationError
from .file_spec import SPEC_FORMATS
from .models import RunResult

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(
    debug: bool,
    silent: bool,
    log_level: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Configure logging.

    Progress is logged at INFO unless --silent, --debug or --log-level says
    otherwise. Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if debug:
        level = logging.DEBUG
    elif silent:
        level = logging.ERROR
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        env_level = (os.environ if environ is None else environ).get("LOG_LEVEL")
        level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


_ENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")


def _read_env_file(path: Path) -> Dict[str, str]:
    """
    Read ``KEY=value`` pairs from a dotenv style file.

    Comments, blank lines and lines that are not assignments are ignored.
    A value wrapped in matching single or double quotes is unquoted.
    """
    if not path.is_file():
        raise CLIError(f"env file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    values: Dict[str, str] = {}
    for raw_line in content.splitlines():
        match = _ENV_LINE.match(raw_line.strip())
        if not match:
            continue
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def _escape_workflow_command(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _set_failed(message: str, environ: Mapping[str, str]) -> None:
    """Log the failure and, inside GitHub Actions, annotate the step as failed."""
    logger.error(message)
    if environ.get("GITHUB_ACTIONS") == "true":
        print(f"::error::{_escape_workflow_command(message)}", flush=True)


def _build_config(args: argparse.Namespace, environ: Mapping[str, str]) -> ActionConfig:
    config = ActionConfig.from_env(environ)
    return config.with_overrides(
        release_id=args.release_id,
        files=args.files,
        spec_format=args.spec_format,
        max_parallel=args.max_parallel,
        api_url=args.api_url,
    )


async def _run_upload(config: ActionConfig) -> RunResult:
    from .orchestrator import ReleaseAssetUploader

    async with ReleaseAssetUploader(config) as uploader:
        return await uploader.run()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upload-release-assets",
        description="Upload local files as assets of an existing GitHub release.",
    )
    parser.add_argument(
        "--release-id",
        default=None,
        help="Numeric release id (default: release-id input, or the triggering release event)",
    )
    parser.add_argument(
        "--files",
        default=None,
        help="Newline separated file specs: path[; key[=value]]* (default: files input)",
    )
    parser.add_argument(
        "--spec-format",
        choices=SPEC_FORMATS,
        default=None,
        help="File spec grammar (default: params; legacy accepts path&mimetype)",
    )
    parser.add_argument(
        "--max-parallel",
        type=int,
        default=None,
        help="Maximum concurrent uploads (default: 0, no limit)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="GitHub API URL (default from GITHUB_API_URL or https://api.github.com)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="upload-release-assets (from release_uploader)",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    environ: Dict[str, str] = {}
    if args.env_file is not None:
        try:
            environ.update(_read_env_file(Path(args.env_file)))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
    # Variables already set in the process win over the env file
    environ.update(os.environ)

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
        environ=environ,
    )

    if args.max_parallel is not None and args.max_parallel < 0:
        print("ERROR: --max-parallel must not be negative", file=sys.stderr)
        return 1

    try:
        config = _build_config(args, environ)
    except ConfigurationError as exc:
        _set_failed(str(exc), environ)
        return 1

    if not args.silent:
        render_configuration_summary(
            {
                "Repository": config.repository or "(missing)",
                "Release ID": config.release_id or f"(from {config.event_name or 'event'})",
                "Files": len([line for line in config.files.splitlines() if line.strip()]),
                "Spec Format": config.spec_format,
                "Max Parallel": config.max_parallel or "unlimited",
                "API": config.api_url,
                "Token": "set" if config.token else "(missing)",
                "Logging": effective_log_mode,
            }
        )

    try:
        result = asyncio.run(_run_upload(config))
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130

    if not args.silent:
        render_upload_summary(result.attempts)
    if not result.success:
        _set_failed(result.message, environ)
    return result.exit_code


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
