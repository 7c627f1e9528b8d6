"""Console rendering helpers for the release uploader CLI."""
from __future__ import annotations

from typing import Any, Dict, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import UploadAttempt

console = Console()


_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def _human_size(num_bytes: int) -> str:
    """Asset size for the summary table; plain bytes below 1 KB."""
    if num_bytes < 1024:
        return f"{max(num_bytes, 0)} B"
    exponent = min((num_bytes.bit_length() - 1) // 10, len(_SIZE_UNITS))
    return f"{num_bytes / (1 << (10 * exponent)):.2f} {_SIZE_UNITS[exponent - 1]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]upload-release-assets[/bold green]",
        border_style="blue",
    )
    console.print(panel)


def build_upload_table(attempts: Sequence[UploadAttempt]) -> Table:
    """One row per attempted upload, sorted by asset name."""
    table = Table(title="Release assets", show_lines=False)
    table.add_column("Asset", style="bold")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Status", justify="right")

    for attempt in sorted(attempts, key=lambda a: a.file.name):
        response = attempt.response
        status = f"{response.status} {response.status_text}".strip()
        style = "green" if attempt.ok else "red"
        table.add_row(
            attempt.file.name,
            attempt.file.mime_type,
            _human_size(attempt.file.size),
            f"[{style}]{status}[/{style}]",
        )
    return table


def render_upload_summary(attempts: Sequence[UploadAttempt]) -> None:
    if not attempts:
        return
    console.print(build_upload_table(attempts))
