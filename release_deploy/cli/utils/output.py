# release_deploy/cli/utils/output.py
"""Output formatting utilities"""

import os
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Union

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...api.exceptions import DeployToolError
from ...constants import ENV_GITHUB_OUTPUT, StageStatus
from ...models import DeployResult, ReleaseInfo

console = Console()

STAGE_STYLES = {
    StageStatus.SUCCESS: "green",
    StageStatus.SKIPPED: "dim",
    StageStatus.FAILED: "red",
}


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    lines = [
        f"[green]✓[/green] Deployment completed successfully!",
        f"",
        f"[bold]Release ID:[/bold] {result.release_id}",
        f"[bold]Release path:[/bold] {result.release_path}",
        f"[bold]Current link:[/bold] {result.current_link}",
    ]

    if result.previous_release:
        lines.append(f"[bold]Previous release:[/bold] {result.previous_release}")

    lines.append(f"[bold]Deployment time:[/bold] {result.deployment_time}")

    if result.health:
        lines.append(
            f"[bold]Health check:[/bold] [green]{result.healthcheck_status}[/green] "
            f"(code: {result.healthcheck_code}, attempts: {result.healthcheck_attempts})"
        )

    lines.append(f"[bold]Elapsed:[/bold] {result.elapsed:.2f}s")

    if result.stages:
        lines.append("")
        lines.append("[bold]Stages:[/bold]")
        for stage in result.stages:
            style = STAGE_STYLES[stage.status]
            lines.append(f"  • {stage.name}: [{style}]{stage.status.value}[/{style}]")

    panel = Panel(
        "\n".join(lines),
        title="Deploy Result",
        border_style="green"
    )
    console.print(panel)


def format_deploy_error(error: DeployToolError) -> None:
    """Format and display a failed deployment"""
    lines = [f"[red]✗ Deployment failed:[/red] {error}"]

    if error.error_code:
        lines.append(f"[dim]Error code: {error.error_code}[/dim]")

    # Health check failures happen after activation
    result = getattr(error, "result", None)
    if result is not None and result.release_id:
        lines.append("")
        lines.append(f"[bold]Active release:[/bold] {result.release_path}")
        if result.previous_release:
            lines.append(f"[bold]Previous release:[/bold] {result.previous_release}")

    panel = Panel(
        "\n".join(lines),
        title="Deploy Error",
        border_style="red"
    )
    console.print(panel)


def format_release_list(releases: List[ReleaseInfo], root: Union[str, Path]) -> None:
    """Display releases as a table"""
    table = Table(title=f"Releases in {root}", box=box.SIMPLE)
    table.add_column("", no_wrap=True)
    table.add_column("Release ID", style="cyan", no_wrap=True)
    table.add_column("Created", style="yellow")
    table.add_column("Path", style="dim")

    for info in releases:
        table.add_row(
            "[green]●[/green]" if info.is_current else "",
            info.release_id,
            info.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            str(info.path)
        )

    console.print(table)


def format_ci_outputs(outputs: Dict[str, str], delimiter: Optional[str] = None) -> str:
    """
    Render outputs in the GitHub Actions output file format

    Single-line values are written as ``key=value``; multiline values use
    the ``key<<DELIMITER`` form.

    Args:
        outputs: Output mapping
        delimiter: Heredoc delimiter (random if None)

    Returns:
        Text to append to the output file
    """
    lines = []

    for key, value in outputs.items():
        value = str(value)
        if "\n" in value:
            marker = delimiter or f"ghadelimiter_{uuid.uuid4()}"
            lines.append(f"{key}<<{marker}")
            lines.append(value)
            lines.append(marker)
        else:
            lines.append(f"{key}={value}")

    return "".join(f"{line}\n" for line in lines)


def write_ci_outputs(outputs: Dict[str, str], path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Append outputs to the CI output file

    Args:
        outputs: Output mapping
        path: Output file (defaults to $GITHUB_OUTPUT)

    Returns:
        Path written, or None when no output file is configured
    """
    path = path or os.environ.get(ENV_GITHUB_OUTPUT)
    if not path:
        return None

    path = Path(path)
    with open(path, 'a', encoding='utf-8') as f:
        f.write(format_ci_outputs(outputs))

    return path
