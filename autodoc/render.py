"""
Rendering functions for autodoc output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain.publish import PublishResult, PublishStatus

console = Console()

STATUS_STYLES = {
    PublishStatus.PUBLISHED: "bold green",
    PublishStatus.UNCHANGED: "yellow",
    PublishStatus.DRY_RUN: "bold yellow",
}


def short_sha(sha: Optional[str]) -> str:
    return sha[:12] if sha else "-"


def render_publish_table(result: PublishResult, out: Optional[Console] = None) -> None:
    """
    Render a publish result as a pretty table.

    Args:
        result: Result returned by PublishService.publish
        out: Console to print to (module console by default)
    """
    out = out or console
    style = STATUS_STYLES.get(result.status, "white")

    table = Table(
        title="Documentation Publish",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Status", f"[{style}]{result.status.value}[/{style}]")
    table.add_row("Target", f"{result.remote} {result.target_ref}")
    table.add_row("Built from", f"{result.source_branch} {short_sha(result.source_commit)}")
    table.add_row("Output", result.doc_dir)
    table.add_row("Tree", short_sha(result.tree))
    table.add_row("Commit", short_sha(result.commit))
    table.add_row("Parent", short_sha(result.parent) if result.parent else "[dim]none (orphan)[/dim]")

    out.print(table)

    if result.log_stat:
        out.print()
        out.print(result.log_stat, markup=False, highlight=False)
