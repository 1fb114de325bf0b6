"""Sequence result output formatters.

Rich table and JSON output for sequence results.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tessera_core.sequencer.models import SequenceResult, StepRecord, StepStatus


def _status_icon(status: StepStatus) -> str:
    """Get icon for step status."""
    icons = {
        StepStatus.SUCCEEDED: "✅",
        StepStatus.FAILED: "❌",
        StepStatus.SKIPPED: "⏭️",
    }
    return icons.get(status, "❓")


def _status_color(status: StepStatus) -> str:
    """Get color for step status."""
    colors = {
        StepStatus.SUCCEEDED: "green",
        StepStatus.FAILED: "red bold",
        StepStatus.SKIPPED: "dim",
    }
    return colors.get(status, "white")


def _step_target(record: StepRecord) -> str:
    if record.kind == "invoke":
        return f"{record.artifact_name or '?'}.{record.method}"
    return record.artifact_name or "-"


def format_result_table(result: SequenceResult, console: Console | None = None) -> None:
    """Format a sequence result as a Rich table.

    Args:
        result: SequenceResult to display
        console: Optional Rich console (creates one if not provided)
    """
    if console is None:
        console = Console()

    color = "red" if result.failed else "green"
    header_text = Text()
    header_text.append("TESSERA DEPLOYMENT REPORT\n\n", style="bold")
    header_text.append(f"Sequence: {result.sequence_name}\n")
    if result.environment:
        header_text.append(f"Environment: {result.environment}\n")
    status = "FAILED" if result.failed else ("DRY RUN" if result.dry_run else "SUCCEEDED")
    header_text.append("Status: ", style=color)
    header_text.append(status, style=f"bold {color}")
    header_text.append(
        f"\nSteps: {result.succeeded_count} succeeded, {len(result.instances)} deployed"
    )
    if result.total_duration_ms > 0:
        header_text.append(f"\nDuration: {result.total_duration_ms}ms")

    console.print(Panel(header_text, title="[bold]Deployment Results[/bold]"))

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=3)
    table.add_column("Status", width=3, justify="center")
    table.add_column("Step", min_width=20)
    table.add_column("Address", min_width=42)
    table.add_column("Duration", justify="right", width=10)

    for record in result.records:
        duration = f"{record.duration_ms}ms" if record.duration_ms > 0 else "-"
        table.add_row(
            str(record.index),
            _status_icon(record.status),
            Text(_step_target(record), style=_status_color(record.status)),
            record.address or "-",
            duration,
        )

    console.print(table)

    failed = result.failed_step
    if failed is not None:
        console.print()
        console.print("[bold red]Failed Step:[/bold red]")
        console.print(f"  [red]• step {failed.index} ({failed.label})[/red]: {failed.error}")


def format_result_json(result: SequenceResult, pretty: bool = True) -> str:
    """Format a sequence result as JSON.

    Args:
        result: SequenceResult to format
        pretty: Whether to use indentation

    Returns:
        JSON string representation
    """
    data = _result_to_dict(result)
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, default=str)


def _result_to_dict(result: SequenceResult) -> dict[str, Any]:
    """Convert SequenceResult to dictionary for JSON serialization."""
    failed = result.failed_step
    return {
        "sequence": result.sequence_name,
        "environment": result.environment,
        "succeeded": result.succeeded,
        "dry_run": result.dry_run,
        "failed_step": failed.index if failed is not None else None,
        "duration_ms": result.total_duration_ms,
        "started_at": result.started_at.isoformat() if result.started_at else None,
        "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        "instances": [
            {
                "step": instance.step_index,
                "artifact": instance.artifact_name,
                "address": instance.address,
            }
            for instance in result.instances
        ],
        "steps": [_record_to_dict(record) for record in result.records],
    }


def _record_to_dict(record: StepRecord) -> dict[str, Any]:
    """Convert StepRecord to dictionary for JSON serialization."""
    return {
        "index": record.index,
        "kind": record.kind,
        "label": record.label,
        "status": record.status.value,
        "artifact": record.artifact_name,
        "address": record.address,
        "method": record.method,
        "args": record.resolved_args,
        "error": record.error,
        "duration_ms": record.duration_ms,
    }


def print_result(
    result: SequenceResult,
    output_format: str = "table",
    console: Console | None = None,
) -> None:
    """Print a sequence result in the specified format.

    Args:
        result: SequenceResult to display
        output_format: Output format ("table" or "json")
        console: Optional Rich console
    """
    if console is None:
        console = Console()

    if output_format == "json":
        # Raw write keeps the JSON parseable
        json_str = format_result_json(result, pretty=True)
        if console.file is not None:
            console.file.write(json_str + "\n")
        else:
            print(json_str)
    else:
        format_result_table(result, console)
