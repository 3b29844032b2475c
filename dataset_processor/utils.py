"""
Utility functions for the dataset processor.

Includes:
- Extension constants shared by every operation
- JSON save helper
- Exception log persistence
- UI helpers
"""

import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any
from rich.console import Console
from rich.table import Table
from rich.tree import Tree
from rich.panel import Panel

# Global console instance
console = Console()

# -----------------------------------------------------------------------------
# Dataset file conventions
# -----------------------------------------------------------------------------

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

# Order matters: sidecars are always handled .txt first, then .caption
SIDECAR_EXTENSIONS = (".txt", ".caption")

# Written by some training tools next to the images, never a real data file
RESERVED_FILENAME = "sample_prompt_custom.txt"


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{subtitle}[/italic]", expand=False))


def print_report_table(report: dict):
    """Print a summary table of an operation report."""
    table = Table(title=f"{report.get('operation', 'operation').capitalize()} Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta")

    for key, value in report.items():
        if isinstance(value, int) and not isinstance(value, bool):
            table.add_row(key.replace("_", " ").capitalize(), str(value))

    console.print(table)

    planned = report.get("planned", [])
    if planned:
        tree = Tree("[bold green]Sample Operations[/bold green]")
        for item in planned[:10]:
            tree.add(f"[yellow]{item['src']}[/yellow] -> [blue]{item['dst']}[/blue]")
        if len(planned) > 10:
            tree.add(f"[italic]... and {len(planned)-10} more[/italic]")
        console.print(tree)


def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {msg}")

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {msg}")

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {msg}")


def create_folder_if_not_exist(path: Path) -> Path:
    """
    Create a folder (and its parents) if it does not already exist.

    Args:
        path: The folder to create.

    Returns:
        The same path, for chaining.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_exception_log(
    exc: BaseException,
    message: str = "",
    log_dir: Path = Path("logs"),
    severity: str = "ERROR"
) -> Path:
    """
    Persist a failure with its full traceback to a timestamped log file.

    Args:
        exc: The exception to record.
        message: Human-readable summary written above the traceback.
        log_dir: Folder that receives the log files (created if missing).
        severity: Severity label written in the header line.

    Returns:
        Path of the written log file.
    """
    create_folder_if_not_exist(log_dir)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Path(log_dir) / f"error_{timestamp}.log"

    counter = 1
    while log_file.exists():
        log_file = Path(log_dir) / f"error_{timestamp}_{counter}.log"
        counter += 1

    lines = [
        f"[{severity}] {datetime.now().isoformat(timespec='seconds')}",
        message or str(exc),
        "",
    ]
    lines.extend(traceback.format_exception(type(exc), exc, exc.__traceback__))

    with open(log_file, 'w', encoding='utf-8') as f:
        f.write("\n".join(line.rstrip("\n") for line in lines) + "\n")

    return log_file


def save_json(data: Any, path: Path) -> None:
    """
    Save data to a JSON file with pretty formatting.

    Args:
        data: The data to serialize.
        path: The output file path.
    """
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    print(f"[INFO] Saved: {path}")

