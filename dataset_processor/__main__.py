#!/usr/bin/env python3
"""
Dataset Processor - CLI Entry Point
===================================

Usage:
    python -m dataset_processor scan /path/to/dataset
    python -m dataset_processor rename /path/to/dataset --dry-run
    python -m dataset_processor sort /path/to/dataset --dimension 768 --backup
    python -m dataset_processor filter /path/to/dataset "cat, dog" --exact
    python -m dataset_processor backup /path/to/dataset --backup-folder images_backup
"""

import argparse
import sys
import time
from pathlib import Path

from tqdm import tqdm

from .backup import backup_files
from .classifier import SupportedDimension, sort_images
from .config import load_settings
from .content_filter import filter_by_content
from .exceptions import ConfigurationError, DatasetProcessorError, InvalidArgumentError
from .progress import ProgressReporter, run_in_background
from .renamer import rename_all_to_crescent
from .scanner import scan_groups
from .utils import (
    SIDECAR_EXTENSIONS,
    console,
    create_folder_if_not_exist,
    print_error,
    print_header,
    print_report_table,
    print_success,
    print_warning,
    save_exception_log,
    save_json,
)

POLL_INTERVAL = 0.1


def run_with_progress(description: str, fn, *args, **kwargs):
    """
    Run an operation on a background worker and render its progress.

    The operation receives a fresh ProgressReporter through the `progress`
    keyword; this thread only polls it.

    Returns:
        The operation's return value. Its exception is re-raised here.
    """
    progress = ProgressReporter()
    future = run_in_background(fn, *args, progress=progress, **kwargs)

    with tqdm(total=0, desc=description, unit="step") as pbar:
        while True:
            done = future.done()
            snap = progress.snapshot()
            if pbar.total != snap.total:
                pbar.total = snap.total
            pbar.n = snap.current
            pbar.refresh()
            if done:
                break
            time.sleep(POLL_INTERVAL)

    return future.result()


def _check_folder(path: Path) -> Path:
    path = path.resolve()
    if not path.exists() or not path.is_dir():
        raise InvalidArgumentError(f"Invalid directory: {path}")
    return path


def _finish(report: dict, args) -> int:
    print_report_table(report)
    if getattr(args, "report_out", None):
        save_json(report, args.report_out)
    if report.get("dry_run"):
        print_warning("This was a DRY-RUN. No files were changed.")
    else:
        print_success(f"{report['operation'].capitalize()} complete: {report['completed']}/{report['total']} groups")
    return 0


def cmd_scan(args, settings) -> int:
    """Scan command - list image groups and their sidecars."""
    root = _check_folder(args.root)
    groups = scan_groups(root)

    with_txt = sum(1 for g in groups if ".txt" in g.sidecars)
    with_caption = sum(1 for g in groups if ".caption" in g.sidecars)

    for group in groups[:args.limit]:
        sidecars = ", ".join(p.name for p in group.sidecars.values()) or "[italic]no sidecars[/italic]"
        console.print(f"  [yellow]{group.image.name}[/yellow] -> {sidecars}")
    if len(groups) > args.limit:
        console.print(f"  [italic]... and {len(groups) - args.limit} more[/italic]")

    console.print(f"[INFO] {len(groups)} images, {with_txt} with .txt, {with_caption} with .caption")
    return 0


def cmd_rename(args, settings) -> int:
    """Rename command - renumber all groups to 1..N."""
    root = _check_folder(args.root)
    print_header("Crescent Rename", f"Folder: {root}")

    if args.dry_run:
        report = rename_all_to_crescent(root, dry_run=True)
    else:
        report = run_with_progress("Renaming", rename_all_to_crescent, root)
    return _finish(report, args)


def cmd_sort(args, settings) -> int:
    """Sort command - copy images into selected/discarded folders by size."""
    root = _check_folder(args.root)
    selected = create_folder_if_not_exist(args.selected_folder or settings.selected_folder)
    discarded = create_folder_if_not_exist(args.discarded_folder or settings.discarded_folder)
    dimension = SupportedDimension.from_value(args.dimension) if args.dimension else settings.dimension

    print_header("Sort Images", f"Folder: {root}\nThreshold: {dimension.value}px")

    if args.backup and not args.dry_run:
        backup_folder = create_folder_if_not_exist(args.backup_folder or settings.backup_folder)
        console.print(f"[bold cyan][STEP 1] Backing up to {backup_folder}...[/bold cyan]")
        run_with_progress("Backing up", backup_files, root, backup_folder)

    console.print("[bold cyan]Sorting images...[/bold cyan]")
    if args.dry_run:
        report = sort_images(root, discarded, selected, dimension,
                             include_sidecars=args.with_sidecars, dry_run=True)
    else:
        report = run_with_progress("Sorting", sort_images, root, discarded, selected, dimension,
                                   include_sidecars=args.with_sidecars)
    return _finish(report, args)


def cmd_filter(args, settings) -> int:
    """Filter command - list images whose sidecar contains any term."""
    root = _check_folder(args.root)
    extension = args.extension or settings.sidecar_extension
    exact = args.exact or settings.exact_match

    results = filter_by_content(root, extension, args.terms, exact, numeric_order=args.numeric_order)

    if not results:
        print_warning("No images found!")
        return 0

    for image in results:
        console.print(str(image))
    console.print(f"[INFO] {len(results)} matching images")
    return 0


def cmd_backup(args, settings) -> int:
    """Backup command - copy all groups to the backup folder."""
    root = _check_folder(args.root)
    backup_folder = create_folder_if_not_exist(args.backup_folder or settings.backup_folder)
    print_header("Backup", f"Folder: {root}\nBackup: {backup_folder}")

    if args.dry_run:
        report = backup_files(root, backup_folder, dry_run=True)
    else:
        report = run_with_progress("Backing up", backup_files, root, backup_folder)
    return _finish(report, args)


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Dataset Processor - Rename, sort and filter image datasets with their tag files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    dimension_choices = [str(d.value) for d in SupportedDimension]

    # --- SCAN command ---
    scan_parser = subparsers.add_parser("scan", help="List image groups and their sidecars")
    scan_parser.add_argument("root", type=Path, help="Dataset folder")
    scan_parser.add_argument("--limit", type=int, default=20,
                            help="Number of groups to print (default: 20)")
    scan_parser.set_defaults(func=cmd_scan)

    # --- RENAME command ---
    rename_parser = subparsers.add_parser("rename", help="Rename all groups to 1..N")
    rename_parser.add_argument("root", type=Path, help="Dataset folder")
    rename_parser.add_argument("--dry-run", action="store_true",
                              help="Show the new names without renaming")
    rename_parser.add_argument("--report-out", type=Path, help="Save the report as JSON")
    rename_parser.set_defaults(func=cmd_rename)

    # --- SORT command ---
    sort_parser = subparsers.add_parser("sort", help="Copy images into selected/discarded folders by size")
    sort_parser.add_argument("root", type=Path, help="Dataset folder")
    sort_parser.add_argument("--dimension", choices=dimension_choices,
                            help="Threshold in pixels (default: from settings, 512)")
    sort_parser.add_argument("--selected-folder", type=Path, help="Folder for kept images")
    sort_parser.add_argument("--discarded-folder", type=Path, help="Folder for discarded images")
    sort_parser.add_argument("--backup", action="store_true",
                            help="Back up the input folder before sorting")
    sort_parser.add_argument("--backup-folder", type=Path, help="Backup folder")
    sort_parser.add_argument("--with-sidecars", action="store_true",
                            help="Copy .txt/.caption files along with each image")
    sort_parser.add_argument("--dry-run", action="store_true",
                            help="Show where each image would go without copying")
    sort_parser.add_argument("--report-out", type=Path, help="Save the report as JSON")
    sort_parser.set_defaults(func=cmd_sort)

    # --- FILTER command ---
    filter_parser = subparsers.add_parser("filter", help="Find images whose tags contain any term")
    filter_parser.add_argument("root", type=Path, help="Dataset folder")
    filter_parser.add_argument("terms", type=str, help="Comma separated terms")
    filter_parser.add_argument("--extension", choices=list(SIDECAR_EXTENSIONS),
                              help="Sidecar type to search (default: .txt)")
    filter_parser.add_argument("--exact", action="store_true",
                              help="Match whole tags instead of substrings")
    filter_parser.add_argument("--numeric-order", action="store_true",
                              help="Order by numeric filename (renamed datasets)")
    filter_parser.set_defaults(func=cmd_filter)

    # --- BACKUP command ---
    backup_parser = subparsers.add_parser("backup", help="Copy all groups to a backup folder")
    backup_parser.add_argument("root", type=Path, help="Dataset folder")
    backup_parser.add_argument("--backup-folder", type=Path, help="Backup folder")
    backup_parser.add_argument("--dry-run", action="store_true",
                              help="Show the planned copies without copying")
    backup_parser.add_argument("--report-out", type=Path, help="Save the report as JSON")
    backup_parser.set_defaults(func=cmd_backup)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print_error(str(e))
        return 1

    try:
        return args.func(args, settings)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130
    except InvalidArgumentError as e:
        print_error(str(e))
        return 1
    except DatasetProcessorError as e:
        print_error(str(e))
        completed = getattr(e, "completed", None)
        if completed is not None:
            print_warning(f"{completed} groups were processed before the failure; nothing was rolled back.")
        log_file = save_exception_log(e, str(e), settings.log_folder)
        console.print(f"[INFO] Error log saved to {log_file}")
        return 1
    except Exception as e:
        log_file = save_exception_log(e, "Unexpected failure", settings.log_folder)
        print_error(f"Something went wrong! Error log saved to {log_file}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
