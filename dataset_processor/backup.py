"""
Backup of a dataset folder before a destructive operation.
"""

from pathlib import Path

from .exceptions import OperationError
from .executor import build_report, copy_file_exclusive
from .progress import ProgressReporter
from .scanner import scan_groups


def backup_destination(source: Path, backup_folder: Path) -> Path:
    """Where a file lands in the backup folder: same filename, flat."""
    return Path(backup_folder) / Path(source).name


def backup_files(
    input_folder: Path,
    backup_folder: Path,
    progress: ProgressReporter | None = None,
    dry_run: bool = False
) -> dict:
    """
    Copy every image group (image and sidecars) into the backup folder.

    Args:
        input_folder: Dataset folder to back up.
        backup_folder: Destination folder; must exist.
        progress: Optional shared progress reporter, advanced once per group.
        dry_run: If True, only report the planned copies.

    Returns:
        Report dict with a "copied_files" count.

    Raises:
        CollisionError: A file with the same name is already in the backup
            folder. Earlier copies are kept.
        IOFailure: A copy failed.
    """
    input_folder = Path(input_folder)
    backup_folder = Path(backup_folder)
    groups = scan_groups(input_folder)
    total = len(groups)

    if dry_run:
        planned = [
            {"src": str(src), "dst": str(backup_destination(src, backup_folder))}
            for group in groups
            for src in group.files()
        ]
        return build_report("backup", input_folder, True, total, 0, copied_files=0, planned=planned)

    if progress is not None:
        progress.set_total(total)

    copied_files = 0
    for done, group in enumerate(groups):
        try:
            for src in group.files():
                copy_file_exclusive(src, backup_destination(src, backup_folder))
                copied_files += 1
        except OperationError as e:
            e.completed = done
            raise
        if progress is not None:
            progress.advance()

    print(f"[BACKUP] Copied {copied_files} files to {backup_folder}")
    return build_report("backup", input_folder, False, total, total, copied_files=copied_files)
