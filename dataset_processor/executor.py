"""
File move/copy primitives shared by the dataset operations.

Every helper refuses to overwrite an existing destination and turns
filesystem errors into the typed errors of `exceptions`.
"""

import shutil
from datetime import datetime
from pathlib import Path

from .exceptions import CollisionError, IOFailure

COPY_BUFFER_SIZE = 1024 * 1024


def move_file(src: Path, dst: Path) -> None:
    """
    Move (rename) a single file, never replacing an existing one.

    Raises:
        CollisionError: If dst already exists.
        IOFailure: If src is missing or the move fails.
    """
    if dst.exists():
        raise CollisionError("Destination exists", path=dst, operation="move")

    if not src.exists():
        raise IOFailure("Source not found", path=src, operation="move")

    try:
        shutil.move(str(src), str(dst))
    except FileExistsError as e:
        raise CollisionError("Destination exists (race condition)", path=dst, operation="move") from e
    except OSError as e:
        raise IOFailure(f"Move failed: {e}", path=src, operation="move") from e


def copy_file_exclusive(src: Path, dst: Path) -> None:
    """
    Stream-copy a file byte for byte into a destination that must not exist yet.

    The destination is opened in exclusive-create mode, so a file that
    appears between the check and the write is still never overwritten.

    Raises:
        CollisionError: If dst already exists.
        IOFailure: If reading or writing fails.
    """
    try:
        read_stream = open(src, 'rb')
    except OSError as e:
        raise IOFailure(f"Cannot read source: {e}", path=src, operation="copy") from e

    with read_stream:
        try:
            write_stream = open(dst, 'xb')
        except FileExistsError as e:
            raise CollisionError("Destination exists", path=dst, operation="copy") from e
        except OSError as e:
            raise IOFailure(f"Cannot create destination: {e}", path=dst, operation="copy") from e

        try:
            with write_stream:
                shutil.copyfileobj(read_stream, write_stream, COPY_BUFFER_SIZE)
        except OSError as e:
            # Drop the truncated copy so a rerun does not see a false collision
            Path(dst).unlink(missing_ok=True)
            raise IOFailure(f"Copy failed: {e}", path=src, operation="copy") from e


def build_report(operation: str, root: Path, dry_run: bool, total: int, completed: int, **extra) -> dict:
    """
    Build the summary dict returned by every batch operation.

    Args:
        operation: Operation name ("rename", "sort", "backup").
        root: The input folder.
        dry_run: Whether the filesystem was left untouched.
        total: Number of groups the operation covered.
        completed: Number of groups fully processed.
        **extra: Operation-specific counters or lists.
    """
    report = {
        "operation": operation,
        "root": str(root),
        "dry_run": dry_run,
        "executed_at": datetime.now().isoformat(timespec='seconds'),
        "total": total,
        "completed": completed,
    }
    report.update(extra)
    return report
