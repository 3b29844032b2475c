"""
Sequential ("crescent") renaming of a dataset folder.

Renames every image group in a folder to 1..N, keeping each image and its
sidecars together. Renaming happens in two passes so that no final name
can clash with a file that has not been renamed yet:

1. every file gets a temporary suffix (``name.png`` -> ``name_temp.png``);
2. the folder is rescanned and every group is renamed to its number.

The numbering follows the lexicographic order of the names *before*
renaming. The rescan alone does not guarantee that (``a_b_temp`` sorts
before ``a_temp`` although ``a`` sorts before ``a_b``), so the second
pass is ordered by the position each group had in the first scan.
"""

from pathlib import Path

from .exceptions import OperationError
from .executor import build_report, move_file
from .progress import ProgressReporter
from .scanner import FileGroup, scan_groups

TEMP_SUFFIX = "_temp"


def temporary_name(path: Path) -> Path:
    """Insert the temporary suffix before the extension."""
    return path.with_name(f"{path.stem}{TEMP_SUFFIX}{path.suffix}")


def crescent_name(path: Path, index: int) -> Path:
    """Target name of a file whose group sits at 0-based position `index`."""
    return path.with_name(f"{index + 1}{path.suffix}")


def _move_group(group: FileGroup, target_for, operation: str, completed: int) -> None:
    for src in group.files():
        try:
            move_file(src, target_for(src))
        except OperationError as e:
            e.operation = operation
            e.completed = completed
            raise


def _order_like_first_scan(groups: list[FileGroup], first_positions: dict[Path, int]) -> list[FileGroup]:
    # Groups that were not part of the first pass (added meanwhile) go last, in scan order
    fallback = len(first_positions)
    indexed = list(enumerate(groups))
    indexed.sort(key=lambda item: (first_positions.get(item[1].image, fallback), item[0]))
    return [group for _, group in indexed]


def rename_all_to_crescent(
    folder: Path,
    progress: ProgressReporter | None = None,
    dry_run: bool = False
) -> dict:
    """
    Rename all image groups in a folder to 1..N in scan order.

    Progress (if given) covers both passes: its total is twice the number of
    groups and it advances once per group per pass.

    Args:
        folder: Dataset folder.
        progress: Optional shared progress reporter.
        dry_run: If True, only compute the final names.

    Returns:
        Report dict (see executor.build_report) with a "renamed" count.

    Raises:
        CollisionError: A temporary or final name already exists. Files
            already renamed are left as they are (possibly with the
            temporary suffix); nothing is rolled back.
        IOFailure: A move failed.
    """
    folder = Path(folder)
    groups = scan_groups(folder)
    total = len(groups)

    if dry_run:
        planned = [
            {"src": src.name, "dst": crescent_name(src, i).name}
            for i, group in enumerate(groups)
            for src in group.files()
        ]
        return build_report("rename", folder, True, total, 0, renamed=0, planned=planned)

    if not groups:
        return build_report("rename", folder, False, 0, 0, renamed=0)

    if progress is not None:
        progress.set_total(total * 2)

    # Pass 1: temporary names
    first_positions: dict[Path, int] = {}
    for i, group in enumerate(groups):
        _move_group(group, temporary_name, "rename-temp", 0)
        first_positions[temporary_name(group.image)] = i
        if progress is not None:
            progress.advance()

    # Pass 2: final names
    temp_groups = _order_like_first_scan(scan_groups(folder), first_positions)
    for i, group in enumerate(temp_groups):
        _move_group(group, lambda src: crescent_name(src, i), "rename-final", i)
        if progress is not None:
            progress.advance()

    print(f"[RENAME] Renamed {len(temp_groups)} groups in {folder}")
    return build_report("rename", folder, False, total, len(temp_groups), renamed=len(temp_groups))
