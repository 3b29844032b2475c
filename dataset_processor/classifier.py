"""
Size-based sorting of dataset images.

Each image is copied into either the "selected" or the "discarded" folder
depending on its pixel dimensions. Sources are never modified.
"""

from enum import IntEnum
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .exceptions import IOFailure, OperationError
from .executor import build_report, copy_file_exclusive
from .progress import ProgressReporter
from .scanner import scan_groups


class SupportedDimension(IntEnum):
    """Pixel thresholds offered for sorting."""
    RESOLUTION_256 = 256
    RESOLUTION_512 = 512
    RESOLUTION_640 = 640
    RESOLUTION_768 = 768
    RESOLUTION_1024 = 1024
    RESOLUTION_1536 = 1536
    RESOLUTION_2048 = 2048

    @classmethod
    def from_value(cls, value) -> "SupportedDimension":
        """Parse 512, "512" or "RESOLUTION_512"."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text in cls.__members__:
            return cls[text]
        return cls(int(text))


def get_image_size(path: Path) -> tuple[int, int]:
    """
    Read the width and height of an image from its header.

    PIL opens images lazily, so the pixel data is not decoded.

    Raises:
        IOFailure: If the file cannot be opened or is not an image.
    """
    try:
        with Image.open(path) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        raise IOFailure(f"Cannot read image size: {e}", path=path, operation="read-size") from e


def should_discard(width: int, height: int, threshold: int) -> bool:
    """Discard only when both sides are strictly below the threshold."""
    return width < threshold and height < threshold


def sort_images(
    input_folder: Path,
    discarded_folder: Path,
    selected_folder: Path,
    dimension: SupportedDimension | int = SupportedDimension.RESOLUTION_512,
    progress: ProgressReporter | None = None,
    include_sidecars: bool = False,
    dry_run: bool = False
) -> dict:
    """
    Copy every image of a folder into the selected or discarded folder.

    Args:
        input_folder: Dataset folder to read.
        discarded_folder: Receives images smaller than the threshold on both sides.
        selected_folder: Receives every other image.
        dimension: Threshold in pixels.
        progress: Optional shared progress reporter, advanced once per image.
        include_sidecars: Also copy the image's sidecars next to it.
        dry_run: If True, only read sizes and report where each image would go.

    Returns:
        Report dict with "selected" and "discarded" counts.

    Raises:
        CollisionError: A file with the same name already exists in the
            destination. Remaining images are not processed; copies
            already made are kept.
        IOFailure: An image could not be read or copied.
    """
    input_folder = Path(input_folder)
    discarded_folder = Path(discarded_folder)
    selected_folder = Path(selected_folder)
    threshold = int(dimension)

    groups = scan_groups(input_folder)
    total = len(groups)

    if progress is not None and not dry_run:
        progress.set_total(total)

    selected = 0
    discarded = 0
    planned = []

    for done, group in enumerate(groups):
        try:
            width, height = get_image_size(group.image)

            if should_discard(width, height, threshold):
                destination = discarded_folder
                discarded += 1
            else:
                destination = selected_folder
                selected += 1

            sources = group.files() if include_sidecars else [group.image]

            if dry_run:
                planned.extend({"src": str(src), "dst": str(destination / src.name)} for src in sources)
                continue

            for src in sources:
                copy_file_exclusive(src, destination / src.name)
        except OperationError as e:
            e.completed = done
            raise
        finally:
            # A failed image still counts as processed
            if progress is not None and not dry_run:
                progress.advance()

    if not dry_run:
        print(f"[SORT] {selected} selected, {discarded} discarded (threshold {threshold}px)")

    extra = {"selected": selected, "discarded": discarded}
    if dry_run:
        extra["planned"] = planned
    return build_report("sort", input_folder, dry_run, total, 0 if dry_run else total, **extra)
