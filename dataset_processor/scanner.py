"""
Directory scanning and file group collection.

An image and the sidecar text files sharing its base name form a group.
Every operation rescans the folder; nothing is cached between calls.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import InvalidArgumentError, IOFailure
from .utils import IMAGE_EXTENSIONS, SIDECAR_EXTENSIONS, RESERVED_FILENAME


@dataclass
class FileGroup:
    """One image plus the sidecars that share its base filename."""
    image: Path
    sidecars: dict[str, Path] = field(default_factory=dict)

    @property
    def stem(self) -> str:
        return self.image.stem

    @property
    def directory(self) -> Path:
        return self.image.parent

    def files(self) -> list[Path]:
        """The primary image followed by its sidecars in extension order."""
        return [self.image] + [self.sidecars[ext] for ext in SIDECAR_EXTENSIONS if ext in self.sidecars]


def sidecar_path(image: Path, extension: str) -> Path:
    """Path of the sidecar with the given extension, whether or not it exists."""
    return Path(image).with_suffix(extension)


def _list_image_files(folder: Path, image_extensions) -> list[Path]:
    allowed = {ext.lower() for ext in image_extensions}
    images = []

    try:
        with os.scandir(folder) as entries:
            for entry in entries:
                if entry.name == RESERVED_FILENAME:
                    continue
                if not entry.is_file():
                    continue
                ext = os.path.splitext(entry.name)[1].lower()
                if ext in allowed:
                    images.append(Path(entry.path))
    except OSError as e:
        raise IOFailure(f"Cannot list directory: {e}", path=folder, operation="scan") from e

    # Plain string comparison keeps the order independent of locale
    images.sort(key=lambda p: str(p))
    return images


def scan_groups(folder: Path, image_extensions=IMAGE_EXTENSIONS) -> list[FileGroup]:
    """
    Scan a folder (non-recursive) and return its file groups.

    Args:
        folder: The directory to scan. Must exist.
        image_extensions: Allowed image extensions, compared case-insensitively.

    Returns:
        FileGroups sorted lexicographically by full image path.

    Raises:
        InvalidArgumentError: If the folder does not exist.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise InvalidArgumentError(f"Directory not found: {folder}")

    groups = []
    # Two images with the same stem (a.jpg, a.png) would share one sidecar;
    # the first image in scan order owns it.
    claimed: set[Path] = set()

    for image in _list_image_files(folder, image_extensions):
        group = FileGroup(image=image)
        for ext in SIDECAR_EXTENSIONS:
            candidate = sidecar_path(image, ext)
            if candidate.name == RESERVED_FILENAME or candidate in claimed:
                continue
            if candidate.is_file():
                group.sidecars[ext] = candidate
                claimed.add(candidate)
        groups.append(group)

    return groups


def get_image_files(folder: Path) -> list[Path]:
    """Return the sorted image paths of a folder, without sidecars."""
    return [group.image for group in scan_groups(folder)]


def get_text_from_file(image: Path, extension: str = ".txt") -> str:
    """
    Read the sidecar text of an image.

    A missing sidecar is not an error: the image simply has no tags yet.
    A leading BOM is dropped and undecodable bytes become U+FFFD, so tag
    files saved by other editors still read.

    Args:
        image: Path of the image file.
        extension: Sidecar extension (.txt or .caption).

    Returns:
        The sidecar content, or an empty string if there is none.

    Raises:
        IOFailure: If the sidecar exists but cannot be read.
    """
    path = sidecar_path(image, extension)
    try:
        return path.read_text(encoding='utf-8-sig', errors='replace')
    except FileNotFoundError:
        return ""
    except OSError as e:
        raise IOFailure(f"Cannot read sidecar: {e}", path=path, operation="read-sidecar") from e


def save_text_for_image(path: Path, text: str) -> None:
    """Write sidecar text, replacing any previous content."""
    Path(path).write_text(text, encoding='utf-8')
