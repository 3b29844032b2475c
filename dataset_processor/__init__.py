"""
Dataset Processor
=================

Keeps image datasets and their tag/caption sidecar files together while
renaming, sorting, filtering and backing them up.
"""

__version__ = "1.0.0"

from .scanner import FileGroup, scan_groups, get_image_files, get_text_from_file, save_text_for_image
from .progress import ProgressReporter, ProgressSnapshot, run_in_background
from .renamer import rename_all_to_crescent
from .classifier import SupportedDimension, get_image_size, sort_images
from .content_filter import filter_by_content, sort_numerically
from .backup import backup_files
from .exceptions import (
    DatasetProcessorError,
    OperationError,
    CollisionError,
    IOFailure,
    FormatError,
    InvalidArgumentError,
    ConfigurationError,
)
from .utils import IMAGE_EXTENSIONS, SIDECAR_EXTENSIONS, RESERVED_FILENAME, create_folder_if_not_exist

__all__ = [
    "FileGroup",
    "scan_groups",
    "get_image_files",
    "get_text_from_file",
    "save_text_for_image",
    "ProgressReporter",
    "ProgressSnapshot",
    "run_in_background",
    "rename_all_to_crescent",
    "SupportedDimension",
    "get_image_size",
    "sort_images",
    "filter_by_content",
    "sort_numerically",
    "backup_files",
    "DatasetProcessorError",
    "OperationError",
    "CollisionError",
    "IOFailure",
    "FormatError",
    "InvalidArgumentError",
    "ConfigurationError",
    "IMAGE_EXTENSIONS",
    "SIDECAR_EXTENSIONS",
    "RESERVED_FILENAME",
    "create_folder_if_not_exist",
]
