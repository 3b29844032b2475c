"""
Tag/caption based filtering of dataset images.
"""

from pathlib import Path

from .exceptions import FormatError, InvalidArgumentError
from .scanner import get_image_files, get_text_from_file
from .utils import SIDECAR_EXTENSIONS


def split_terms(terms: str) -> list[str]:
    """
    Split a comma separated query ("cat, dog,bird") into terms.

    Empty terms are dropped; an empty term would match every caption.
    """
    return [term for term in terms.replace(", ", ",").split(",") if term]


def parse_tags(content: str) -> list[str]:
    """Split sidecar content into tags, trimming surrounding whitespace."""
    tags = content.replace(", ", ",").replace("  ", " ").split(",")
    return [tag.strip() for tag in tags if tag.strip()]


def matches_terms(content: str, terms: list[str], exact_match: bool = False) -> bool:
    """
    Check whether sidecar content contains any of the query terms.

    Exact mode compares whole tags; otherwise any substring of the raw
    content counts. Comparison is case-sensitive.
    """
    if exact_match:
        tags = set(parse_tags(content))
        return any(term.strip() in tags for term in terms)
    return any(term in content for term in terms)


def sort_numerically(images: list[Path]) -> list[Path]:
    """
    Order images by the integer value of their base filename (2 before 10).

    Raises:
        FormatError: If a base filename is not an integer.
    """
    keyed = []
    for position, image in enumerate(images):
        try:
            keyed.append((int(image.stem), image))
        except ValueError as e:
            raise FormatError(
                "Base filename is not numeric; rename the dataset first",
                path=image,
                operation="numeric-sort",
                completed=position,
            ) from e
    keyed.sort(key=lambda item: item[0])
    return [image for _, image in keyed]


def filter_by_content(
    folder: Path,
    sidecar_extension: str,
    terms: str,
    exact_match: bool = False,
    numeric_order: bool = False
) -> list[Path]:
    """
    Return the images whose sidecar contains any of the query terms.

    Args:
        folder: Dataset folder.
        sidecar_extension: ".txt" or ".caption".
        terms: Comma separated query.
        exact_match: Match whole tags instead of substrings.
        numeric_order: Order the result by numeric base filename (for
            renamed datasets) instead of by path.

    Returns:
        Matching image paths; an empty list when nothing matches.

    Raises:
        InvalidArgumentError: Unsupported sidecar extension.
        FormatError: numeric_order is set and a base filename is not numeric.
    """
    if sidecar_extension not in SIDECAR_EXTENSIONS:
        raise InvalidArgumentError(
            f"File extension must be either {' or '.join(SIDECAR_EXTENSIONS)}, got {sidecar_extension!r}"
        )

    query = split_terms(terms)
    if not query:
        return []

    matches = []
    for image in get_image_files(Path(folder)):
        content = get_text_from_file(image, sidecar_extension)
        if matches_terms(content, query, exact_match):
            matches.append(image)

    if numeric_order:
        return sort_numerically(matches)
    return matches
