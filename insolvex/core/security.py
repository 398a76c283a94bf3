"""Safety checks for page images and files written by the extractor."""

import re
from pathlib import Path
from typing import Sequence

from .exceptions import ImageValidationError, PathTraversalError, ResourceLimitError, SecurityError

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".heic": "image/heic",
}

# Substrings that let a relative path climb out of where it points.
TRAVERSAL_MARKERS = ("..", "~", "//", "\\\\", "/./")

_BAD_PATH_CHARS = re.compile(r'[<>"|?*\x00-\x1f]')
_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._\-\s]")
_DOT_RUNS = re.compile(r"\.{2,}")


def validate_safe_path(file_path: str | Path, allowed_extensions: tuple[str, ...] = tuple(IMAGE_MIME_TYPES)) -> Path:
    """Check a page image path and return it resolved.

    Args:
        file_path: Path as given on the command line
        allowed_extensions: Accepted suffixes, compared case-insensitively.
            An empty tuple accepts any suffix.

    Returns:
        The resolved Path

    Raises:
        PathTraversalError: If the path contains a traversal marker
        SecurityError: On control or shell characters, or a disallowed suffix
    """
    raw = str(file_path)
    if any(marker in raw for marker in TRAVERSAL_MARKERS):
        raise PathTraversalError(raw)
    if _BAD_PATH_CHARS.search(raw):
        raise SecurityError(f"Invalid characters in path: {raw}", "invalid_characters", raw)

    resolved = Path(file_path).resolve()
    allowed = {ext.lower() for ext in allowed_extensions}
    if allowed and resolved.suffix.lower() not in allowed:
        raise SecurityError(
            f"Extension '{resolved.suffix}' is not one of {sorted(allowed)}",
            "invalid_extension",
            raw
        )
    return resolved


def check_image_size(file_path: Path, max_size_mb: float) -> float:
    """Return the image size in MB after checking it is non-empty and within limit.

    Raises:
        ImageValidationError: If the file is missing or empty
        ResourceLimitError: If the file exceeds ``max_size_mb``
    """
    if not file_path.is_file():
        raise ImageValidationError(file_path, "file does not exist")

    size_mb = file_path.stat().st_size / (1024 * 1024)
    if size_mb == 0:
        raise ImageValidationError(file_path, "file is empty")
    if size_mb > max_size_mb:
        raise ResourceLimitError("image_size", round(size_mb, 2), max_size_mb, "MB")
    return size_mb


def validate_image_count(paths: Sequence[str | Path], max_images: int) -> None:
    """Raise unless 1..max_images page images were given."""
    if not paths:
        raise ImageValidationError("<none>", "no page images given")
    if len(paths) > max_images:
        raise ResourceLimitError("page_images", len(paths), max_images, "images")


def sanitize_filename(filename: str, max_length: int = 255) -> str:
    """Turn an arbitrary document name into a safe file name.

    Characters other than letters, digits, ``._-`` and whitespace become
    underscores, dot runs collapse to one dot and the result is cut to
    ``max_length`` keeping its suffix.

    Raises:
        SecurityError: If nothing usable is left
    """
    if not filename or not filename.strip():
        raise SecurityError("Empty filename provided", "empty_filename")

    cleaned = _DOT_RUNS.sub(".", _UNSAFE_NAME_CHARS.sub("_", filename)).strip(". ")
    if len(cleaned) > max_length:
        suffix = Path(cleaned).suffix
        cleaned = cleaned[:max_length - len(suffix)].rstrip(". ") + suffix

    if not cleaned:
        raise SecurityError("Filename could not be sanitized safely", "unsanitizable_filename")
    return cleaned


__all__ = [
    "IMAGE_MIME_TYPES",
    "check_image_size",
    "sanitize_filename",
    "validate_image_count",
    "validate_safe_path",
]
