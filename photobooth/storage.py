"""Local storage backend for composite images.

This module persists the bytes produced by the pipeline under the image
library directory and builds the URLs the frontend uses to fetch them. The
library directory is mounted by the service at ``/image_library/``, so a
file stored at ``uploads/img_....jpg`` is served from
``/image_library/uploads/img_....jpg``.

Layout under the library root:
    uploads/: Composite JPEGs, one per saved image.
    meta/: One JSON record per image (see :mod:`photobooth.records`).
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

UPLOADS_SUBDIR = "uploads"


def _ensure_dir(path: str) -> None:
    """Create parent directories for the given path if they do not exist."""
    os.makedirs(path, exist_ok=True)


def resolve(library_dir: str, path: str) -> str:
    """Join ``path`` onto ``library_dir``, refusing anything that escapes it.

    Raises:
        ValueError: If ``path`` is absolute or climbs out of the library.
    """
    root = os.path.realpath(library_dir)
    dest = os.path.realpath(os.path.join(root, path))
    if os.path.isabs(path) or os.path.commonpath([root, dest]) != root or dest == root:
        raise ValueError(f"path {path!r} is outside the image library")
    return dest


def upload_path(filename: str) -> str:
    """Library-relative path for a composite named ``filename``."""
    if os.path.basename(filename) != filename or filename in ("", ".", ".."):
        raise ValueError(f"invalid filename {filename!r}")
    return f"{UPLOADS_SUBDIR}/{filename}"


def save_bytes(library_dir: str, path: str, data: bytes) -> str:
    """Write ``data`` to ``path`` inside the library.

    The bytes go to a temporary sibling first and are moved into place, so
    readers never see a partially written file. The temporary file is
    removed if the write or the move fails.

    Args:
        library_dir: Root of the image library.
        path: Relative path at which to store the bytes, e.g.
            'uploads/img_1234.jpg'.
        data: Raw byte content to write.

    Returns:
        A URL string that can be used by the frontend to retrieve the data.
    """
    dest_path = resolve(library_dir, path)
    _ensure_dir(os.path.dirname(dest_path))
    tmp_path = f"{dest_path}.part"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, dest_path)
    except OSError:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
        raise
    logger.debug("Stored %d bytes at %s", len(data), path)
    return public_url(path)


def delete_bytes(library_dir: str, path: str) -> bool:
    """Remove ``path`` from the library. Returns False if it did not exist."""
    dest_path = resolve(library_dir, path)
    try:
        os.remove(dest_path)
    except FileNotFoundError:
        return False
    logger.info("Deleted %s", path)
    return True


def public_url(path: str) -> str:
    """URL under which the service serves the library-relative ``path``."""
    return f"/image_library/{path}".replace("\\", "/")
