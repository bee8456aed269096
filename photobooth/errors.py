"""Error taxonomy for the composition pipeline.

Every data-dependent failure inside the pipeline is raised as a subclass of
:class:`PipelineError`. Each carries an :class:`ErrorKind` and a fixed
``public_message`` that is safe to show to end users: it never contains the
payload, file system paths or the underlying library error. The original
exception, when there is one, is chained via ``raise ... from exc`` so it
remains available in logs.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    TOO_LARGE = "TooLarge"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    CORRUPT_IMAGE = "CorruptImage"
    DECODE_FAILED = "DecodeFailed"
    OVERLAY_NOT_FOUND = "OverlayNotFound"
    ENCODE_FAILED = "EncodeFailed"


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    kind: ErrorKind
    public_message: str = "Image processing failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail


class TooLargeError(PipelineError):
    kind = ErrorKind.TOO_LARGE
    public_message = "Image too large"


class UnsupportedFormatError(PipelineError):
    kind = ErrorKind.UNSUPPORTED_FORMAT
    public_message = "Unsupported file type"


class CorruptImageError(PipelineError):
    kind = ErrorKind.CORRUPT_IMAGE
    public_message = "File is not a valid image"


class DecodeFailedError(PipelineError):
    kind = ErrorKind.DECODE_FAILED
    public_message = "Could not read image data"


class OverlayNotFoundError(PipelineError):
    kind = ErrorKind.OVERLAY_NOT_FOUND
    public_message = "Overlay not found"


class EncodeFailedError(PipelineError):
    kind = ErrorKind.ENCODE_FAILED
    public_message = "Could not save image"
