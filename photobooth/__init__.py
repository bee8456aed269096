"""Photo-booth image composition.

This package turns untrusted image uploads into framed JPEGs: it validates
and decodes the payload, shrinks it to the configured bounds, blends a
decorative PNG overlay over the center and encodes the result under a
unique name. :class:`~photobooth.pipeline.Pipeline` is the entry point;
storage of the results is handled by :mod:`photobooth.storage` and
:mod:`photobooth.records` on behalf of the web service.
"""

from .encoder import CompositeResult
from .errors import ErrorKind, PipelineError
from .overlays import Overlay, OverlayRegistry
from .pipeline import Pipeline
from .raster import ImageFormat, RasterImage

__all__ = [
    "CompositeResult",
    "ErrorKind",
    "ImageFormat",
    "Overlay",
    "OverlayRegistry",
    "Pipeline",
    "PipelineError",
    "RasterImage",
]
