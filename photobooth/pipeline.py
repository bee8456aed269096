"""Entry points of the composition pipeline.

:class:`Pipeline` wires the stages together around an injected, already
loaded :class:`~photobooth.overlays.OverlayRegistry`. It holds no mutable
state, so one instance can serve concurrent calls from a thread pool.
"""

from __future__ import annotations

import logging
from typing import KeysView, Optional

from . import compositor, decoder, encoder, resizer, validator
from .config import Settings
from .encoder import CompositeResult
from .errors import PipelineError
from .overlays import OverlayRegistry

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(self, registry: OverlayRegistry, settings: Optional[Settings] = None) -> None:
        self.registry = registry
        self.settings = settings or Settings()

    def list_overlays(self) -> KeysView[str]:
        """Names accepted by :meth:`compose`, in registry order."""
        return self.registry.names()

    def compose(
        self,
        raw_bytes: bytes,
        overlay_name: str,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
        max_input_size: Optional[int] = None,
    ) -> CompositeResult:
        """Stamp ``overlay_name`` onto the image in ``raw_bytes``.

        Bounds default to the pipeline settings. The input is validated, the
        overlay looked up and the image decoded before any blending or
        encoding starts.

        Raises:
            ValueError: If ``max_width``, ``max_height`` or ``max_input_size``
                is not positive. This is a caller error and is raised before
                the input is looked at.
            PipelineError: One of its subclasses, for every data-dependent
                failure.
        """
        max_width = self.settings.max_width if max_width is None else max_width
        max_height = self.settings.max_height if max_height is None else max_height
        max_input_size = self.settings.max_input_size if max_input_size is None else max_input_size
        if max_width <= 0 or max_height <= 0:
            raise ValueError(f"bounds must be positive, got {max_width}x{max_height}")
        if max_input_size <= 0:
            raise ValueError(f"max_input_size must be positive, got {max_input_size}")

        try:
            source = validator.validate(raw_bytes, max_input_size, self.settings.max_pixels)
            overlay = self.registry.get(overlay_name)
            base = decoder.decode(source)
            base = resizer.fit(base, max_width, max_height)
            composite = compositor.compose(base, overlay)
            result = encoder.finalize(composite, prefix=self.settings.filename_prefix)
        except PipelineError as exc:
            logger.info("Composition rejected (%s): %s", exc.kind.value, exc)
            raise

        logger.info(
            "Composed %s with overlay %s: %dx%d, %d bytes",
            result.filename,
            overlay.name,
            result.width,
            result.height,
            len(result.data),
        )
        return result
