"""HTTP service for the photo booth.

Exposes the overlay menu and the save endpoint used by both the webcam
capture and the file upload flows. Both flows end up handing raw image bytes
to :meth:`photobooth.pipeline.Pipeline.compose`; this module only deals with
getting those bytes out of the request, storing the result and recording
its metadata.
"""

import base64
import binascii
import logging
import os
import re
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from photobooth import records, storage
from photobooth.config import Settings, load_settings
from photobooth.errors import ErrorKind, PipelineError
from photobooth.models import ImageListResponse, ImageSaveResponse, ImageSummary, OverlayListResponse
from photobooth.overlays import OverlayRegistry
from photobooth.pipeline import Pipeline

logger = logging.getLogger("photobooth.api")

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,", re.IGNORECASE)

ERROR_STATUS = {
    ErrorKind.TOO_LARGE: 413,
    ErrorKind.UNSUPPORTED_FORMAT: 415,
    ErrorKind.CORRUPT_IMAGE: 422,
    ErrorKind.DECODE_FAILED: 422,
    ErrorKind.OVERLAY_NOT_FOUND: 404,
    ErrorKind.ENCODE_FAILED: 500,
}


def decode_data_url(data_url: str) -> bytes:
    """Strip an optional ``data:image/...;base64,`` prefix and decode.

    Raises:
        ValueError: If what remains is not valid base64.
    """
    payload = DATA_URL_PREFIX.sub("", data_url.strip(), count=1)
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid base64 payload") from exc


def capture_filename(now: Optional[datetime] = None) -> str:
    """Original filename recorded for webcam captures."""
    return f"webcam_capture_{(now or datetime.now()).strftime('%Y-%m-%d_%H-%M-%S')}.jpg"


def create_app(settings: Optional[Settings] = None, registry: Optional[OverlayRegistry] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # --- Pipeline Init ---
    if registry is None:
        registry = OverlayRegistry.load(settings.overlays_dir)
    pipeline = Pipeline(registry, settings)
    library_dir = settings.image_library_dir

    # --- App Init ---
    app = FastAPI(title="Photo Booth")
    app.state.settings = settings
    app.state.pipeline = pipeline
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # adjust in prod
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Stored composites are served from /image_library/uploads/<filename>.
    os.makedirs(library_dir, exist_ok=True)
    app.mount("/image_library", StaticFiles(directory=library_dir), name="image_library")

    # --- Middleware ---
    @app.middleware("http")
    async def add_cache_control_header(request: Request, call_next):
        response = await call_next(request)
        # Composite names are unique and never rewritten.
        if request.url.path.startswith("/image_library/"):
            response.headers["Cache-Control"] = "public, max-age=604800, immutable"
        return response

    # --- Overlay Endpoints ---
    @app.get("/overlays", response_model=OverlayListResponse)
    async def list_overlays():
        return OverlayListResponse(overlays=list(pipeline.list_overlays()))

    # --- Image Endpoints ---
    @app.post("/images/save", response_model=ImageSaveResponse)
    async def save_image_endpoint(
        overlay: str = Form(""),
        data_url: Optional[str] = Form(None),
        file: Optional[UploadFile] = File(None),
        owner: Optional[str] = Form(None),
    ):
        """Compose an overlay onto a webcam capture or uploaded file and store it.

        Either ``data_url`` (a base64 data URL from the webcam canvas) or
        ``file`` (a multipart upload) must be given. The upload is read only
        up to one byte past the size limit, which is enough for the pipeline
        to reject it.
        """
        if file is not None:
            raw_data = await file.read(settings.max_input_size + 1)
            original_filename = os.path.basename(file.filename or "") or capture_filename()
        elif data_url:
            try:
                raw_data = decode_data_url(data_url)
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid image data")
            original_filename = capture_filename()
        else:
            raw_data, original_filename = b"", ""
        if not raw_data:
            raise HTTPException(status_code=400, detail="No image data provided")
        if not overlay:
            raise HTTPException(status_code=400, detail="No overlay selected")

        try:
            result = await run_in_threadpool(pipeline.compose, raw_data, overlay)
        except PipelineError as exc:
            raise HTTPException(status_code=ERROR_STATUS[exc.kind], detail=exc.public_message)

        path = storage.upload_path(result.filename)
        try:
            url = storage.save_bytes(library_dir, path, result.data)
        except OSError:
            logger.exception("Could not store composite %s", result.filename)
            raise HTTPException(status_code=500, detail="Could not save image")

        record = records.ImageRecord(
            owner=owner,
            filename=result.filename,
            original_filename=original_filename[:255],
            overlay=overlay,
            width=result.width,
            height=result.height,
        )
        try:
            records.save_record(library_dir, record)
        except (OSError, ValueError):
            logger.exception("Could not record metadata for %s; removing stored file", result.filename)
            storage.delete_bytes(library_dir, path)
            raise HTTPException(status_code=500, detail="Failed to save image to database")

        return ImageSaveResponse(filename=result.filename, url=url, width=result.width, height=result.height)

    @app.get("/images", response_model=ImageListResponse)
    async def list_images():
        """List saved composites, newest first."""
        images = [
            ImageSummary(
                filename=r.filename,
                url=storage.public_url(storage.upload_path(r.filename)),
                overlay=r.overlay,
                owner=r.owner,
                original_filename=r.original_filename,
                created_at=r.created_at,
            )
            for r in records.list_records(library_dir)
        ]
        return ImageListResponse(images=images)

    return app


app = create_app()
