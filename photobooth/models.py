"""Pydantic response schemas for the photo-booth API.

These mirror the JSON shapes the frontend expects: every response carries a
``success`` flag, and errors are reported through ``HTTPException`` with a
short, user-facing message.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class OverlayListResponse(BaseModel):
    success: bool = True
    overlays: List[str]


class ImageSaveResponse(BaseModel):
    """Response returned after saving a composite.

    Attributes:
        filename: Generated name of the stored composite.
        url: URL the composite is served from.
        width: Width of the stored image.
        height: Height of the stored image.
    """

    success: bool = True
    message: str = "Image saved successfully"
    filename: str
    url: str
    width: int
    height: int


class ImageSummary(BaseModel):
    filename: str
    url: str
    overlay: str
    owner: Optional[str] = None
    original_filename: str
    created_at: datetime


class ImageListResponse(BaseModel):
    success: bool = True
    images: List[ImageSummary]
