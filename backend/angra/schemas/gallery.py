# angra/schemas/gallery.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class GalleryIn(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="Gallery name")
    description: Optional[str] = Field(None, max_length=500, description="Short description")

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class GalleryOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    display_order: int = 0
    created_at: Optional[datetime] = None


class GalleryImageOut(BaseModel):
    id: str
    gallery_id: str
    url: str
    alt_text: Optional[str] = None
    display_order: int = 0
    storage_path: Optional[str] = None


class SkippedFile(BaseModel):
    filename: str
    reason: str


class UploadResult(BaseModel):
    """Files stored in this request, and the ones rejected before upload."""
    uploaded: List[GalleryImageOut] = Field(default_factory=list)
    skipped: List[SkippedFile] = Field(default_factory=list)
