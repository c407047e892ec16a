# angra/schemas/accommodation.py
from typing import List, Optional

from pydantic import BaseModel, Field


class AccommodationOut(BaseModel):
    """One house, with every text in the requested language."""
    id: str
    lang: str = Field(..., description="Language the texts are in")
    name: str
    tagline: str
    description: str
    features: List[str] = Field(default_factory=list)
    ideal_for: str
    highlight: Optional[str] = None
    images: List[str] = Field(default_factory=list)
