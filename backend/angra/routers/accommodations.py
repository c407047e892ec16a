# angra/routers/accommodations.py
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from angra.data.accommodations import ACCOMMODATIONS, DEFAULT_LANGUAGE, LANGUAGES
from angra.schemas.accommodation import AccommodationOut

router = APIRouter(prefix="/accommodations", tags=["Accommodations"])


def _language(lang: Optional[str]) -> str:
    lang = (lang or "").strip().lower()[:2]
    return lang if lang in LANGUAGES else DEFAULT_LANGUAGE


def localize(item: dict, lang: str) -> AccommodationOut:
    highlight = item.get("highlight")
    return AccommodationOut(
        id=item["id"],
        lang=lang,
        name=item["name"][lang],
        tagline=item["tagline"][lang],
        description=item["description"][lang],
        features=[f[lang] for f in item["features"]],
        ideal_for=item["ideal_for"][lang],
        highlight=highlight[lang] if highlight else None,
        images=list(item.get("images", [])),
    )


@router.get("", response_model=List[AccommodationOut], summary="List Accommodations")
def list_accommodations(lang: Optional[str] = Query(None, description="pt | en | es | fr")):
    language = _language(lang)
    return [localize(a, language) for a in ACCOMMODATIONS]


@router.get("/{accommodation_id}", response_model=AccommodationOut, summary="Get Accommodation")
def get_accommodation(accommodation_id: str, lang: Optional[str] = Query(None)):
    item = next((a for a in ACCOMMODATIONS if a["id"] == accommodation_id), None)
    if item is None:
        raise HTTPException(status_code=404, detail="Accommodation not found")
    return localize(item, _language(lang))
