"""
# `angra/routers/galleries.py` — Photo galleries

## Public
- `GET /galleries` — galleries by `display_order`.
- `GET /galleries/{gallery_id}/images` — images of one gallery by `display_order`.

## Admin / operator (`/admin/galleries`)
| Method   | Path                                   | Notes                                               |
|----------|----------------------------------------|-----------------------------------------------------|
| `GET`    | `/admin/galleries`                     | same order as the public list                       |
| `POST`   | `/admin/galleries`                     | appended after the last gallery                     |
| `PUT`    | `/admin/galleries/{gallery_id}`        | name / description                                  |
| `DELETE` | `/admin/galleries/{gallery_id}`        | removes every image row and stored object first     |
| `GET`    | `/admin/galleries/{gallery_id}/images` |                                                     |
| `POST`   | `/admin/galleries/{gallery_id}/images` | multipart `files`; non-images and files > 5 MB are skipped and reported |
| `DELETE` | `/admin/galleries/images/{image_id}`   | object, then row                                    |
| `POST`   | `/admin/galleries/images/{image_id}/move?direction=up or down` | swaps `display_order` with the neighbour |

Objects live under `gallery-images/{gallery_id}/<millis>-<sanitised filename>`; the
row keeps `storage_path` so deletes never have to parse the URL.
"""
import logging
from typing import List, Literal

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1 import FieldFilter

from angra.config import get_bucket, get_db
from angra.core.security import require_admin_or_operator
from angra.schemas.gallery import GalleryImageOut, GalleryIn, GalleryOut, SkippedFile, UploadResult
from angra.utils.storage import MAX_IMAGE_BYTES, delete_object, gallery_object_path, upload_public

logger = logging.getLogger(__name__)

COL = "galleries"
IMAGES_COL = "gallery_images"
BATCH_LIMIT = 500  # Firestore max writes per batch

router = APIRouter(prefix="/galleries", tags=["Galleries"])
admin_router = APIRouter(
    prefix="/galleries",
    tags=["Admin Galleries"],
    dependencies=[Depends(require_admin_or_operator)],
)


# ---------- helpers ----------

def _gallery_out(doc) -> GalleryOut:
    src = doc.to_dict() or {}
    return GalleryOut(
        id=doc.id,
        name=src.get("name", ""),
        description=src.get("description"),
        display_order=int(src.get("display_order", 0) or 0),
        created_at=src.get("created_at"),
    )


def _image_out(doc) -> GalleryImageOut:
    src = doc.to_dict() or {}
    return GalleryImageOut(
        id=doc.id,
        gallery_id=src.get("gallery_id", ""),
        url=src.get("url", ""),
        alt_text=src.get("alt_text"),
        display_order=int(src.get("display_order", 0) or 0),
        storage_path=src.get("storage_path"),
    )


def _list_galleries(db) -> List[GalleryOut]:
    return [_gallery_out(d) for d in db.collection(COL).order_by("display_order").stream()]


def _list_images(db, gallery_id: str) -> List[GalleryImageOut]:
    # ordered in memory: no composite index on gallery_images
    q = db.collection(IMAGES_COL).where(filter=FieldFilter("gallery_id", "==", gallery_id))
    return sorted((_image_out(d) for d in q.stream()), key=lambda i: i.display_order)


def _get_gallery_or_404(db, gallery_id: str):
    doc = db.collection(COL).document(gallery_id).get()
    if not doc.exists:
        raise HTTPException(status_code=404, detail="Gallery not found")
    return doc


def _next_order(items) -> int:
    return max((i.display_order for i in items), default=-1) + 1


# ---------- public ----------

@router.get("", response_model=List[GalleryOut], summary="List Galleries")
def public_list_galleries(db=Depends(get_db)):
    return _list_galleries(db)


@router.get("/{gallery_id}/images", response_model=List[GalleryImageOut], summary="List Gallery Images")
def public_list_images(gallery_id: str, db=Depends(get_db)):
    _get_gallery_or_404(db, gallery_id)
    return _list_images(db, gallery_id)


# ---------- admin: galleries ----------

@admin_router.get("", response_model=List[GalleryOut], summary="List Galleries")
def list_galleries(db=Depends(get_db)):
    return _list_galleries(db)


@admin_router.post("", response_model=GalleryOut, status_code=status.HTTP_201_CREATED, summary="Create Gallery")
def create_gallery(gallery_in: GalleryIn, db=Depends(get_db)):
    doc_ref = db.collection(COL).document()
    data = gallery_in.model_dump()
    data.update(
        display_order=_next_order(_list_galleries(db)),
        created_at=firestore.SERVER_TIMESTAMP,
    )
    try:
        doc_ref.set(data)
    except GoogleAPIError as exc:
        logger.exception("Gallery insert failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return _gallery_out(doc_ref.get())


@admin_router.put("/{gallery_id}", response_model=GalleryOut, summary="Update Gallery")
def update_gallery(gallery_id: str, gallery_in: GalleryIn, db=Depends(get_db)):
    _get_gallery_or_404(db, gallery_id)
    doc_ref = db.collection(COL).document(gallery_id)
    try:
        doc_ref.update(gallery_in.model_dump())
    except GoogleAPIError as exc:
        logger.exception("Gallery update failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return _gallery_out(doc_ref.get())


@admin_router.delete("/{gallery_id}", summary="Delete Gallery")
def delete_gallery(gallery_id: str, db=Depends(get_db), bucket=Depends(get_bucket)):
    _get_gallery_or_404(db, gallery_id)
    images = _list_images(db, gallery_id)
    try:
        for start in range(0, len(images), BATCH_LIMIT):
            chunk = images[start:start + BATCH_LIMIT]
            for img in chunk:
                delete_object(bucket, img.storage_path)
            batch = db.batch()
            for img in chunk:
                batch.delete(db.collection(IMAGES_COL).document(img.id))
            batch.commit()
        db.collection(COL).document(gallery_id).delete()
    except GoogleAPIError as exc:
        logger.exception("Gallery delete failed: %s", gallery_id)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"detail": "Gallery deleted", "images_deleted": len(images)}


# ---------- admin: images ----------

@admin_router.get("/{gallery_id}/images", response_model=List[GalleryImageOut], summary="List Gallery Images")
def list_images(gallery_id: str, db=Depends(get_db)):
    _get_gallery_or_404(db, gallery_id)
    return _list_images(db, gallery_id)


@admin_router.post("/{gallery_id}/images", response_model=UploadResult, summary="Upload Gallery Images")
async def upload_images(
    gallery_id: str,
    files: List[UploadFile] = File(..., description="Image files (max 5 MB each)"),
    db=Depends(get_db),
    bucket=Depends(get_bucket),
):
    _get_gallery_or_404(db, gallery_id)
    order = _next_order(_list_images(db, gallery_id))
    result = UploadResult()

    for f in files:
        filename = f.filename or "image"
        if not (f.content_type or "").startswith("image/"):
            result.skipped.append(SkippedFile(filename=filename, reason="not an image"))
            continue
        data = await f.read()
        if len(data) > MAX_IMAGE_BYTES:
            result.skipped.append(SkippedFile(filename=filename, reason="exceeds 5MB"))
            continue

        path = gallery_object_path(gallery_id, filename)
        try:
            url = upload_public(bucket, path, data, f.content_type)
            doc_ref = db.collection(IMAGES_COL).document()
            doc_ref.set({
                "gallery_id": gallery_id,
                "url": url,
                "alt_text": filename,
                "display_order": order,
                "storage_path": path,
                "created_at": firestore.SERVER_TIMESTAMP,
            })
        except GoogleAPIError as exc:
            logger.exception("Image upload failed: %s", path)
            raise HTTPException(status_code=500, detail=f"Image upload failed: {exc}")
        result.uploaded.append(_image_out(doc_ref.get()))
        order += 1

    return result


def _get_image_or_404(db, image_id: str) -> GalleryImageOut:
    doc = db.collection(IMAGES_COL).document(image_id).get()
    if not doc.exists:
        raise HTTPException(status_code=404, detail="Image not found")
    return _image_out(doc)


@admin_router.delete("/images/{image_id}", summary="Delete Gallery Image")
def delete_image(image_id: str, db=Depends(get_db), bucket=Depends(get_bucket)):
    image = _get_image_or_404(db, image_id)
    try:
        delete_object(bucket, image.storage_path)
        db.collection(IMAGES_COL).document(image_id).delete()
    except GoogleAPIError as exc:
        logger.exception("Image delete failed: %s", image_id)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"detail": "Image deleted"}


@admin_router.post("/images/{image_id}/move", response_model=List[GalleryImageOut], summary="Move Gallery Image")
def move_image(
    image_id: str,
    direction: Literal["up", "down"] = Query(...),
    db=Depends(get_db),
):
    """
    Swap the image with its neighbour. Moving the first image up (or the last one down)
    leaves the order untouched. Returns the gallery's images in their new order.
    """
    image = _get_image_or_404(db, image_id)
    images = _list_images(db, image.gallery_id)
    index = next(i for i, img in enumerate(images) if img.id == image_id)
    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(images):
        return images

    current, neighbour = images[index], images[target]
    batch = db.batch()
    batch.update(db.collection(IMAGES_COL).document(current.id), {"display_order": neighbour.display_order})
    batch.update(db.collection(IMAGES_COL).document(neighbour.id), {"display_order": current.display_order})
    try:
        batch.commit()
    except GoogleAPIError as exc:
        logger.exception("Image reorder failed: %s", image_id)
        raise HTTPException(status_code=500, detail=str(exc))
    return _list_images(db, image.gallery_id)
