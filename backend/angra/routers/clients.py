"""
# `angra/routers/clients.py` — Client registry

Admin and operator only. `full_name` is required; blank optional fields are stored as null.

- `GET /admin/clients?search=` — newest first; `search` matches name, e-mail, phone or CPF
  (case-insensitive).
- `POST /admin/clients` — create.
- `PUT /admin/clients/{client_id}` — update, `404` if missing.
- `DELETE /admin/clients/{client_id}` — delete, `404` if missing.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore as gcf

from angra.config import get_db
from angra.core.security import require_admin_or_operator
from angra.schemas.client import ClientIn, ClientOut

logger = logging.getLogger(__name__)

COL = "clients"

admin_router = APIRouter(
    prefix="/clients",
    tags=["Admin Clients"],
    dependencies=[Depends(require_admin_or_operator)],
)


def _doc_to_out(doc) -> ClientOut:
    src = doc.to_dict() or {}
    return ClientOut(
        id=doc.id,
        full_name=src.get("full_name", ""),
        email=src.get("email"),
        phone=src.get("phone"),
        cpf=src.get("cpf"),
        address=src.get("address"),
        notes=src.get("notes"),
        created_at=src.get("created_at"),
    )


def _matches(client: ClientOut, term: str) -> bool:
    fields = (client.full_name, client.email, client.phone, client.cpf)
    return any(term in (f or "").lower() for f in fields)


@admin_router.get("", response_model=List[ClientOut], summary="List Clients")
def list_clients(
    search: Optional[str] = Query(None, description="Name, e-mail, phone or CPF contains"),
    db=Depends(get_db),
):
    q = db.collection(COL).order_by("created_at", direction=gcf.Query.DESCENDING)
    try:
        out = [_doc_to_out(d) for d in q.stream()]
    except GoogleAPIError as exc:
        logger.exception("Client query failed")
        raise HTTPException(status_code=500, detail=str(exc))

    term = (search or "").strip().lower()
    if term:
        out = [c for c in out if _matches(c, term)]
    return out


@admin_router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED, summary="Create Client")
def create_client(client_in: ClientIn, db=Depends(get_db)):
    doc_ref = db.collection(COL).document()
    data = client_in.model_dump()
    data["created_at"] = firestore.SERVER_TIMESTAMP
    try:
        doc_ref.set(data)
    except GoogleAPIError as exc:
        logger.exception("Client insert failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return _doc_to_out(doc_ref.get())


@admin_router.put("/{client_id}", response_model=ClientOut, summary="Update Client")
def update_client(client_id: str, client_in: ClientIn, db=Depends(get_db)):
    doc_ref = db.collection(COL).document(client_id)
    if not doc_ref.get().exists:
        raise HTTPException(status_code=404, detail="Client not found")
    try:
        doc_ref.update(client_in.model_dump())
    except GoogleAPIError as exc:
        logger.exception("Client update failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return _doc_to_out(doc_ref.get())


@admin_router.delete("/{client_id}", summary="Delete Client")
def delete_client(client_id: str, db=Depends(get_db)):
    doc_ref = db.collection(COL).document(client_id)
    if not doc_ref.get().exists:
        raise HTTPException(status_code=404, detail="Client not found")
    doc_ref.delete()
    return {"detail": "Client deleted"}
