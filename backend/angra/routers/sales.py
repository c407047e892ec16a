"""
# `angra/routers/sales.py` — Point of sale (PDV)

## General
Sales ledger of the back-office. Admin and operator only (`require_admin_or_operator`).
Input is validated by `SaleIn` before Firestore is touched; an invalid sale (for example
a non-positive amount) is rejected with `422` and nothing is written.

---

### `GET /admin/sales`
Optional filters: `status`, `client` (name substring, case-insensitive),
`date_start`, `date_end` (inclusive, `YYYY-MM-DD`). Newest `sale_date` first.

### `GET /admin/sales/stats`
Same filters. Paid total over the range, paid total for today, top 5 products by number
of paid sales.

### `POST /admin/sales`
Creates a sale; `created_by` is the caller's uid.

### `PUT /admin/sales/{sale_id}`
Replaces the editable fields of a sale. `404` if it does not exist.

### `DELETE /admin/sales/{sale_id}`
Deletes the sale. `404` if it does not exist.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from angra.config import get_db
from angra.core.security import require_admin_or_operator
from angra.schemas.sale import SaleIn, SaleOut, SalesStats, SaleStatus
from angra.schemas.session import SessionSnapshot
from angra.services.sales_helpers import COL, calc_stats, query_sales, sale_doc_to_out

logger = logging.getLogger(__name__)

admin_router = APIRouter(
    prefix="/sales",
    tags=["Admin Sales"],
    dependencies=[Depends(require_admin_or_operator)],
)


@admin_router.get("", response_model=List[SaleOut], summary="List Sales")
def list_sales(
    status_filter: Optional[SaleStatus] = Query(None, alias="status"),
    client: Optional[str] = Query(None, description="Client name contains"),
    date_start: Optional[date] = Query(None),
    date_end: Optional[date] = Query(None),
    db=Depends(get_db),
):
    try:
        return query_sales(db, status_filter, client, date_start, date_end)
    except GoogleAPIError as exc:
        logger.exception("Sales query failed")
        raise HTTPException(status_code=500, detail=str(exc))


@admin_router.get("/stats", response_model=SalesStats, summary="Sales Stats")
def sales_stats(
    status_filter: Optional[SaleStatus] = Query(None, alias="status"),
    client: Optional[str] = Query(None),
    date_start: Optional[date] = Query(None),
    date_end: Optional[date] = Query(None),
    db=Depends(get_db),
):
    try:
        sales = query_sales(db, status_filter, client, date_start, date_end)
    except GoogleAPIError as exc:
        logger.exception("Sales query failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return calc_stats(sales, date.today())


@admin_router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED, summary="Create Sale")
def create_sale(
    sale_in: SaleIn,
    session: SessionSnapshot = Depends(require_admin_or_operator),
    db=Depends(get_db),
):
    doc_ref = db.collection(COL).document()
    data = sale_in.to_document()
    data.update(
        created_by=session.principal.uid,
        created_at=firestore.SERVER_TIMESTAMP,
    )
    try:
        doc_ref.set(data)
    except GoogleAPIError as exc:
        logger.exception("Sale insert failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return sale_doc_to_out(doc_ref.get())


@admin_router.put("/{sale_id}", response_model=SaleOut, summary="Update Sale")
def update_sale(sale_id: str, sale_in: SaleIn, db=Depends(get_db)):
    doc_ref = db.collection(COL).document(sale_id)
    if not doc_ref.get().exists:
        raise HTTPException(status_code=404, detail="Sale not found")
    try:
        doc_ref.update(sale_in.to_document())
    except GoogleAPIError as exc:
        logger.exception("Sale update failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return sale_doc_to_out(doc_ref.get())


@admin_router.delete("/{sale_id}", summary="Delete Sale")
def delete_sale(sale_id: str, db=Depends(get_db)):
    doc_ref = db.collection(COL).document(sale_id)
    if not doc_ref.get().exists:
        raise HTTPException(status_code=404, detail="Sale not found")
    doc_ref.delete()
    return {"detail": "Sale deleted"}
