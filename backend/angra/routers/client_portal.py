# angra/routers/client_portal.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1 import FieldFilter

from angra.config import get_db
from angra.core.security import require_authenticated
from angra.schemas.sale import SaleOut
from angra.schemas.session import SessionSnapshot
from angra.services.sales_helpers import COL, sale_doc_to_out

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/client", tags=["Client Portal"])


@router.get("/sales", response_model=List[SaleOut], summary="My Purchases")
def my_sales(
    session: SessionSnapshot = Depends(require_authenticated),
    db=Depends(get_db),
):
    """Sales recorded under the signed-in user's e-mail, newest sale date first."""
    email = session.principal.email
    if not email:
        return []
    q = db.collection(COL).where(filter=FieldFilter("client_email", "==", email))
    try:
        sales = [sale_doc_to_out(d) for d in q.stream()]
    except GoogleAPIError as exc:
        logger.exception("Client sales query failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return sorted(sales, key=lambda s: s.sale_date, reverse=True)
