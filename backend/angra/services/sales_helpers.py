# angra/services/sales_helpers.py
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Iterable, List, Optional

from google.cloud import firestore as gcf
from google.cloud.firestore_v1 import FieldFilter

from angra.schemas.sale import ProductCount, SaleOut, SalesStats, SaleStatus

COL = "sales"
TOP_PRODUCTS = 5


def sale_doc_to_out(doc) -> SaleOut:
    src = doc.to_dict() or {}
    return SaleOut(
        id=doc.id,
        client_name=src.get("client_name", ""),
        client_email=src.get("client_email"),
        client_phone=src.get("client_phone"),
        product_service=src.get("product_service", ""),
        amount=float(src.get("amount", 0) or 0),
        status=SaleStatus(src.get("status", SaleStatus.PENDING.value)),
        sale_date=src.get("sale_date"),
        notes=src.get("notes"),
        created_by=src.get("created_by"),
        created_at=src.get("created_at"),
    )


def query_sales(
    db,
    status: Optional[SaleStatus] = None,
    client: Optional[str] = None,
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
) -> List[SaleOut]:
    """
    Sales, newest sale_date first.
    - status equality and the date range run in Firestore
    - client name (case-insensitive substring) is matched in memory
    """
    q: Any = db.collection(COL)
    if status is not None:
        q = q.where(filter=FieldFilter("status", "==", status.value))
    if date_start is not None:
        q = q.where(filter=FieldFilter("sale_date", ">=", date_start.isoformat()))
    if date_end is not None:
        q = q.where(filter=FieldFilter("sale_date", "<=", date_end.isoformat()))
    q = q.order_by("sale_date", direction=gcf.Query.DESCENDING)

    out = [sale_doc_to_out(d) for d in q.stream()]
    if client:
        needle = client.strip().lower()
        out = [s for s in out if needle in s.client_name.lower()]
    return out


def paid_total(sales: Iterable[SaleOut]) -> float:
    return round(sum(s.amount for s in sales if s.status == SaleStatus.PAID), 2)


def calc_stats(sales: List[SaleOut], today: date) -> SalesStats:
    paid = [s for s in sales if s.status == SaleStatus.PAID]
    counts = Counter(s.product_service for s in paid)
    return SalesStats(
        total_period=paid_total(paid),
        total_today=paid_total(s for s in paid if s.sale_date == today),
        top_products=[ProductCount(product=p, count=c) for p, c in counts.most_common(TOP_PRODUCTS)],
    )
