"""
Admin Dashboard Router
Back-office overview: paid sales for today and the current month, gallery and user counts
"""
import calendar
import logging
from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from google.api_core.exceptions import GoogleAPIError

from angra.config import get_db
from angra.core.security import get_profile_repository, require_admin_or_operator
from angra.repositories.profiles import ProfileRepository
from angra.schemas.sale import SaleStatus
from angra.schemas.session import SessionSnapshot
from angra.services.sales_helpers import query_sales

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/dashboard", tags=["Admin Dashboard"])


@admin_router.get("/stats")
def get_dashboard_stats(
    session: SessionSnapshot = Depends(require_admin_or_operator),
    db=Depends(get_db),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> Dict[str, Any]:
    """
    Paid sales of today and of the current month (total and count), number of galleries,
    and number of users. The user count is only filled in for administrators.
    """
    today = date.today()
    month_start = today.replace(day=1)
    month_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])

    stats: Dict[str, Any] = {
        "sales_today": 0,
        "revenue_today": 0.0,
        "sales_this_month": 0,
        "revenue_this_month": 0.0,
        "total_galleries": 0,
        "total_users": 0,
    }

    try:
        paid = query_sales(db, status=SaleStatus.PAID, date_start=month_start, date_end=month_end)
        for sale in paid:
            stats["sales_this_month"] += 1
            stats["revenue_this_month"] += sale.amount
            if sale.sale_date == today:
                stats["sales_today"] += 1
                stats["revenue_today"] += sale.amount

        stats["total_galleries"] = sum(1 for _ in db.collection("galleries").stream())

        if session.is_admin:
            stats["total_users"] = profiles.count()
    except GoogleAPIError as e:
        logger.exception("Dashboard stats failed")
        raise HTTPException(status_code=500, detail=f"Failed to fetch dashboard stats: {str(e)}")

    stats["revenue_today"] = round(stats["revenue_today"], 2)
    stats["revenue_this_month"] = round(stats["revenue_this_month"], 2)
    return stats
