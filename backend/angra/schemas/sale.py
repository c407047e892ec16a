"""
# `angra/schemas/sale.py` — Point-of-sale schemas

| Field             | Type      | Rule                                 |
|-------------------|-----------|--------------------------------------|
| `client_name`     | `str`     | 2–100 characters                     |
| `client_email`    | `EmailStr`| optional, blank → null               |
| `client_phone`    | `str`     | optional, ≤ 20                       |
| `product_service` | `str`     | 2–200 characters                     |
| `amount`          | `Decimal` | > 0, two decimal places              |
| `status`          | enum      | `pending` (default) / `paid` / `cancelled` |
| `sale_date`       | `date`    | default today                        |
| `notes`           | `str`     | optional, ≤ 500                      |
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class SaleStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class SaleIn(BaseModel):
    client_name:     str                = Field(..., min_length=2, max_length=100, description="Client name")
    client_email:    Optional[EmailStr] = Field(None, description="Client e-mail")
    client_phone:    Optional[str]      = Field(None, max_length=20, description="Client phone")
    product_service: str                = Field(..., min_length=2, max_length=200, description="Product / service")
    amount:          Decimal            = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount")
    status:          SaleStatus         = Field(SaleStatus.PENDING, description="pending | paid | cancelled")
    sale_date:       date               = Field(default_factory=date.today, description="Sale date (YYYY-MM-DD)")
    notes:           Optional[str]      = Field(None, max_length=500, description="Notes")

    @field_validator("client_name", "product_service", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("client_email", "client_phone", "notes", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def to_document(self) -> dict:
        """Firestore has no Decimal/date types: amount → float, sale_date → ISO string."""
        return {
            "client_name": self.client_name,
            "client_email": str(self.client_email) if self.client_email else None,
            "client_phone": self.client_phone,
            "product_service": self.product_service,
            "amount": float(self.amount),
            "status": self.status.value,
            "sale_date": self.sale_date.isoformat(),
            "notes": self.notes,
        }


class SaleOut(BaseModel):
    id: str
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    product_service: str
    amount: float
    status: SaleStatus
    sale_date: date
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductCount(BaseModel):
    product: str
    count: int


class SalesStats(BaseModel):
    total_period: float = Field(0.0, description="Paid total over the filtered range")
    total_today: float = Field(0.0, description="Paid total for today")
    top_products: List[ProductCount] = Field(default_factory=list)
