# angra/schemas/client.py
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=150)]


class ClientIn(BaseModel):
    """Client registry entry (create / update). Blank optional fields are stored as null."""
    full_name: NameStr       = Field(..., description="Full name")
    email:     Optional[str] = Field(None, description="E-mail")
    phone:     Optional[str] = Field(None, max_length=30, description="Phone")
    cpf:       Optional[str] = Field(None, max_length=20, description="CPF (Brazilian tax id)")
    address:   Optional[str] = Field(None, max_length=300, description="Address")
    notes:     Optional[str] = Field(None, max_length=1000, description="Notes")

    @field_validator("email", "phone", "cpf", "address", "notes", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ClientOut(BaseModel):
    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
