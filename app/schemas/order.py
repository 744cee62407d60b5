from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderRequest(BaseModel):
    """Inbound order payload, untrusted and unvalidated."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(default=None, alias="customerName")
    whatsapp_number: Optional[str] = Field(default=None, alias="whatsappNumber")
    address: Optional[str] = None
    timing: Optional[str] = None
    orders: Optional[str] = None


class NormalizedOrderRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str
    whatsapp_number: str
    address: str
    timing: str
    orders: str


class ApiResponse(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None
