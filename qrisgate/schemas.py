"""Pydantic schemas for API contracts."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class CurrencyEnum(str, Enum):
    IDR = "IDR"
    USD = "USD"


class PayloadRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512, description="QRIS payload string")


class DecodeResponse(BaseModel):
    tags: dict[str, str]


class ValidateResponse(BaseModel):
    valid: bool
    provided_crc: str
    calculated_crc: str


class InjectRequest(PayloadRequest):
    amount: Decimal = Field(ge=0, decimal_places=2)
    render: bool = False


class InjectResponse(BaseModel):
    payload: str
    crc: str
    amount: str
    qr_png_base64: str | None = None


class ChannelRequest(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=128)
    qris_raw: str | None = Field(default=None, max_length=512)
    bank_data: str | None = Field(default=None, max_length=512)


class CheckoutRequest(BaseModel):
    channels: list[ChannelRequest] = Field(min_length=1)
    base_amount: int = Field(ge=1)
    currency: CurrencyEnum = CurrencyEnum.IDR
    render: bool = True


class PaymentDetails(BaseModel):
    qris_raw: str | None
    crc: str | None
    bank_data: str | None
    qr_png_base64: str | None


class ChannelResponse(BaseModel):
    id: str
    name: str
    is_qris: bool
    available: bool
    payment_details: PaymentDetails


class CheckoutResponse(BaseModel):
    reference_id: str
    currency: CurrencyEnum
    base_amount: int
    unique_code: int
    total_amount_expected: int
    expired_at: datetime
    payment_channels: list[ChannelResponse]


class NotificationParseRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2048)
    expected_total: int | None = Field(default=None, ge=0)


class NotificationParseResponse(BaseModel):
    amount: int
    matched: bool | None = None
