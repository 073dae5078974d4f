"""Payment instruction building across QRIS and bank-transfer channels."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence
from uuid import uuid4

from ..config import settings
from ..qris_encoder import inject_amount
from ..renderer import render_qr_payload
from .amounts import TransactionAmount, calculate_transaction_details
from .errors import err_bad_amount, err_no_channels, err_payment_unavailable, err_unsupported_currency

logger = logging.getLogger("qrisgate.checkout")

QRIS_CURRENCY = "IDR"
SUPPORTED_CURRENCIES = frozenset({"IDR", "USD"})


@dataclass(frozen=True)
class PaymentChannel:
    id: str
    name: str
    qris_raw: str | None = None
    bank_data: str | None = None

    @property
    def is_qris(self) -> bool:
        return bool(self.qris_raw)


@dataclass(slots=True)
class ChannelInstruction:
    id: str
    name: str
    is_qris: bool
    available: bool
    qris_payload: str | None = None
    crc: str | None = None
    bank_data: str | None = None
    qr_png_base64: str | None = None


@dataclass(slots=True)
class PaymentInstruction:
    reference_id: str
    amount: TransactionAmount
    currency: str
    created_at: datetime
    expired_at: datetime
    channels: list[ChannelInstruction] = field(default_factory=list)

    @property
    def qris_payload(self) -> str | None:
        """Payload of the first channel that produced a dynamic QRIS."""

        return next((c.qris_payload for c in self.channels if c.qris_payload), None)


class CheckoutService:
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng

    def build_instruction(
        self,
        *,
        channels: Sequence[PaymentChannel],
        base_amount: int | str,
        currency: str = QRIS_CURRENCY,
        render: bool = True,
    ) -> PaymentInstruction:
        if currency not in SUPPORTED_CURRENCIES:
            raise err_unsupported_currency(f"Currency {currency!r} is not supported")
        if not channels:
            raise err_no_channels()
        try:
            amount = calculate_transaction_details(base_amount, rng=self.rng)
        except ValueError as exc:
            raise err_bad_amount(str(exc)) from exc

        created_at = datetime.now(timezone.utc)
        instruction = PaymentInstruction(
            reference_id=f"PAY-{uuid4()}",
            amount=amount,
            currency=currency,
            created_at=created_at,
            expired_at=created_at + timedelta(hours=settings.instruction_ttl_hours),
            channels=[self._channel_instruction(channel, amount, currency, render) for channel in channels],
        )
        if not any(c.available for c in instruction.channels):
            raise err_payment_unavailable()
        return instruction

    def _channel_instruction(
        self,
        channel: PaymentChannel,
        amount: TransactionAmount,
        currency: str,
        render: bool,
    ) -> ChannelInstruction:
        result = ChannelInstruction(
            id=channel.id,
            name=channel.name,
            is_qris=channel.is_qris,
            available=bool(channel.bank_data),
            bank_data=channel.bank_data,
        )
        # QRIS settles in rupiah only.
        if not channel.is_qris or currency != QRIS_CURRENCY:
            return result

        payload = inject_amount(
            channel.qris_raw,
            amount.total_amount,
            currency_code=settings.default_currency_code,
            country_code=settings.default_country_code,
        )
        if payload is None:
            logger.warning(
                "dynamic qris unavailable",
                extra={"channel_id": channel.id, "total_amount": amount.total_amount},
            )
            return result

        result.available = True
        result.qris_payload = payload
        result.crc = payload[-4:]
        if render:
            result.qr_png_base64 = render_qr_payload(payload, title=settings.render_title).png_base64
        return result
