"""QRIS payload encoder that turns a static merchant QR into a dynamic one."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .crc import CRC_TAG_HEADER, crc16_hex
from .monitoring import record_injection
from .tlv import FormatError, decode_tlv, encode_tlv

logger = logging.getLogger("qrisgate.qris")

TAG_CURRENCY = "53"
TAG_AMOUNT = "54"
TAG_COUNTRY = "58"
TAG_CRC = "63"

IDR_NUMERIC_CODE = "360"
INDONESIA_COUNTRY_CODE = "ID"

Amount = int | float | Decimal

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str


def format_amount(amount: Amount) -> str:
    """Render an amount for Tag 54 with exactly two fractional digits."""

    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        raise ValueError(f"Amount must be numeric, got {type(amount).__name__}")
    value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    if not value.is_finite():
        raise ValueError(f"Amount must be finite, got {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must not be negative, got {amount!r}")
    try:
        rounded = value.copy_abs().quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Amount {amount!r} is out of range") from exc
    return f"{rounded:f}"


def build_dynamic_payload(
    raw_payload: str,
    amount: Amount,
    *,
    currency_code: str = IDR_NUMERIC_CODE,
    country_code: str = INDONESIA_COUNTRY_CODE,
) -> EncodedPayload:
    """Set amount, currency and country tags and recompute the CRC.

    Raises :class:`FormatError` for a malformed payload and ``ValueError``
    for an unusable amount.
    """

    if not isinstance(raw_payload, str) or not raw_payload:
        raise FormatError("Merchant payload must be a non-empty string")

    tags = decode_tlv(raw_payload)
    tags.pop(TAG_CRC, None)
    tags[TAG_CURRENCY] = currency_code
    tags[TAG_AMOUNT] = format_amount(amount)
    tags[TAG_COUNTRY] = country_code

    crc_input = f"{encode_tlv(tags)}{CRC_TAG_HEADER}"
    crc = crc16_hex(crc_input)
    return EncodedPayload(payload=f"{crc_input}{crc}", crc=crc)


def inject_amount(
    raw_payload: str,
    amount: Amount,
    *,
    currency_code: str = IDR_NUMERIC_CODE,
    country_code: str = INDONESIA_COUNTRY_CODE,
) -> str | None:
    """Return a dynamic QRIS payload for ``amount``, or ``None`` on failure."""

    try:
        encoded = build_dynamic_payload(
            raw_payload,
            amount,
            currency_code=currency_code,
            country_code=country_code,
        )
    except Exception as exc:
        logger.warning(
            "qris amount injection failed",
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
                "payload_length": len(raw_payload) if isinstance(raw_payload, str) else None,
            },
        )
        record_injection("failure")
        return None

    record_injection("success")
    return encoded.payload
