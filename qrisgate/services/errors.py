"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


def err_bad_payload(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_PAYLOAD", message=message or "Invalid QRIS payload", status_code=400)


def err_bad_amount(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_AMOUNT", message=message or "Invalid amount", status_code=400)


def err_unsupported_currency(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_UNSUPPORTED_CURRENCY", message=message or "Currency not supported", status_code=400)


def err_payment_unavailable(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_PAYMENT_UNAVAILABLE", message=message or "Payment method unavailable", status_code=422)


def err_no_channels(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_NO_CHANNELS", message=message or "At least one payment channel is required", status_code=400)


def err_amount_not_found(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_AMOUNT_NOT_FOUND", message=message or "No amount found in notification text", status_code=400)
