"""FastAPI application exposing the QRIS codec for validation tooling."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .config import settings
from .crc import crc16_hex, verify_crc
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware
from .monitoring import metrics_payload, record_service_error
from .qris_encoder import format_amount, inject_amount
from .renderer import render_qr_payload
from .schemas import (
    ChannelResponse,
    CheckoutRequest,
    CheckoutResponse,
    DecodeResponse,
    InjectRequest,
    InjectResponse,
    NotificationParseRequest,
    NotificationParseResponse,
    PayloadRequest,
    PaymentDetails,
    ValidateResponse,
)
from .services.amounts import parse_amount_from_text
from .services.checkout import CheckoutService, PaymentChannel
from .services.errors import ServiceError, err_amount_not_found, err_bad_payload, err_payment_unavailable
from .tlv import FormatError, decode_tlv

app = FastAPI(title="qrisgate", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("qrisgate.api")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("qrisgate started", extra={"environment": settings.environment})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    route = request.scope.get("route")
    route_path = route.path if route else request.url.path
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": route_path, "method": request.method},
    )
    record_service_error(exc.code, route_path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    route = request.scope.get("route")
    route_path = route.path if route else request.url.path
    logger.exception(
        "unhandled exception",
        extra={"path": route_path, "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/qris/decode", response_model=DecodeResponse, tags=["qris"])
async def decode_payload(body: PayloadRequest) -> DecodeResponse:
    try:
        tags = decode_tlv(body.payload)
    except FormatError as exc:
        raise err_bad_payload(str(exc)) from exc
    return DecodeResponse(tags=dict(sorted(tags.items())))


@app.post("/v1/qris/validate", response_model=ValidateResponse, tags=["qris"])
async def validate_payload(body: PayloadRequest) -> ValidateResponse:
    if len(body.payload) < 4:
        raise err_bad_payload("Payload too short to carry a CRC")
    return ValidateResponse(
        valid=verify_crc(body.payload),
        provided_crc=body.payload[-4:],
        calculated_crc=crc16_hex(body.payload[:-4]),
    )


@app.post("/v1/qris/inject", response_model=InjectResponse, tags=["qris"])
async def inject_payload(body: InjectRequest) -> InjectResponse:
    payload = inject_amount(
        body.payload,
        body.amount,
        currency_code=settings.default_currency_code,
        country_code=settings.default_country_code,
    )
    if payload is None:
        raise err_payment_unavailable()

    png_base64 = render_qr_payload(payload, title=settings.render_title).png_base64 if body.render else None
    return InjectResponse(payload=payload, crc=payload[-4:], amount=format_amount(body.amount), qr_png_base64=png_base64)


@app.post("/v1/checkout", response_model=CheckoutResponse, tags=["checkout"])
async def checkout(body: CheckoutRequest) -> CheckoutResponse:
    instruction = CheckoutService().build_instruction(
        channels=[PaymentChannel(**channel.model_dump()) for channel in body.channels],
        base_amount=body.base_amount,
        currency=body.currency.value,
        render=body.render,
    )
    return CheckoutResponse(
        reference_id=instruction.reference_id,
        currency=body.currency,
        base_amount=instruction.amount.base_amount,
        unique_code=instruction.amount.unique_code,
        total_amount_expected=instruction.amount.total_amount,
        expired_at=instruction.expired_at,
        payment_channels=[
            ChannelResponse(
                id=channel.id,
                name=channel.name,
                is_qris=channel.is_qris,
                available=channel.available,
                payment_details=PaymentDetails(
                    qris_raw=channel.qris_payload,
                    crc=channel.crc,
                    bank_data=channel.bank_data,
                    qr_png_base64=channel.qr_png_base64,
                ),
            )
            for channel in instruction.channels
        ],
    )


@app.post("/v1/notifications/parse", response_model=NotificationParseResponse, tags=["notifications"])
async def parse_notification(body: NotificationParseRequest) -> NotificationParseResponse:
    amount = parse_amount_from_text(body.text)
    if amount is None:
        raise err_amount_not_found()
    matched = amount == body.expected_total if body.expected_total is not None else None
    return NotificationParseResponse(amount=amount, matched=matched)
