"""Transaction amount helpers used around the QRIS pipeline."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass

from ..config import settings

_AMOUNT_IN_TEXT = re.compile(r"(?:Rp|IDR|sebesar)\s*([\d.,]+)", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class TransactionAmount:
    base_amount: int
    unique_code: int
    total_amount: int


def calculate_transaction_details(base_amount: int | str, rng: random.Random | None = None) -> TransactionAmount:
    """Add a random unique code so incoming transfers can be told apart."""

    if isinstance(base_amount, bool):
        raise ValueError("Base amount must be an integer")
    try:
        amount = int(base_amount)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Base amount must be an integer, got {base_amount!r}") from exc
    if amount < 0:
        raise ValueError(f"Base amount must not be negative, got {amount}")

    unique_code = (rng or random).randint(1, settings.unique_code_max)
    return TransactionAmount(base_amount=amount, unique_code=unique_code, total_amount=amount + unique_code)


def parse_amount_from_text(text: str | None) -> int | None:
    """Extract a rupiah amount from a bank notification text.

    Dots are thousands separators and anything after a comma is cents,
    so ``"Rp 1.250.000,00"`` becomes ``1250000``.
    """

    if not text:
        return None
    match = _AMOUNT_IN_TEXT.search(text)
    if not match:
        return None
    digits = match.group(1).replace(".", "").split(",", 1)[0]
    if not digits:
        return None
    return int(digits)
