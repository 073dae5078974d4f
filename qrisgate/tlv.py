"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

MAX_VALUE_LENGTH = 99


class FormatError(ValueError):
    """Raised when a TLV payload is structurally invalid."""


class TLVOverflowError(FormatError):
    """Raised when a value does not fit the two-digit length field."""


def _is_two_digits(text: str) -> bool:
    return len(text) == 2 and text.isascii() and text.isdigit()


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    def serialize(self) -> str:
        if not _is_two_digits(self.tag):
            raise FormatError(f"Invalid TLV tag {self.tag!r}")
        if len(self.value) > MAX_VALUE_LENGTH:
            raise TLVOverflowError(f"Value for tag {self.tag} is {len(self.value)} characters, max {MAX_VALUE_LENGTH}")
        length = f"{len(self.value):02d}"
        return f"{self.tag}{length}{self.value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string, keeping their order."""

    return "".join(item.serialize() for item in items)


def parse_tlv(payload: str) -> Iterator[TLVItem]:
    """Parse TLV payload string into TLV items in wire order."""

    idx = 0
    total = len(payload)
    while idx < total:
        if idx + 4 > total:
            raise FormatError(f"Truncated TLV header at offset {idx}")
        tag = payload[idx : idx + 2]
        length_field = payload[idx + 2 : idx + 4]
        if not _is_two_digits(tag):
            raise FormatError(f"Invalid TLV tag {tag!r} at offset {idx}")
        if not _is_two_digits(length_field):
            raise FormatError(f"Invalid TLV length {length_field!r} at offset {idx}")
        value_start = idx + 4
        value_end = value_start + int(length_field)
        if value_end > total:
            raise FormatError(f"TLV length for tag {tag} exceeds payload")
        yield TLVItem(tag=tag, value=payload[value_start:value_end])
        idx = value_end


def decode_tlv(payload: str) -> dict[str, str]:
    """Decode a payload into a tag -> value mapping.

    Repeated tags overwrite earlier ones. Nested templates are left as raw
    values; feed them back through :func:`parse_tlv` to inspect them.
    """

    if not isinstance(payload, str):
        raise FormatError(f"TLV payload must be a string, got {type(payload).__name__}")
    return {item.tag: item.value for item in parse_tlv(payload)}


def encode_tlv(tags: Mapping[str, str]) -> str:
    """Encode a tag -> value mapping with tags in ascending order."""

    return build_tlv(TLVItem(tag=tag, value=tags[tag]) for tag in sorted(tags))
