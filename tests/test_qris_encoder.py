import logging
from decimal import Decimal

import pytest

from qrisgate.crc import crc16_hex, verify_crc
from qrisgate.qris_encoder import build_dynamic_payload, format_amount, inject_amount
from qrisgate.tlv import FormatError, decode_tlv, parse_tlv


@pytest.mark.parametrize(
    "amount, expected",
    [
        (15000, "15000.00"),
        (15000.5, "15000.50"),
        (0, "0.00"),
        (Decimal("1250.129"), "1250.13"),
        (Decimal("0.005"), "0.01"),
        (-0.0, "0.00"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


@pytest.mark.parametrize("amount", [-1, float("nan"), float("inf"), True, "1000", None, 10**40])
def test_format_amount_rejects_unusable_values(amount):
    with pytest.raises(ValueError):
        format_amount(amount)


def test_inject_sets_amount_tag(static_payload):
    tags = decode_tlv(inject_amount(static_payload, 15000))
    assert tags["54"] == "15000.00"


def test_inject_formats_fractional_amount(static_payload):
    tags = decode_tlv(inject_amount(static_payload, 15000.5))
    assert tags["54"] == "15000.50"


def test_inject_forces_currency_and_country(make_payload):
    foreign = make_payload(currency="840", country="SG")
    tags = decode_tlv(inject_amount(foreign, 1000))
    assert tags["53"] == "360"
    assert tags["58"] == "ID"


def test_inject_accepts_other_currency_and_country(static_payload):
    tags = decode_tlv(inject_amount(static_payload, 10, currency_code="840", country_code="US"))
    assert tags["53"] == "840"
    assert tags["58"] == "US"


def test_inject_keeps_merchant_tags(static_payload):
    before = decode_tlv(static_payload)
    after = decode_tlv(inject_amount(static_payload, 1000))
    for tag in ("00", "01", "26", "52", "59", "60", "61"):
        assert after[tag] == before[tag]


def test_inject_emits_tags_in_ascending_order(static_payload):
    tags = [item.tag for item in parse_tlv(inject_amount(static_payload, 1000))]
    assert tags == sorted(tags)
    assert tags.count("63") == 1


def test_inject_regenerates_consistent_checksum(static_payload):
    result = inject_amount(static_payload, 1000)
    assert result[-8:-4] == "6304"
    assert result[-4:] == crc16_hex(result[:-4])
    assert verify_crc(result)


def test_inject_does_not_trust_old_checksum(make_payload):
    first = inject_amount(make_payload(crc="ABCD"), 5000)
    second = inject_amount(make_payload(crc="0000"), 5000)
    assert first == second


def test_inject_is_idempotent_on_its_own_output(static_payload):
    once = inject_amount(static_payload, 7500)
    assert inject_amount(once, 7500) == once


def test_inject_end_to_end_with_placeholder_checksum(static_payload):
    result = inject_amount(static_payload, 25000)
    assert static_payload.endswith("6304ABCD")
    assert "540825000.00" in result
    assert result[-4:] != "ABCD"
    assert all(ch in "0123456789ABCDEF" for ch in result[-4:])


@pytest.mark.parametrize("payload", [None, "", "not-a-valid-tlv", "1205ABC", 12345])
def test_inject_returns_none_for_bad_payload(payload):
    assert inject_amount(payload, 1000) is None


@pytest.mark.parametrize("amount", [-5, float("nan"), "1000", None])
def test_inject_returns_none_for_bad_amount(static_payload, amount):
    assert inject_amount(static_payload, amount) is None


def test_inject_returns_none_when_amount_overflows_tag(static_payload):
    assert inject_amount(static_payload, 10**97) is None


def test_inject_logs_failure(caplog):
    with caplog.at_level(logging.WARNING, logger="qrisgate.qris"):
        assert inject_amount("not-a-valid-tlv", 1000) is None
    record = next(r for r in caplog.records if r.name == "qrisgate.qris")
    assert record.error_type == "FormatError"
    assert record.payload_length == len("not-a-valid-tlv")


def test_build_dynamic_payload_raises_for_tooling():
    with pytest.raises(FormatError):
        build_dynamic_payload("1205ABC", 1000)


def test_build_dynamic_payload_reports_crc(static_payload):
    encoded = build_dynamic_payload(static_payload, 1000)
    assert encoded.payload.endswith("6304" + encoded.crc)


def test_build_dynamic_payload_drops_stale_crc(static_payload):
    encoded = build_dynamic_payload(static_payload, 1000)
    tags = [item.tag for item in parse_tlv(encoded.payload)]
    assert tags.count("63") == 1
    assert "6304ABCD" not in encoded.payload
    assert decode_tlv(encoded.payload)["59"] == "TOKO KOPI SENJA"
