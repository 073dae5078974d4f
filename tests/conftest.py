import pytest

from qrisgate.tlv import TLVItem, build_tlv


def _static_payload(currency="360", country="ID", crc="ABCD"):
    merchant_account = build_tlv(
        [
            TLVItem("00", "ID.CO.QRIS.WWW"),
            TLVItem("01", "936009150000000001"),
            TLVItem("02", "ID1020000000001"),
            TLVItem("03", "UMI"),
        ]
    )
    return build_tlv(
        [
            TLVItem("00", "01"),
            TLVItem("01", "11"),
            TLVItem("26", merchant_account),
            TLVItem("52", "5812"),
            TLVItem("53", currency),
            TLVItem("58", country),
            TLVItem("59", "TOKO KOPI SENJA"),
            TLVItem("60", "JAKARTA"),
            TLVItem("61", "10110"),
            TLVItem("63", crc),
        ]
    )


@pytest.fixture
def make_payload():
    """Factory for static merchant QRs in wire order, ending with a placeholder CRC."""
    return _static_payload


@pytest.fixture
def static_payload():
    return _static_payload()


class FixedRandom:
    """Stands in for random.Random and always picks the upper bound."""

    def randint(self, a, b):
        return b


@pytest.fixture
def fixed_rng():
    return FixedRandom()
