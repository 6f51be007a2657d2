"""Decimal and address text presentation."""
from decimal import Decimal

import pytest

from ammstats.codec import decode_address, decode_decimal, encode_address, encode_decimal
from ammstats.types import ZERO_ADDRESS


@pytest.mark.parametrize("value", [
    Decimal(0),
    Decimal("-0"),
    Decimal("1.5"),
    Decimal("-42.000001"),
    Decimal("115792089237316195423570985008687907853269984665640564039457584007913129639935"),
    Decimal("0.000000000000000001"),
    Decimal("1E-30"),
    Decimal("3.333333333333333333333333333333333333333333333333"),
    Decimal("1.2345E+40"),
    Decimal("1.50"),
])
def test_decimal_round_trip(value: Decimal):
    """Decoded value equals the original to full precision."""
    text = encode_decimal(value)
    decoded, success = decode_decimal(text)
    assert success
    assert decoded == value
    # Same digits, not only equal value
    assert encode_decimal(decoded) == text


def test_encode_no_scientific_notation():
    assert encode_decimal(Decimal("1E-18")) == "0.000000000000000001"
    assert encode_decimal(Decimal("1E+3")) == "1000"


def test_encode_non_finite():
    with pytest.raises(ValueError):
        encode_decimal(Decimal("NaN"))

    with pytest.raises(ValueError):
        encode_decimal(Decimal("Infinity"))


@pytest.mark.parametrize("text", ["", None, "abc", "1.2.3", "NaN", "-Infinity", 12])
def test_decode_malformed(text):
    """Bad stored data gives zero and a failure flag, never an exception."""
    value, success = decode_decimal(text)
    assert value == 0
    assert not success


def test_address_round_trip():
    address = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
    text = encode_address(address)
    assert text == "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"
    decoded, success = decode_address(text)
    assert success
    assert decoded == address


@pytest.mark.parametrize("text", [
    "",
    None,
    "0x123",
    "not an address",
    # Checksum broken by lowercasing the first letters
    "0xb4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc",
    "0xB4E16D0168E52D35CACD2C6185B44281EC28C9DC",
    "b4e16d0168e52d35cacd2c6185b44281ec28c9dc",
])
def test_decode_malformed_address(text):
    """Bad hex or bad checksum gives the zero address."""
    address, success = decode_address(text)
    assert address == ZERO_ADDRESS
    assert not success


def test_decode_lowercase_address():
    """Lowercase text has no checksum to verify."""
    address, success = decode_address("0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc")
    assert success
    assert address == "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
