"""Lossless text presentation of decimals and addresses.

The document store we write to understands strings, integers, floats and timestamps,
but has no arbitrary precision decimal type. Floats would lose precision
for 18 decimal tokens, so all :py:class:`decimal.Decimal` values travel through
the store as strings.

- :py:func:`encode_decimal` never uses scientific notation and keeps every
  digit of the coefficient, so ``decode_decimal(encode_decimal(d))[0] == d``

- :py:func:`decode_decimal` never raises. Bad stored data degrades into zero
  and a failure flag the caller must check.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple

from eth_utils import is_checksum_address, is_hex_address, to_checksum_address

from ammstats.types import NonChecksummedAddress, ZERO_ADDRESS


#: Value we give out for undecodeable data
DECIMAL_ZERO = Decimal(0)


def encode_decimal(value: Decimal) -> str:
    """Convert decimal to its canonical string presentation.

    :param value:
        Any finite decimal

    :return:
        Positional notation, e.g. `"0.000000000000000001"` instead of `"1E-18"`

    :raise ValueError:
        NaN and infinity are not amounts
    """
    assert isinstance(value, Decimal), f"Expected Decimal, got {type(value)}: {value}"
    if not value.is_finite():
        raise ValueError(f"Cannot encode non-finite decimal {value}")
    return format(value, "f")


def decode_decimal(text: Any) -> Tuple[Decimal, bool]:
    """Read decimal from its stored string presentation.

    :param text:
        Stored value. Missing fields come in as `None`.

    :return:
        Tuple (value, success). On failure the value is zero.
    """
    if not isinstance(text, str) or not text:
        return DECIMAL_ZERO, False

    try:
        value = Decimal(text)
    except InvalidOperation:
        return DECIMAL_ZERO, False

    if not value.is_finite():
        return DECIMAL_ZERO, False

    return value, True


def encode_address(address: NonChecksummedAddress) -> str:
    """Store addresses in EIP-55 checksummed format."""
    return to_checksum_address(address)


def decode_address(text: Any) -> Tuple[NonChecksummedAddress, bool]:
    """Read a stored address back to lowercase.

    Mixed case text must carry a valid EIP-55 checksum.
    All lowercase text is accepted as is.

    :return:
        Tuple (address, success). On failure the address is the zero address.
    """
    if not isinstance(text, str) or not text.startswith("0x") or not is_hex_address(text):
        return ZERO_ADDRESS, False

    if text != text.lower() and not is_checksum_address(text):
        return ZERO_ADDRESS, False

    return text.lower(), True
