"""Decimal arithmetic for token amounts and US dollar values.

No float is used anywhere. Values are accumulated bucket after bucket,
so any rounding would compound.

- Multiplication and addition happen in :py:func:`exact_context`: results are never rounded

- Division happens in :py:func:`division_context` with a configured number of significant digits,
  because ratios like `1/3` have no finite decimal expansion
"""
import decimal
from decimal import Decimal, localcontext

from ammstats.types import RawAmount, TokenAmount, USDollarAmount


def exact_context() -> decimal.Context:
    """Decimal context where addition and multiplication never round."""
    return decimal.Context(
        prec=decimal.MAX_PREC,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


def division_context(precision: int) -> decimal.Context:
    """Decimal context for dividing reserves.

    :param precision:
        Significant digits of the quotient
    """
    assert precision > 0, f"Bad precision {precision}"
    return decimal.Context(
        prec=precision,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


def divide(numerator: Decimal, denominator: Decimal, precision: int) -> Decimal:
    """Divide with the given number of significant digits.

    :raise decimal.DivisionByZero:
        Callers are expected to check for zero first
    """
    with localcontext(division_context(precision)):
        return numerator / denominator


def convert_to_decimals(raw_amount: RawAmount, decimals: int) -> TokenAmount:
    """Convert raw ERC-20 integer amount to a human amount.

    The result is built by moving the decimal point of the exact integer,
    so nothing is rounded no matter how large the amount is.

    Example:

    .. code-block:: python

        assert convert_to_decimals(1_500_000, 6) == Decimal("1.5")

    :param raw_amount:
        Non-negative integer as returned by the contract

    :param decimals:
        Token decimal-scale exponent

    :raise ValueError:
        Negative or non-integer input
    """
    if type(raw_amount) is not int:
        raise ValueError(f"Raw amount must be int, got {type(raw_amount)}: {raw_amount}")

    if raw_amount < 0:
        raise ValueError(f"Raw amount cannot be negative: {raw_amount}")

    if type(decimals) is not int or decimals < 0:
        raise ValueError(f"Bad token decimals: {decimals}")

    sign, digits, exponent = Decimal(raw_amount).as_tuple()
    return Decimal((sign, digits, exponent - decimals))


def calculate_token_value(reserve: TokenAmount, price: USDollarAmount) -> USDollarAmount:
    """Value of a token amount in US dollar."""
    with localcontext(exact_context()):
        return reserve * price


def calculate_pair_value(
    reserve0: TokenAmount,
    price0: USDollarAmount,
    reserve1: TokenAmount,
    price1: USDollarAmount,
) -> USDollarAmount:
    """Total US dollar value of a pool.

    `reserve0 * price0 + reserve1 * price1`
    """
    with localcontext(exact_context()):
        return reserve0 * price0 + reserve1 * price1


def calculate_flow_value(amount_in: TokenAmount, amount_out: TokenAmount, price: USDollarAmount) -> USDollarAmount:
    """US dollar volume of inbound and outbound flow of one token."""
    with localcontext(exact_context()):
        return (amount_in + amount_out) * price
