"""Stablecoin symbol checks.

Maintenance of stablecoin list lives in eth_defi package.
"""
from eth_defi.token import ALL_STABLECOIN_LIKE

from ammstats.types import TokenSymbol


def is_stablecoin_like(token_symbol: TokenSymbol, symbol_list=ALL_STABLECOIN_LIKE) -> bool:
    """Check if specific token symbol is likely a stablecoin.

    We use this only to sanity check configured anchor tokens.
    The anchor set itself is always explicit configuration.

    :param token_symbol:
        Token symbol as it is written on the contract.
        May contain lower and uppercase latter.

    :param symbol_list:
        Which filtering list we use.
    """
    assert isinstance(token_symbol, str), f"We got {token_symbol}"
    return token_symbol in symbol_list
