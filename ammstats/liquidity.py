"""Liquidity samples.

A liquidity sample is a snapshot of pool reserves and their US dollar prices,
written once per time bucket.

- :py:class:`PairLiquidity` for a single pool

- :py:class:`TokenLiquidity` for a single token across all pools

- The system wide total lives in :py:class:`ammstats.bucket.TotalBucket`

Prices are always US dollar per one token and values are always `reserve * price`.
"""
import datetime
from dataclasses import dataclass
from typing import Optional

from dataclasses_json import dataclass_json

from ammstats.amounts import calculate_pair_value, calculate_token_value
from ammstats.codec import encode_address
from ammstats.persistence import PersistentRecord, address_field, decimal_field, plain_field
from ammstats.types import NonChecksummedAddress, TokenAmount, USDollarAmount, TokenSymbol
from ammstats.utils.time import to_int_unix_timestamp


@dataclass_json
@dataclass
class PairLiquidity(PersistentRecord):
    """Liquidity sample of one pair."""

    collection = "pair_liquidity"

    #: Pair address
    address: NonChecksummedAddress = address_field("address")

    #: Opening time of the time bucket, naive UTC
    time: Optional[datetime.datetime] = plain_field("time")

    #: Human readable pair name, like `WETH-USDC`
    pair: Optional[str] = plain_field("pair", default=None)

    #: Symbol of token0
    token0: Optional[TokenSymbol] = plain_field("token0", default=None)

    #: Symbol of token1
    token1: Optional[TokenSymbol] = plain_field("token1", default=None)

    #: LP token supply
    total_supply: TokenAmount = decimal_field("totalSupply")

    reserve0: TokenAmount = decimal_field("reserve0")

    reserve1: TokenAmount = decimal_field("reserve1")

    #: USD price of token0
    price0: USDollarAmount = decimal_field("price0")

    #: USD price of token1
    price1: USDollarAmount = decimal_field("price1")

    def __repr__(self):
        return f"<PairLiquidity {self.pair} at {self.time} r0:{self.reserve0} r1:{self.reserve1} p0:{self.price0} p1:{self.price1} {self.status.value}>"

    def get_storage_key(self) -> str:
        return f"{encode_address(self.address)}-{to_int_unix_timestamp(self.time)}"

    def get_value_usd(self) -> USDollarAmount:
        """Total value of the pool in US dollar."""
        return calculate_pair_value(self.reserve0, self.price0, self.reserve1, self.price1)


@dataclass_json
@dataclass
class TokenLiquidity(PersistentRecord):
    """Liquidity sample of one token, summed over all pairs it trades in."""

    collection = "token_liquidity"

    #: Token address
    address: NonChecksummedAddress = address_field("address")

    #: Opening time of the time bucket, naive UTC
    time: Optional[datetime.datetime] = plain_field("time")

    symbol: Optional[TokenSymbol] = plain_field("symbol", default=None)

    reserve: TokenAmount = decimal_field("reserve")

    #: USD price of the token
    price: USDollarAmount = decimal_field("price")

    def __repr__(self):
        return f"<TokenLiquidity {self.symbol} at {self.time} r:{self.reserve} p:{self.price} {self.status.value}>"

    def get_storage_key(self) -> str:
        return f"{encode_address(self.address)}-{to_int_unix_timestamp(self.time)}"

    def get_value_usd(self) -> USDollarAmount:
        """Value of the token reserves in US dollar."""
        return calculate_token_value(self.reserve, self.price)
