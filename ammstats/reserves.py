"""Pool reserves.

Raw reserves come from the pair contract as integers. We normalise them to human
amounts using the decimals of each token, see :py:func:`ammstats.amounts.convert_to_decimals`.

Reading the chain is done by a :py:class:`ReserveReader`. Its failures always
propagate: we never substitute zero reserves, as it would silently
corrupt every price derived from them.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from ammstats.amounts import convert_to_decimals
from ammstats.pair import Pair
from ammstats.token import Token
from ammstats.types import BlockNumber, NonChecksummedAddress, RawAmount, TokenAmount


logger = logging.getLogger(__name__)


class ReserveReadFailed(Exception):
    """Reading raw reserves of a pair failed."""


class ReserveReader(Protocol):
    """Reads raw pool reserves from the chain."""

    def fetch_reserves(
        self,
        pair_address: NonChecksummedAddress,
        block_identifier: Optional[BlockNumber] = None,
    ) -> Tuple[RawAmount, RawAmount]:
        """Get raw (reserve0, reserve1) integers.

        :param block_identifier:
            Read historical reserves at this block. `None` for the latest block.
        """


@dataclass(frozen=True, slots=True)
class Reserves:
    """Normalised reserves of a pool in token0, token1 order.

    Not stored as its own record.
    """

    reserve0: TokenAmount

    reserve1: TokenAmount

    def __repr__(self):
        return f"<Reserves {self.reserve0} - {self.reserve1}>"

    def has_liquidity(self) -> bool:
        return self.reserve0 > 0 and self.reserve1 > 0

    @staticmethod
    def normalise(raw_reserve0: RawAmount, raw_reserve1: RawAmount, token0: Token, token1: Token) -> "Reserves":
        """Convert raw integer reserves to human amounts.

        :raise ValueError:
            Negative or non-integer raw reserves
        """
        return Reserves(
            convert_to_decimals(raw_reserve0, token0.decimals),
            convert_to_decimals(raw_reserve1, token1.decimals),
        )


def read_reserves(
    reader: ReserveReader,
    pair: Pair,
    block_identifier: Optional[BlockNumber] = None,
) -> Reserves:
    """Read and normalise reserves of a pair.

    :param pair:
        Pair with tokens linked

    :raise ReserveReadFailed:
        The reader failed. The original exception is chained.
    """
    token0, token1 = pair.get_tokens()

    try:
        raw_reserve0, raw_reserve1 = reader.fetch_reserves(pair.address, block_identifier)
    except Exception as e:
        raise ReserveReadFailed(f"Error getting reserves for {pair!r} at block {block_identifier}: {e}") from e

    reserves = Reserves.normalise(raw_reserve0, raw_reserve1, token0, token1)
    logger.debug("Pair %s reserves %s at block %s", pair, reserves, block_identifier)
    return reserves
