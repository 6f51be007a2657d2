"""Read pairs and tokens from a Uniswap v2 compatible deployment.

Uses `web3` and `eth_defi`. No retries or timeouts are added here,
the caller configures these on the web3 provider.
"""
import logging
from typing import Optional, Tuple

from web3 import Web3
from eth_defi.abi import get_deployed_contract
from eth_defi.token import fetch_erc20_details

from ammstats.token import Token
from ammstats.types import BlockNumber, NonChecksummedAddress, RawAmount


logger = logging.getLogger(__name__)


#: ABI file shipped with eth_defi
PAIR_ABI = "sushi/UniswapV2Pair.json"


class Web3ReserveReader:
    """Read raw reserves with `getReserves()`.

    Implements :py:class:`ammstats.reserves.ReserveReader`.
    """

    def __init__(self, web3: Web3):
        self.web3 = web3

    def fetch_reserves(
        self,
        pair_address: NonChecksummedAddress,
        block_identifier: Optional[BlockNumber] = None,
    ) -> Tuple[RawAmount, RawAmount]:
        pair = get_deployed_contract(self.web3, PAIR_ABI, Web3.to_checksum_address(pair_address))
        if block_identifier is None:
            reserve0, reserve1, timestamp = pair.functions.getReserves().call()
        else:
            reserve0, reserve1, timestamp = pair.functions.getReserves().call(block_identifier=block_identifier)
        logger.debug("Pair %s raw reserves %d %d, last updated %d", pair_address, reserve0, reserve1, timestamp)
        return reserve0, reserve1


def fetch_token(web3: Web3, address: NonChecksummedAddress) -> Token:
    """Create a token from its ERC-20 contract data."""
    details = fetch_erc20_details(web3, Web3.to_checksum_address(address))
    return Token(
        address=address.lower(),
        name=details.name,
        symbol=details.symbol,
        decimals=details.decimals,
        total_supply=details.convert_to_decimals(details.total_supply),
    )
