"""Trading pair presentation.

A pair is a Uniswap v2 compatible pool of two tokens.
The token order, token0 and token1, is decided by the pool contract.
All reserve, price and flow fields elsewhere are bound to this order,
so we never swap it.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dataclasses_json import dataclass_json

from ammstats.codec import encode_address
from ammstats.persistence import PersistentRecord, address_field, plain_field
from ammstats.token import Token
from ammstats.types import NonChecksummedAddress, ZERO_ADDRESS


logger = logging.getLogger(__name__)


class TokenMismatch(Exception):
    """Tried to link tokens that are not the tokens of the pair, or in the wrong order."""


@dataclass_json
@dataclass
class Pair(PersistentRecord):
    """Trading pair information for a single pair.

    Loaded pairs only know their token addresses. Use :py:meth:`link_tokens`
    to attach the :py:class:`Token` objects:

    .. code-block:: python

        pair = Pair.after_load(document)
        pair.link_tokens(tokens[pair.token0_address], tokens[pair.token1_address])
    """

    collection = "pairs"

    #: Running index of the pair in the factory.
    #:
    #: Used for deterministic listing.
    index: int = plain_field("index", fallback=0)

    #: Pool contract address.
    #: Lowercase, non-checksummed.
    address: NonChecksummedAddress = address_field("address")

    #: Lowercase, non-checksummed.
    token0_address: Optional[NonChecksummedAddress] = address_field("token0address", default=None)

    #: Lowercase, non-checksummed.
    token1_address: Optional[NonChecksummedAddress] = address_field("token1address", default=None)

    #: Not stored, see :py:meth:`link_tokens`
    token0: Optional[Token] = field(default=None, compare=False)

    #: Not stored, see :py:meth:`link_tokens`
    token1: Optional[Token] = field(default=None, compare=False)

    def __post_init__(self):
        assert self.address.lower() == self.address, f"Address must be lowercase: {self.address}"

        if self.token0 is not None:
            if self.token0_address is None:
                self.token0_address = self.token0.address
            assert self.token0_address == self.token0.address, f"token0 {self.token0} does not match {self.token0_address}"

        if self.token1 is not None:
            if self.token1_address is None:
                self.token1_address = self.token1.address
            assert self.token1_address == self.token1.address, f"token1 {self.token1} does not match {self.token1_address}"

        if self.token0_address and self.token1_address and self.token0_address != ZERO_ADDRESS:
            assert self.token0_address != self.token1_address, f"Pair {self.address} has the same token on both sides"

    def __repr__(self):
        return f"<Pair #{self.index} {self} at {self.address}>"

    def __str__(self):
        if self.is_linked():
            return f"{self.token0.symbol}-{self.token1.symbol}"
        return f"{self.token0_address}-{self.token1_address}"

    def __hash__(self):
        """set() and dict() compatibility"""
        return hash(self.address)

    def get_storage_key(self) -> str:
        return encode_address(self.address)

    def is_linked(self) -> bool:
        """Have token objects been attached."""
        return self.token0 is not None and self.token1 is not None

    def get_tokens(self) -> Tuple[Token, Token]:
        """Get linked tokens in pool order.

        :raise AssertionError:
            If :py:meth:`link_tokens` has not been called
        """
        assert self.is_linked(), f"Tokens not linked for pair {self.address}"
        return self.token0, self.token1

    def link_tokens(self, token0: Token, token1: Token):
        """Attach token objects after the pair has been loaded.

        :raise TokenMismatch:
            The tokens are not the stored tokens of this pair in the stored order
        """
        if token0.address != self.token0_address or token1.address != self.token1_address:
            raise TokenMismatch(
                f"Pair {self.address} has tokens {self.token0_address}-{self.token1_address}, "
                f"tried to link {token0.address}-{token1.address}"
            )
        self.token0 = token0
        self.token1 = token1

    def before_encode(self):
        assert self.token0_address, f"Pair {self.address} token0 unknown"
        assert self.token1_address, f"Pair {self.address} token1 unknown"
        assert self.token0_address != self.token1_address, f"Pair {self.address} has the same token on both sides"
