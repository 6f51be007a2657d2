"""Token presentation."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from dataclasses_json import dataclass_json

from ammstats.amounts import convert_to_decimals
from ammstats.codec import encode_address
from ammstats.persistence import PersistentRecord, address_field, decimal_field, plain_field
from ammstats.types import NonChecksummedAddress, RawAmount, TokenAmount, USDollarAmount


@dataclass_json
@dataclass
class Token(PersistentRecord):
    """ERC-20 token.

    Capture token essentials. Tokens are identified by their address,
    symbols are not unique.
    """

    collection = "tokens"

    #: Ethereum address of this token.
    #: Always lowercase - no checksum.
    address: NonChecksummedAddress = address_field("address")

    #: ERC-20 name()
    name: Optional[str] = plain_field("name", default=None)

    #: ERC-20 symbol()
    symbol: Optional[str] = plain_field("symbol", default=None)

    #: Decimal-scale exponent.
    #:
    #: Fixed when the token is created. Raw amounts are divided by `10**decimals`.
    decimals: int = plain_field("decimals", default=18, fallback=0)

    #: Human amount of total supply
    total_supply: TokenAmount = decimal_field("totalSupply")

    #: Reference price from an external market data source (CoinMarketCap)
    cmc_price: USDollarAmount = decimal_field("CMCPrice")

    def __setattr__(self, key, value):
        if key == "decimals" and "decimals" in self.__dict__:
            raise AttributeError(f"Token decimals cannot be changed after creation: {self}")
        super().__setattr__(key, value)

    def __eq__(self, other):
        """Implemented for set()"""
        if not isinstance(other, Token):
            return NotImplemented
        return self.address == other.address

    def __hash__(self) -> int:
        """Implemented for set()"""
        return int(self.address, 16)

    def __repr__(self):
        return f"<Token {self.symbol} at {self.address} with {self.decimals} decimals>"

    def __str__(self):
        return f"{self.symbol}"

    def __post_init__(self):
        assert type(self.address) == str, f"Got address {self.address} as {type(self.address)}"
        assert self.address.startswith("0x")
        assert self.address.lower() == self.address, f"Address must be lowercase: {self.address}"
        assert self.decimals is not None, f"Cannot create token without decimals set"
        assert isinstance(self.total_supply, Decimal), f"Got {type(self.total_supply)}"

    def get_storage_key(self) -> str:
        return encode_address(self.address)

    def convert_to_decimals(self, raw_amount: RawAmount) -> TokenAmount:
        """Convert raw integer amount of this token to a human amount."""
        return convert_to_decimals(raw_amount, self.decimals)
