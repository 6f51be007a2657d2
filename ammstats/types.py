"""Generic units used in ammstats data models.

Types aliases are used to give human-readable meaning for various arguments and return values.
"""
from decimal import Decimal
from typing import TypeAlias


#: Ethereum address that does *not* use EIP-55 checksumming.
#:
#: - String
#:
#: - Always starts 0x
#:
#: - Lowercased
#:
#: This is the in-memory presentation of all addresses.
#: Stored documents use the checksummed form.
#:
#: `See EIP-55 <https://github.com/ethereum/EIPs/blob/master/EIPS/eip-55.md>`__.
NonChecksummedAddress: TypeAlias = str


#: Express USD monetary amount.
#:
#: Unlike candle data, the statistics are accumulated bucket after bucket,
#: so we never use float for these.
USDollarAmount: TypeAlias = Decimal


#: Human amount of a token, after the raw integer has been divided by `10**decimals`
TokenAmount: TypeAlias = Decimal


#: Raw ERC-20 integer amount as it is stored on the chain
RawAmount: TypeAlias = int


#: Seconds since 1.1.1970 as UTC time as integer
UNIXTimestamp: TypeAlias = int


#: EVM block number from 1 to infinity
BlockNumber: TypeAlias = int


#: Token symbol is a the ERC-20 symbol() output.
#:
#: E.g. `USDC`
TokenSymbol: TypeAlias = str


#: Zero address used as a placeholder when a stored address cannot be read
ZERO_ADDRESS: NonChecksummedAddress = "0x0000000000000000000000000000000000000000"
