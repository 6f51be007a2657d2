"""Volume buckets.

A volume bucket accumulates swap flow over one time bucket.
The US dollar volume is always derived from the flows and their prices,
never set independently:

- :py:class:`PairBucket`: `(amount0In + amount0Out) * price0USD + (amount1In + amount1Out) * price1USD`

- :py:class:`TokenBucket`: `(amountIn + amountOut) * priceUSD`

Call `recalculate_volume()` after touching the flows or prices.
Buckets whose volume does not match are refused by :py:meth:`PersistentRecord.pre_save`
and flagged :py:attr:`RecordStatus.inconsistent` when loaded.
"""
import datetime
import logging
from dataclasses import dataclass
from decimal import localcontext
from typing import Optional

from dataclasses_json import dataclass_json

from ammstats.amounts import calculate_flow_value, exact_context
from ammstats.codec import encode_address
from ammstats.persistence import PersistentRecord, RecordStatus, address_field, decimal_field, plain_field
from ammstats.types import NonChecksummedAddress, TokenAmount, TokenSymbol, USDollarAmount
from ammstats.utils.time import to_int_unix_timestamp


logger = logging.getLogger(__name__)


class InconsistentVolume(Exception):
    """Bucket volume does not match its flows."""


class VolumeBucketMixin:
    """Shared volume checks.

    Subclasses implement :py:meth:`calculate_volume_usd`.
    """

    def calculate_volume_usd(self) -> USDollarAmount:
        raise NotImplementedError()

    def recalculate_volume(self):
        """Derive `volume_usd` from the flows."""
        self.volume_usd = self.calculate_volume_usd()

    def is_volume_consistent(self) -> bool:
        return self.volume_usd == self.calculate_volume_usd()

    def check_volume(self):
        """:raise InconsistentVolume: if flows were changed without recalculating the volume"""
        expected = self.calculate_volume_usd()
        if self.volume_usd != expected:
            raise InconsistentVolume(f"{self!r} has volume {self.volume_usd}, flows give {expected}")

    def before_encode(self):
        self.check_volume()

    def after_decode(self):
        if not self.is_volume_consistent():
            logger.warning("Loaded bucket %r has volume not matching its flows", self)
            if self.status == RecordStatus.ok:
                self.status = RecordStatus.inconsistent


@dataclass_json
@dataclass
class PairBucket(VolumeBucketMixin, PersistentRecord):
    """Swap volume of one pair during one time bucket."""

    collection = "pair_buckets"

    #: Pair address
    address: NonChecksummedAddress = address_field("address")

    #: Opening time of the time bucket, naive UTC
    time: Optional[datetime.datetime] = plain_field("time")

    #: Human readable pair name, like `WETH-USDC`
    pair: Optional[str] = plain_field("pair", default=None)

    amount0_in: TokenAmount = decimal_field("amount0In")

    amount1_in: TokenAmount = decimal_field("amount1In")

    amount0_out: TokenAmount = decimal_field("amount0Out")

    amount1_out: TokenAmount = decimal_field("amount1Out")

    price0_usd: USDollarAmount = decimal_field("price0USD")

    price1_usd: USDollarAmount = decimal_field("price1USD")

    #: Derived, see :py:meth:`calculate_volume_usd`
    volume_usd: USDollarAmount = decimal_field("volumeUSD")

    def __repr__(self):
        return f"<PairBucket {self.pair} at {self.time} volume:{self.volume_usd} {self.status.value}>"

    def get_storage_key(self) -> str:
        return f"{encode_address(self.address)}-{to_int_unix_timestamp(self.time)}"

    def calculate_volume_usd(self) -> USDollarAmount:
        volume0 = calculate_flow_value(self.amount0_in, self.amount0_out, self.price0_usd)
        volume1 = calculate_flow_value(self.amount1_in, self.amount1_out, self.price1_usd)
        with localcontext(exact_context()):
            return volume0 + volume1


@dataclass_json
@dataclass
class TokenBucket(VolumeBucketMixin, PersistentRecord):
    """Swap volume of one token, over all of its pairs, during one time bucket."""

    collection = "token_buckets"

    #: Token address
    address: NonChecksummedAddress = address_field("address")

    #: Opening time of the time bucket, naive UTC
    time: Optional[datetime.datetime] = plain_field("time")

    symbol: Optional[TokenSymbol] = plain_field("symbol", default=None)

    amount_in: TokenAmount = decimal_field("amountIn")

    amount_out: TokenAmount = decimal_field("amountOut")

    price_usd: USDollarAmount = decimal_field("priceUSD")

    #: Derived, see :py:meth:`calculate_volume_usd`
    volume_usd: USDollarAmount = decimal_field("volumeUSD")

    def __repr__(self):
        return f"<TokenBucket {self.symbol} at {self.time} volume:{self.volume_usd} {self.status.value}>"

    def get_storage_key(self) -> str:
        return f"{encode_address(self.address)}-{to_int_unix_timestamp(self.time)}"

    def calculate_volume_usd(self) -> USDollarAmount:
        return calculate_flow_value(self.amount_in, self.amount_out, self.price_usd)


@dataclass_json
@dataclass
class TotalBucket(PersistentRecord):
    """System wide volume and liquidity during one time bucket."""

    collection = "total_buckets"

    #: Opening time of the time bucket, naive UTC
    time: Optional[datetime.datetime] = plain_field("time")

    #: Sum of pair bucket volumes
    volume_usd: USDollarAmount = decimal_field("volumeUSD")

    #: Sum of pair liquidity sample values
    liquidity_usd: USDollarAmount = decimal_field("liquidityUSD")

    def __repr__(self):
        return f"<TotalBucket at {self.time} volume:{self.volume_usd} liquidity:{self.liquidity_usd} {self.status.value}>"

    def get_storage_key(self) -> str:
        return str(to_int_unix_timestamp(self.time))
