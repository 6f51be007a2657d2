"""Build records for one time bucket.

The collection process, which is not part of this package, reads reserves
and swaps from the chain at its sampling cadence and uses these functions
to turn them into records:

.. code-block:: python

    engine = ValuationEngine(config)
    reserves = read_reserves(reader, pair)
    sample = sample_pair_liquidity(engine, pair, reserves, total_supply, now)
    save_record(store, sample)

All timestamps are floored to the configured :py:class:`ammstats.timebucket.TimeBucket`.
"""
import datetime
import logging
from dataclasses import dataclass
from decimal import localcontext
from typing import Iterable, List, Optional, Tuple

from ammstats.amounts import exact_context
from ammstats.bucket import PairBucket, TokenBucket, TotalBucket
from ammstats.codec import DECIMAL_ZERO
from ammstats.liquidity import PairLiquidity, TokenLiquidity
from ammstats.pair import Pair
from ammstats.persistence import RecordStatus
from ammstats.reserves import Reserves
from ammstats.token import Token
from ammstats.types import RawAmount, TokenAmount, USDollarAmount
from ammstats.valuation import ValuationEngine, ValuationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Swap:
    """Raw amounts of one Uniswap v2 `Swap` event."""

    amount0_in: RawAmount

    amount1_in: RawAmount

    amount0_out: RawAmount

    amount1_out: RawAmount


def sample_pair_liquidity(
    engine: ValuationEngine,
    pair: Pair,
    reserves: Reserves,
    total_supply: TokenAmount,
    timestamp: datetime.datetime,
    prices: Optional[Tuple[USDollarAmount, USDollarAmount]] = None,
) -> PairLiquidity:
    """Create a liquidity sample of a pair.

    :param prices:
        (price0, price1) in USD. If not given, the pair is priced
        against its own anchor token.

    :return:
        Sample with status `unpriced` and zero prices
        if the pair cannot be priced
    """
    token0, token1 = pair.get_tokens()
    status = RecordStatus.ok

    if prices is None:
        try:
            prices = engine.get_pair_usd_prices(pair, reserves)
        except ValuationError as e:
            logger.warning("Cannot price %s: %s", pair, e)
            prices = (DECIMAL_ZERO, DECIMAL_ZERO)
            status = RecordStatus.unpriced

    price0, price1 = prices
    return PairLiquidity(
        address=pair.address,
        time=engine.config.time_bucket.floor_datetime(timestamp),
        pair=str(pair),
        token0=token0.symbol,
        token1=token1.symbol,
        total_supply=total_supply,
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        price0=price0,
        price1=price1,
        status=status,
    )


def sample_token_liquidity(
    engine: ValuationEngine,
    token: Token,
    pair_samples: Iterable[Tuple[Pair, PairLiquidity]],
    price_usd: Optional[USDollarAmount],
    timestamp: datetime.datetime,
) -> TokenLiquidity:
    """Create a liquidity sample of a token over all pairs.

    :param pair_samples:
        (pair, sample) tuples of this time bucket. Pairs not containing the token are ignored.

    :param price_usd:
        `None` if the token could not be priced
    """
    reserve = DECIMAL_ZERO
    with localcontext(exact_context()):
        for pair, sample in pair_samples:
            if pair.token0_address == token.address:
                reserve += sample.reserve0
            elif pair.token1_address == token.address:
                reserve += sample.reserve1

    status = RecordStatus.ok
    if price_usd is None:
        logger.warning("No USD price for token %s", token)
        price_usd = DECIMAL_ZERO
        status = RecordStatus.unpriced

    return TokenLiquidity(
        address=token.address,
        time=engine.config.time_bucket.floor_datetime(timestamp),
        symbol=token.symbol,
        reserve=reserve,
        price=price_usd,
        status=status,
    )


def build_pair_bucket(
    engine: ValuationEngine,
    pair: Pair,
    swaps: Iterable[Swap],
    price0_usd: Optional[USDollarAmount],
    price1_usd: Optional[USDollarAmount],
    timestamp: datetime.datetime,
) -> PairBucket:
    """Accumulate swaps of a pair to a volume bucket.

    :param swaps:
        Raw swap events of the pair within the time bucket

    :param price0_usd:
        `None` if token0 could not be priced. The bucket is then `unpriced`
        and the missing price counts as zero.
    """
    token0, token1 = pair.get_tokens()
    status = RecordStatus.ok
    if price0_usd is None or price1_usd is None:
        logger.warning("No USD prices for pair %s: %s %s", pair, price0_usd, price1_usd)
        status = RecordStatus.unpriced

    bucket = PairBucket(
        address=pair.address,
        time=engine.config.time_bucket.floor_datetime(timestamp),
        pair=str(pair),
        price0_usd=DECIMAL_ZERO if price0_usd is None else price0_usd,
        price1_usd=DECIMAL_ZERO if price1_usd is None else price1_usd,
        status=status,
    )

    count = 0
    with localcontext(exact_context()):
        for swap in swaps:
            bucket.amount0_in += token0.convert_to_decimals(swap.amount0_in)
            bucket.amount1_in += token1.convert_to_decimals(swap.amount1_in)
            bucket.amount0_out += token0.convert_to_decimals(swap.amount0_out)
            bucket.amount1_out += token1.convert_to_decimals(swap.amount1_out)
            count += 1

    bucket.recalculate_volume()
    logger.debug("Pair %s had %d swaps, volume %s USD", pair, count, bucket.volume_usd)
    return bucket


def build_token_bucket(
    engine: ValuationEngine,
    token: Token,
    pair_buckets: Iterable[Tuple[Pair, PairBucket]],
    price_usd: Optional[USDollarAmount],
    timestamp: datetime.datetime,
) -> TokenBucket:
    """Sum the flows of a token over all of its pair buckets.

    :param pair_buckets:
        (pair, bucket) tuples. Pairs not containing the token are ignored.

    :param price_usd:
        `None` if the token could not be priced
    """
    status = RecordStatus.ok
    if price_usd is None:
        logger.warning("No USD price for token %s", token)
        price_usd = DECIMAL_ZERO
        status = RecordStatus.unpriced

    bucket = TokenBucket(
        address=token.address,
        time=engine.config.time_bucket.floor_datetime(timestamp),
        symbol=token.symbol,
        price_usd=price_usd,
        status=status,
    )

    with localcontext(exact_context()):
        for pair, pair_bucket in pair_buckets:
            if pair.token0_address == token.address:
                bucket.amount_in += pair_bucket.amount0_in
                bucket.amount_out += pair_bucket.amount0_out
            elif pair.token1_address == token.address:
                bucket.amount_in += pair_bucket.amount1_in
                bucket.amount_out += pair_bucket.amount1_out

    bucket.recalculate_volume()
    return bucket


def build_total_bucket(
    engine: ValuationEngine,
    pair_buckets: Iterable[PairBucket],
    pair_samples: Iterable[PairLiquidity],
    timestamp: datetime.datetime,
) -> TotalBucket:
    """Sum system wide volume and liquidity.

    Buckets and samples that are not valid are left out of the totals.
    The total is then partial and flagged `unpriced`.
    """
    volume = DECIMAL_ZERO
    liquidity = DECIMAL_ZERO
    excluded: List[str] = []

    with localcontext(exact_context()):
        for bucket in pair_buckets:
            if not bucket.is_valid():
                excluded.append(repr(bucket))
                continue
            volume += bucket.volume_usd

        for sample in pair_samples:
            if not sample.is_valid():
                excluded.append(repr(sample))
                continue
            liquidity += sample.get_value_usd()

    status = RecordStatus.ok
    if excluded:
        logger.warning("Left %d records out of totals: %s", len(excluded), excluded)
        status = RecordStatus.unpriced

    return TotalBucket(
        time=engine.config.time_bucket.floor_datetime(timestamp),
        volume_usd=volume,
        liquidity_usd=liquidity,
        status=status,
    )
