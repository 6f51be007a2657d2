"""Build records for a time bucket."""
import datetime
from decimal import Decimal

from ammstats.bucket import PairBucket, TotalBucket
from ammstats.pair import Pair
from ammstats.persistence import RecordStatus
from ammstats.reserves import Reserves
from ammstats.sampling import (
    Swap,
    build_pair_bucket,
    build_token_bucket,
    build_total_bucket,
    sample_pair_liquidity,
    sample_token_liquidity,
)
from ammstats.valuation import ValuationEngine


def test_sample_pair_liquidity(engine: ValuationEngine, usdc_weth: Pair, sample_time: datetime.datetime):
    """Sample is priced against USDC and floored to the hour."""
    sample = sample_pair_liquidity(engine, usdc_weth, Reserves(Decimal(2000), Decimal(1)), Decimal("44.7"), sample_time)
    assert sample.time == datetime.datetime(2021, 6, 1, 12, 0)
    assert sample.pair == "USDC-WETH"
    assert sample.token0 == "USDC"
    assert sample.token1 == "WETH"
    assert sample.price0 == 1
    assert sample.price1 == 2000
    assert sample.get_value_usd() == 4000
    assert sample.status == RecordStatus.ok


def test_sample_unpriced_pair(engine: ValuationEngine, dai_weth: Pair, sample_time: datetime.datetime):
    """Pairs without anchor are written, but flagged."""
    sample = sample_pair_liquidity(engine, dai_weth, Reserves(Decimal(4000), Decimal(2)), Decimal(1), sample_time)
    assert sample.status == RecordStatus.unpriced
    assert sample.price0 == 0
    assert sample.price1 == 0
    assert not sample.is_valid()


def test_sample_with_given_prices(engine: ValuationEngine, dai_weth: Pair, sample_time: datetime.datetime):
    sample = sample_pair_liquidity(
        engine,
        dai_weth,
        Reserves(Decimal(4000), Decimal(2)),
        Decimal(1),
        sample_time,
        prices=(Decimal(1), Decimal(2000)),
    )
    assert sample.status == RecordStatus.ok
    assert sample.get_value_usd() == 8000


def test_sample_token_liquidity(engine, usdc_weth, dai_weth, weth, sample_time):
    """WETH reserves are summed over both pools."""
    usdc_sample = sample_pair_liquidity(engine, usdc_weth, Reserves(Decimal(2000), Decimal(1)), Decimal(1), sample_time)
    dai_sample = sample_pair_liquidity(engine, dai_weth, Reserves(Decimal(4000), Decimal("2.5")), Decimal(1), sample_time)

    sample = sample_token_liquidity(engine, weth, [(usdc_weth, usdc_sample), (dai_weth, dai_sample)], Decimal(2000), sample_time)
    assert sample.reserve == Decimal("3.5")
    assert sample.get_value_usd() == 7000
    assert sample.status == RecordStatus.ok

    unpriced = sample_token_liquidity(engine, weth, [(usdc_weth, usdc_sample)], None, sample_time)
    assert unpriced.status == RecordStatus.unpriced


def test_build_pair_bucket(engine: ValuationEngine, usdc_weth: Pair, sample_time: datetime.datetime):
    """Raw swap amounts are normalised and summed."""
    swaps = [
        # Buy 1 WETH with 2000 USDC
        Swap(amount0_in=2000 * 10**6, amount1_in=0, amount0_out=0, amount1_out=10**18),
        # Sell 0.5 WETH for 1000 USDC
        Swap(amount0_in=0, amount1_in=5 * 10**17, amount0_out=1000 * 10**6, amount1_out=0),
    ]
    bucket = build_pair_bucket(engine, usdc_weth, swaps, Decimal(1), Decimal(2000), sample_time)
    assert bucket.amount0_in == 2000
    assert bucket.amount0_out == 1000
    assert bucket.amount1_in == Decimal("0.5")
    assert bucket.amount1_out == 1
    assert bucket.volume_usd == Decimal(6000)
    assert bucket.is_volume_consistent()
    assert bucket.time == datetime.datetime(2021, 6, 1, 12, 0)


def test_build_token_bucket(engine, usdc_weth, dai_weth, weth, sample_time):
    usdc_bucket = build_pair_bucket(engine, usdc_weth, [Swap(0, 10**18, 2000 * 10**6, 0)], Decimal(1), Decimal(2000), sample_time)
    dai_bucket = build_pair_bucket(engine, dai_weth, [Swap(4000 * 10**18, 0, 0, 2 * 10**18)], Decimal(1), Decimal(2000), sample_time)

    bucket = build_token_bucket(engine, weth, [(usdc_weth, usdc_bucket), (dai_weth, dai_bucket)], Decimal(2000), sample_time)
    assert bucket.amount_in == 1
    assert bucket.amount_out == 2
    assert bucket.volume_usd == 6000


def test_build_total_bucket(engine, usdc_weth, dai_weth, sample_time):
    """Unpriced samples are left out of the totals."""
    priced = sample_pair_liquidity(engine, usdc_weth, Reserves(Decimal(2000), Decimal(1)), Decimal(1), sample_time)
    unpriced = sample_pair_liquidity(engine, dai_weth, Reserves(Decimal(4000), Decimal(2)), Decimal(1), sample_time)
    bucket = build_pair_bucket(engine, usdc_weth, [Swap(2000 * 10**6, 0, 0, 10**18)], Decimal(1), Decimal(2000), sample_time)

    total = build_total_bucket(engine, [bucket], [priced, unpriced], sample_time)
    assert isinstance(total, TotalBucket)
    assert total.volume_usd == 4000
    assert total.liquidity_usd == 4000
    assert total.time == datetime.datetime(2021, 6, 1, 12, 0)
    assert total.status == RecordStatus.unpriced
    assert not total.is_valid()


def test_build_total_bucket_complete(engine, usdc_weth, sample_time):
    priced = sample_pair_liquidity(engine, usdc_weth, Reserves(Decimal(2000), Decimal(1)), Decimal(1), sample_time)
    bucket = build_pair_bucket(engine, usdc_weth, [Swap(2000 * 10**6, 0, 0, 10**18)], Decimal(1), Decimal(2000), sample_time)

    total = build_total_bucket(engine, [bucket], [priced], sample_time)
    assert total.status == RecordStatus.ok
    assert total.volume_usd == 4000


def test_build_unpriced_pair_bucket(engine, dai_weth, sample_time):
    """Flows are kept even if the pair cannot be priced."""
    bucket = build_pair_bucket(engine, dai_weth, [Swap(4000 * 10**18, 0, 0, 2 * 10**18)], None, None, sample_time)
    assert bucket.status == RecordStatus.unpriced
    assert bucket.amount0_in == 4000
    assert bucket.price0_usd == 0
    assert bucket.volume_usd == 0
    assert bucket.is_volume_consistent()

    # Saving keeps the flag
    loaded = PairBucket.after_load(bucket.pre_save())
    assert loaded.status == RecordStatus.unpriced


def test_build_unpriced_token_bucket(engine, usdc_weth, weth, sample_time):
    pair_bucket = build_pair_bucket(engine, usdc_weth, [Swap(0, 10**18, 2000 * 10**6, 0)], Decimal(1), Decimal(2000), sample_time)
    bucket = build_token_bucket(engine, weth, [(usdc_weth, pair_bucket)], None, sample_time)
    assert bucket.status == RecordStatus.unpriced
    assert bucket.amount_in == 1
    assert bucket.volume_usd == 0
    assert not bucket.is_valid()
