"""Test fixtures."""
import datetime
import logging
import sys
from decimal import Decimal

import pytest

from ammstats.config import Configuration
from ammstats.pair import Pair
from ammstats.token import Token
from ammstats.valuation import ValuationEngine


#: Uniswap v2 mainnet addresses, lowercased
USDC_ADDRESS = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
DAI_ADDRESS = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC_WETH_ADDRESS = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"
DAI_WETH_ADDRESS = "0xa478c2975ab1ea89e8196811f51a7b7ade33eb11"


@pytest.fixture(scope="session")
def logger(request) -> logging.Logger:
    """Initialize stdout logger using colored output."""

    logger = logging.getLogger()

    # pytest --log-level option
    log_level = request.config.getoption("--log-level")

    # Set log format to dislay the logger name to hunt down verbose logging modules
    fmt = "%(name)-25s %(levelname)-8s %(message)s"

    # Use colored logging output for console
    try:
        import coloredlogs
        coloredlogs.install(level=log_level, fmt=fmt, logger=logger)
    except ImportError:
        logging.basicConfig(stream=sys.stdout, level=log_level)

    # Disable logging of JSON-RPC requests and reploes
    logging.getLogger("web3.RequestManager").setLevel(logging.WARNING)
    logging.getLogger("web3.providers.HTTPProvider").setLevel(logging.WARNING)

    return logger


@pytest.fixture()
def usdc() -> Token:
    return Token(
        address=USDC_ADDRESS,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        total_supply=Decimal("25000000000.123456"),
        cmc_price=Decimal("0.9998"),
    )


@pytest.fixture()
def weth() -> Token:
    return Token(
        address=WETH_ADDRESS,
        name="Wrapped Ether",
        symbol="WETH",
        decimals=18,
        total_supply=Decimal("3500000.123456789012345678"),
    )


@pytest.fixture()
def dai() -> Token:
    return Token(
        address=DAI_ADDRESS,
        name="Dai Stablecoin",
        symbol="DAI",
        decimals=18,
    )


@pytest.fixture()
def usdc_weth(usdc, weth) -> Pair:
    """USDC is token0 in this pool."""
    return Pair(index=0, address=USDC_WETH_ADDRESS, token0=usdc, token1=weth)


@pytest.fixture()
def dai_weth(dai, weth) -> Pair:
    return Pair(index=1, address=DAI_WETH_ADDRESS, token0=dai, token1=weth)


@pytest.fixture()
def engine() -> ValuationEngine:
    return ValuationEngine(Configuration(anchor_symbols=["USDC"]))


@pytest.fixture()
def sample_time() -> datetime.datetime:
    return datetime.datetime(2021, 6, 1, 12, 34, 56)
