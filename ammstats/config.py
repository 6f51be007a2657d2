"""Valuation configuration.

The anchor token rule is global configuration: on a different network,
or with multiple USD stablecoins, you pass a different set of anchor symbols.

Example settings file:

.. code-block:: json

    {"anchor_symbols": ["USDC"], "division_precision": 50, "time_bucket": "1h"}
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dataclasses_json import dataclass_json

from ammstats.stablecoin import is_stablecoin_like
from ammstats.timebucket import TimeBucket
from ammstats.types import TokenSymbol


logger = logging.getLogger(__name__)


#: The anchor used when nothing else is configured
DEFAULT_ANCHOR_SYMBOL: TokenSymbol = "USDC"


@dataclass_json
@dataclass
class Configuration:
    """Configuration for the valuation engine and the sampling process."""

    #: Token symbols valued at exactly 1 USD.
    #:
    #: Matched case sensitively against the token symbol.
    anchor_symbols: List[TokenSymbol] = field(default_factory=lambda: [DEFAULT_ANCHOR_SYMBOL])

    #: Significant digits kept when dividing reserves
    division_precision: int = 50

    #: Sampling window of liquidity samples and volume buckets
    time_bucket: TimeBucket = TimeBucket.h1

    def __post_init__(self):
        assert self.anchor_symbols, "At least one anchor symbol must be configured"
        assert self.division_precision > 0, f"Bad division precision {self.division_precision}"
        for symbol in self.anchor_symbols:
            if not is_stablecoin_like(symbol):
                logger.warning("Anchor token %s is not a known stablecoin, it will be valued at 1 USD", symbol)


def load_configuration(path: Path) -> Configuration:
    """Read settings file.

    :return:
        Default configuration if the file does not exist
    """
    assert isinstance(path, Path), f"Got {path.__class__}"
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return Configuration()

    data = path.read_text()
    config = Configuration.from_json(data)
    logger.debug("Loaded configuration %s from %s", config, path)
    return config


def save_configuration(config: Configuration, path: Path):
    """Write settings file, creating the parent directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.to_json())
