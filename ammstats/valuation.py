"""US dollar valuation of pools.

Prices are derived from pool reserves:

- Spot price: the price of token1 in token0 is `reserve0 / reserve1`

- Anchor pricing: if one side of the pair is an anchor token,
  a USD stablecoin like USDC, we value it at exactly 1 USD.
  The other token is then worth `anchor reserve / other reserve` USD.

- Price propagation: tokens that do not trade against an anchor
  get their price through a chain of pairs, see :py:meth:`ValuationEngine.propagate_usd_prices`.

Conditions where a price cannot be derived are exceptions the caller must handle:

- :py:class:`NoLiquidity`: a reserve is zero

- :py:class:`NoAnchorToken`: neither side of the pair is an anchor token

If both sides of a pair are anchor tokens, token0 is used as the anchor.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Dict, Iterable, Optional, Tuple

from ammstats.amounts import divide, exact_context
from ammstats.config import Configuration
from ammstats.pair import Pair
from ammstats.reserves import Reserves
from ammstats.types import NonChecksummedAddress, USDollarAmount


logger = logging.getLogger(__name__)


#: Value of an anchor token
ONE_USD = Decimal(1)


class ValuationError(Exception):
    """Could not derive a price."""


class NoLiquidity(ValuationError):
    """Pair has zero reserves on one or both sides."""


class NoAnchorToken(ValuationError):
    """Pair has no anchor token and cannot be priced in USD alone."""


@dataclass(frozen=True, slots=True)
class SpotPrices:
    """Pool prices of the two tokens in terms of each other."""

    #: How many token0 one token1 costs, `reserve0 / reserve1`
    token1_in_token0: Decimal

    #: How many token1 one token0 costs, `reserve1 / reserve0`
    token0_in_token1: Decimal


class ValuationEngine:
    """Derive USD prices for pairs.

    Holds no state between calls, so the same instance can be used
    for any number of pairs from any number of threads.
    """

    def __init__(self, config: Optional[Configuration] = None):
        """
        :param config:
            Anchor symbols and division precision. Defaults to USDC anchor.
        """
        self.config = config or Configuration()
        self.anchor_symbols = frozenset(self.config.anchor_symbols)
        self.precision = self.config.division_precision

    def __repr__(self):
        return f"<ValuationEngine anchors:{sorted(self.anchor_symbols)} precision:{self.precision}>"

    def is_anchor(self, symbol: Optional[str]) -> bool:
        return symbol in self.anchor_symbols

    def get_spot_prices(self, reserves: Reserves) -> SpotPrices:
        """Get the pool price of each token in terms of the other.

        :raise NoLiquidity:
            Either reserve is zero
        """
        if not reserves.has_liquidity():
            raise NoLiquidity(f"Pair has no liquidity: {reserves}")

        return SpotPrices(
            token1_in_token0=divide(reserves.reserve0, reserves.reserve1, self.precision),
            token0_in_token1=divide(reserves.reserve1, reserves.reserve0, self.precision),
        )

    def find_anchor(self, pair: Pair) -> int:
        """Which side of the pair is the anchor token.

        :return:
            0 or 1. If both sides are anchors, 0.

        :raise NoAnchorToken:
            Neither token is an anchor
        """
        token0, token1 = pair.get_tokens()
        if self.is_anchor(token0.symbol):
            if self.is_anchor(token1.symbol):
                logger.debug("Both tokens of %s are anchors, using token0", pair)
            return 0
        elif self.is_anchor(token1.symbol):
            return 1
        raise NoAnchorToken(f"No anchor token {sorted(self.anchor_symbols)} in pair {pair}")

    def get_usd_price(self, pair: Pair, reserves: Reserves) -> USDollarAmount:
        """Get the USD price of the non-anchor token of an anchor pair.

        :raise NoAnchorToken:
            Neither token is an anchor

        :raise NoLiquidity:
            Either reserve is zero
        """
        price0, price1 = self.get_pair_usd_prices(pair, reserves)
        anchor = self.find_anchor(pair)
        return price1 if anchor == 0 else price0

    def get_pair_usd_prices(self, pair: Pair, reserves: Reserves) -> Tuple[USDollarAmount, USDollarAmount]:
        """Get USD prices for both tokens of an anchor pair.

        :return:
            (price0, price1). The anchor is exactly 1.

        :raise NoAnchorToken:
            Neither token is an anchor

        :raise NoLiquidity:
            Either reserve is zero
        """
        anchor = self.find_anchor(pair)
        if anchor == 0:
            anchor_reserve, other_reserve = reserves.reserve0, reserves.reserve1
        else:
            anchor_reserve, other_reserve = reserves.reserve1, reserves.reserve0

        if not reserves.has_liquidity():
            raise NoLiquidity(f"Pair {pair} has no liquidity: {reserves}")

        price = divide(anchor_reserve, other_reserve, self.precision)
        if anchor == 0:
            return ONE_USD, price
        return price, ONE_USD

    def propagate_usd_prices(
        self,
        pairs_and_reserves: Iterable[Tuple[Pair, Reserves]],
        known_prices: Optional[Dict[NonChecksummedAddress, USDollarAmount]] = None,
    ) -> Dict[NonChecksummedAddress, USDollarAmount]:
        """Price tokens through chains of pairs.

        Anchor tokens are priced at 1 USD. Then any pair where one side has a price
        gives a price to the other side: `known price * pool ratio`.
        Repeat until no new prices are found.

        The first price found for a token wins. Pairs are visited in the given order.
        Pairs without liquidity are skipped.

        :param pairs_and_reserves:
            Pairs with tokens linked, and their current reserves

        :param known_prices:
            Prices from other sources, by token address.
            These are never overwritten.

        :return:
            USD price by token address. Tokens that could not be reached are missing.
        """
        entries = list(pairs_and_reserves)
        prices: Dict[NonChecksummedAddress, USDollarAmount] = dict(known_prices or {})

        for pair, reserves in entries:
            for token in pair.get_tokens():
                if self.is_anchor(token.symbol):
                    prices.setdefault(token.address, ONE_USD)

        pending = [(pair, reserves) for pair, reserves in entries if reserves.has_liquidity()]
        for pair, reserves in entries:
            if not reserves.has_liquidity():
                logger.debug("Skipping price propagation through %s, no liquidity", pair)

        found = True
        while found:
            found = False
            unresolved = []
            for pair, reserves in pending:
                token0, token1 = pair.get_tokens()
                price0 = prices.get(token0.address)
                price1 = prices.get(token1.address)

                if price0 is not None and price1 is not None:
                    continue

                if price0 is None and price1 is None:
                    unresolved.append((pair, reserves))
                    continue

                spot = self.get_spot_prices(reserves)
                with localcontext(exact_context()):
                    if price0 is None:
                        prices[token0.address] = price1 * spot.token0_in_token1
                    else:
                        prices[token1.address] = price0 * spot.token1_in_token0
                found = True

            pending = unresolved

        for pair, _ in pending:
            logger.debug("Could not reach any priced token from %s", pair)

        return prices
