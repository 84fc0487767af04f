"""
Signal Aggregator component.

Reduces the set of normalized indicators to a bull score, a bear score, an
ordered list of contributing signals and a market state.
"""
from typing import Any, Callable, Dict, List, Optional

from market_pulse.indicators import COT, ETF, FEAR_GREED, FUNDING, HASHRATE, LIQUIDATIONS, LONG_SHORT

from ..core import AggregateSignal, SignalEntry, SignalType
from .market_state import classify_net_score

RANKING_INSERTION = "insertion"
RANKING_WEIGHT = "weight"

Rule = Callable[[Dict[str, Any]], Optional[SignalEntry]]


def _bullish(weight: int, reason: str) -> SignalEntry:
    return SignalEntry(type=SignalType.BULLISH, weight=weight, reason=reason)


def _bearish(weight: int, reason: str) -> SignalEntry:
    return SignalEntry(type=SignalType.BEARISH, weight=weight, reason=reason)


def fear_greed_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    fear_greed = indicators.get(FEAR_GREED)
    if fear_greed is None:
        return None
    value = fear_greed.current
    if value <= 15:
        return _bullish(3, "Extreme Fear historique - zone d'achat")
    if value <= 25:
        return _bullish(2, "Fear élevée - opportunité possible")
    if value >= 80:
        return _bearish(3, "Extreme Greed - prudence maximale")
    if value >= 65:
        return _bearish(2, "Greed élevée - attention")
    return None


def cot_hedge_funds_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    cot = indicators.get(COT)
    if cot is None:
        return None
    if cot.hedge_funds.short_pct > 60:
        return _bullish(2, "Hedge Funds très short - squeeze possible")
    return None


def cot_institutions_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    cot = indicators.get(COT)
    if cot is None:
        return None
    if cot.institutions.signal == "bullish":
        return _bullish(2, "Institutions accumulent")
    return None


def cot_institutions_selling_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    cot = indicators.get(COT)
    if cot is None:
        return None
    if cot.institutions.signal == "bearish":
        return _bearish(2, "Institutions réduisent leur exposition")
    return None


def etf_daily_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    etf = indicators.get(ETF)
    if etf is None:
        return None
    if etf.daily > 50:
        return _bullish(1, "ETF inflows positifs")
    if etf.daily < -100:
        return _bearish(2, "ETF outflows importants")
    return None


def etf_weekly_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    etf = indicators.get(ETF)
    if etf is None or etf.weekly is None:
        return None
    if etf.weekly > 500:
        return _bullish(1, "ETF inflows soutenus sur la semaine")
    if etf.weekly < -500:
        return _bearish(1, "ETF outflows persistants sur la semaine")
    return None


def long_short_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    long_short = indicators.get(LONG_SHORT)
    if long_short is None:
        return None
    if long_short.signal == "squeeze_possible":
        return _bullish(1, "Retail très short - potentiel squeeze")
    if long_short.signal == "dump_possible":
        return _bearish(1, "Retail très long - risque de dump")
    return None


def funding_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    funding = indicators.get(FUNDING)
    if funding is None:
        return None
    if funding.signal == "bounce_likely":
        return _bullish(1, "Funding négatif - shorts paient")
    if funding.signal == "correction_likely":
        return _bearish(1, "Funding très élevé - surchauffe")
    return None


def liquidations_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    liquidations = indicators.get(LIQUIDATIONS)
    if liquidations is None:
        return None
    if liquidations.signal == "shorts_rekt":
        return _bullish(1, "Shorts liquidés massivement")
    if liquidations.signal == "longs_rekt":
        return _bearish(1, "Longs liquidés - capitulation")
    return None


def hashrate_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    hashrate = indicators.get(HASHRATE)
    if hashrate is None:
        return None
    if hashrate.signal == "bullish":
        return _bullish(1, "Hashrate en hausse - mineurs confiants")
    return None


def hashrate_decline_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    hashrate = indicators.get(HASHRATE)
    if hashrate is None:
        return None
    if hashrate.signal == "bearish":
        return _bearish(1, "Hashrate en baisse - mineurs sous pression")
    return None


def taker_ratio_rule(indicators: Dict[str, Any]) -> Optional[SignalEntry]:
    long_short = indicators.get(LONG_SHORT)
    if long_short is None or long_short.taker_buy_sell_ratio is None:
        return None
    if long_short.taker_buy_sell_ratio > 1.05:
        return _bullish(1, "Acheteurs agressifs dominants (taker ratio)")
    if long_short.taker_buy_sell_ratio < 0.95:
        return _bearish(1, "Vendeurs agressifs dominants (taker ratio)")
    return None


DEFAULT_RULES: List[Rule] = [
    fear_greed_rule,
    cot_hedge_funds_rule,
    cot_institutions_rule,
    etf_daily_rule,
    etf_weekly_rule,
    long_short_rule,
    funding_rule,
    liquidations_rule,
    hashrate_rule,
    taker_ratio_rule,
]

# Bearish counterparts evaluated right after their bullish rule when enabled.
EXTENDED_BEARISH_RULES: Dict[Rule, Rule] = {
    cot_institutions_rule: cot_institutions_selling_rule,
    hashrate_rule: hashrate_decline_rule,
}


def with_extended_bearish_rules(rules: List[Rule]) -> List[Rule]:
    """Insert the bearish counterparts after their bullish rules."""
    extended: List[Rule] = []
    for rule in rules:
        extended.append(rule)
        if rule in EXTENDED_BEARISH_RULES:
            extended.append(EXTENDED_BEARISH_RULES[rule])
    return extended


class SignalAggregator:
    """
    Applies the fixed, ordered list of weighted rules to the indicators.

    Rules are independent: each observes only the indicators, never another
    rule's outcome, and contributes at most one entry.
    """

    def __init__(self, config: Optional[Dict] = None, rules: Optional[List[Rule]] = None):
        """
        Initialize the signal aggregator.

        Args:
            config: Configuration dictionary with ``max_signals`` and ``ranking``
                (``insertion`` keeps rule evaluation order, ``weight`` keeps the
                heaviest signals first, ties in evaluation order) and
                ``extended_bearish_rules`` (adds the institutions selling and
                hashrate decline rules, off by default).
            rules: Ordered rules, defaults to ``DEFAULT_RULES``.
        """
        config = config or {}
        self.max_signals = config.get("max_signals", 5)
        self.ranking = config.get("ranking", RANKING_INSERTION)
        if self.ranking not in (RANKING_INSERTION, RANKING_WEIGHT):
            raise ValueError(f"Unsupported signal ranking: {self.ranking}")
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)
        if config.get("extended_bearish_rules", False):
            self.rules = with_extended_bearish_rules(self.rules)

    def aggregate(self, indicators: Dict[str, Any]) -> AggregateSignal:
        """
        Score the indicators.

        Args:
            indicators: Mapping of source name to indicator record or None.

        Returns:
            AggregateSignal: Scores, truncated signal list and market state.
        """
        bull_score = 0
        bear_score = 0
        signals: List[SignalEntry] = []

        for rule in self.rules:
            entry = rule(indicators)
            if entry is None:
                continue
            signals.append(entry)
            if entry.type == SignalType.BULLISH:
                bull_score += entry.weight
            else:
                bear_score += entry.weight

        return AggregateSignal(
            state=classify_net_score(bull_score - bear_score),
            bull_score=bull_score,
            bear_score=bear_score,
            signals=self._rank(signals)[:self.max_signals],
        )

    def _rank(self, signals: List[SignalEntry]) -> List[SignalEntry]:
        if self.ranking == RANKING_WEIGHT:
            return sorted(signals, key=lambda entry: entry.weight, reverse=True)
        return signals
