"""
Unit tests for the futures normalizers: long/short, open interest, funding and
liquidations.
"""
import pytest

from market_pulse.indicators import normalize
from market_pulse.indicators.funding import funding_sentiment, funding_signal, normalize_funding
from market_pulse.indicators.liquidations import liquidation_intensity, liquidation_signal, normalize_liquidations
from market_pulse.indicators.long_short import long_short_signal, normalize_long_short
from market_pulse.indicators.open_interest import normalize_open_interest, open_interest_signal, open_interest_trend

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS


@pytest.mark.unit
class TestLongShort:
    """Test the long/short positioning normalizer."""

    def test_normalize(self, long_short_payload):
        record = normalize_long_short(long_short_payload)

        assert record.top_long == 42.0
        assert record.top_short == 58.0
        assert record.top_ratio == 0.72
        assert record.trend == "more_short"
        assert record.accounts_long == 48.0
        assert record.accounts_short == 52.0
        assert record.taker_buy_sell_ratio == 1.08
        assert record.signal == "squeeze_possible"

    def test_optional_endpoints_missing(self, long_short_payload):
        long_short_payload["accounts"] = None
        long_short_payload["taker"] = None

        record = normalize_long_short(long_short_payload)

        assert record.taker_buy_sell_ratio is None
        assert record.to_dict()["accounts"] is None

    @pytest.mark.parametrize("long_pct,short_pct,expected", [
        (40.0, 60.0, "squeeze_possible"),
        (60.0, 40.0, "dump_possible"),
        (55.0, 45.0, "neutral"),
        (45.0, 55.0, "neutral"),
    ])
    def test_signal_thresholds(self, long_pct, short_pct, expected):
        assert long_short_signal(long_pct, short_pct) == expected

    def test_missing_top_traders_is_malformed(self):
        assert normalize("longShort", {"topTraders": {"code": -1121, "msg": "Invalid symbol."}}) is None


@pytest.mark.unit
class TestOpenInterest:
    """Test the open interest normalizer."""

    def test_normalize(self, open_interest_payload):
        record = normalize_open_interest(open_interest_payload)

        assert record.btc == 80000
        assert record.usd_billions == 5.2
        assert record.change24h == 6.7
        assert record.trend == "increasing"
        assert record.signal == "high_leverage"

    def test_without_history(self, open_interest_payload):
        open_interest_payload["history"] = None

        record = normalize_open_interest(open_interest_payload)

        assert record.change24h == 0.0
        assert record.trend == "stable"
        assert record.signal == "normal"

    @pytest.mark.parametrize("change,trend,signal", [
        (2.5, "increasing", "normal"),
        (-2.5, "decreasing", "normal"),
        (2.0, "stable", "normal"),
        (-6.0, "decreasing", "deleveraging"),
    ])
    def test_thresholds(self, change, trend, signal):
        assert open_interest_trend(change) == trend
        assert open_interest_signal(change) == signal


@pytest.mark.unit
class TestFunding:
    """Test the funding rate normalizer."""

    def test_normalize(self, funding_payload):
        record = normalize_funding(funding_payload)

        assert record.current == 0.02
        assert record.avg24h == 0.02
        assert record.eth == 0.005
        assert record.sentiment == "neutral"
        assert record.signal == "normal"
        assert record.to_dict()["btc"] == {"current": 0.02, "avg24h": 0.02}

    def test_latest_rate_by_funding_time(self, funding_payload):
        funding_payload["btc"].reverse()

        assert normalize_funding(funding_payload).current == 0.02

    @pytest.mark.parametrize("rate,sentiment,signal", [
        (0.06, "overleveraged_long", "normal"),
        (0.15, "overleveraged_long", "correction_likely"),
        (-0.06, "overleveraged_short", "normal"),
        (-0.12, "overleveraged_short", "bounce_likely"),
        (0.01, "neutral", "normal"),
    ])
    def test_thresholds(self, rate, sentiment, signal):
        assert funding_sentiment(rate) == sentiment
        assert funding_signal(rate) == signal

    def test_empty_history_is_malformed(self):
        assert normalize("funding", {"btc": [], "eth": None}) is None


@pytest.mark.unit
class TestLiquidations:
    """Test the forced liquidation normalizer."""

    def test_normalize(self, liquidation_orders, now_ms):
        record = normalize_liquidations(liquidation_orders, now_ms=now_ms)

        assert record.h24.to_dict() == {"total": 3.5, "longs": 2.0, "shorts": 1.5}
        assert record.h1.to_dict() == {"total": 1.0, "longs": 1.0, "shorts": 0.0}
        assert record.dominant == "longs"
        assert record.intensity == "low"
        assert record.signal == "balanced"

    def test_windowing(self, now_ms):
        def order(age_ms):
            return {"side": "SELL", "price": "1000000", "origQty": "1", "time": now_ms - age_ms}

        record = normalize_liquidations(
            [order(30 * MINUTE_MS), order(2 * HOUR_MS), order(25 * HOUR_MS)],
            now_ms=now_ms,
        )

        assert record.h1.longs == 1_000_000
        assert record.h24.longs == 2_000_000

    def test_recent_order_counts_in_both_windows(self, now_ms):
        orders = [{"side": "BUY", "price": "100", "origQty": "10", "time": now_ms - 30 * MINUTE_MS}]

        record = normalize_liquidations(orders, now_ms=now_ms)

        assert record.h1.shorts == 1000
        assert record.h24.shorts == 1000

    def test_old_order_counts_in_neither_window(self, now_ms):
        orders = [{"side": "BUY", "price": "100", "origQty": "10", "time": now_ms - 25 * HOUR_MS}]

        record = normalize_liquidations(orders, now_ms=now_ms)

        assert record.h1.total == 0
        assert record.h24.total == 0

    @pytest.mark.parametrize("longs,shorts,expected", [
        (30.0, 10.0, "longs_rekt"),
        (10.0, 30.0, "shorts_rekt"),
        (20.0, 10.0, "balanced"),
        (0.0, 0.0, "balanced"),
    ])
    def test_signal(self, longs, shorts, expected):
        assert liquidation_signal(longs, shorts) == expected

    @pytest.mark.parametrize("total,expected", [
        (250, "extreme"), (150, "high"), (75, "moderate"), (50, "low"),
    ])
    def test_intensity(self, total, expected):
        assert liquidation_intensity(total) == expected

    def test_error_payload_is_malformed(self):
        assert normalize("liquidations", {"code": -2015, "msg": "Invalid API-key"}) is None
