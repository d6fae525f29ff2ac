"""
Tests for broker schemas.

Tests cover:
- Enum values
- Tick validation and exact spread
- Period OHLC validation
- Order directives validation
- Immutability
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from mida.schemas.brokers import (
    MidaBrokerOrder,
    MidaBrokerOrderDirectives,
    MidaBrokerOrderStatus,
    MidaBrokerOrderType,
    MidaSymbol,
    MidaSymbolPeriod,
    MidaSymbolQuotationPriceType,
    MidaSymbolTick,
    MidaSymbolType,
    )

NOW = datetime(2025, 11, 28, 9, 30, tzinfo=timezone.utc)


class TestEnums:
    """Test enum string values."""

    def test_lookup_by_value(self):
        """Enums are built from lowercase strings."""
        assert MidaSymbolType("forex") is MidaSymbolType.FOREX
        assert MidaBrokerOrderStatus("pending") is MidaBrokerOrderStatus.PENDING
        assert MidaBrokerOrderType.BUY == "buy"


class TestSymbol:
    """Test MidaSymbol."""

    def test_valid_symbol(self):
        """A forex symbol with defaults."""
        symbol = MidaSymbol(symbol="EURUSD", type="forex", digits=5, lot_units=100000, min_lots=0.01, max_lots=100)
        assert symbol.type is MidaSymbolType.FOREX
        assert symbol.leverage == 1
        assert symbol.description == ""

    def test_lots_range(self):
        """min_lots cannot exceed max_lots."""
        with pytest.raises(ValidationError, match="min_lots"):
            MidaSymbol(symbol="EURUSD", type="forex", digits=5, lot_units=100000, min_lots=10, max_lots=1)

    def test_extra_fields_forbidden(self):
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            MidaSymbol(symbol="EURUSD", type="forex", digits=5, lot_units=1, min_lots=1, max_lots=1, pip=4)


class TestTick:
    """Test MidaSymbolTick."""

    def test_spread_is_exact(self):
        """ask - bid without binary floating point error."""
        tick = MidaSymbolTick(symbol="EURUSD", date=NOW, bid=1.1025, ask=1.1027)
        assert tick.spread == 0.0002

    def test_zero_spread(self):
        """bid == ask is allowed."""
        tick = MidaSymbolTick(symbol="BTCUSD", date=NOW, bid=42000.5, ask=42000.5)
        assert tick.spread == 0

    def test_crossed_quote(self):
        """ask below bid is rejected."""
        with pytest.raises(ValidationError, match="ask"):
            MidaSymbolTick(symbol="EURUSD", date=NOW, bid=1.1027, ask=1.1025)

    def test_non_positive_price(self):
        """Prices must be positive."""
        with pytest.raises(ValidationError):
            MidaSymbolTick(symbol="EURUSD", date=NOW, bid=0, ask=1.1)

    def test_frozen(self):
        """Ticks are immutable."""
        tick = MidaSymbolTick(symbol="EURUSD", date=NOW, bid=1.1025, ask=1.1027)
        with pytest.raises(ValidationError):
            tick.bid = 1.2


class TestPeriod:
    """Test MidaSymbolPeriod."""

    def test_valid_period(self):
        """Price type defaults to bid."""
        period = MidaSymbolPeriod(
            symbol="EURUSD", start_date=NOW, timeframe=60,
            open=1.10, high=1.12, low=1.09, close=1.11, volume=1500,
            )
        assert period.price_type is MidaSymbolQuotationPriceType.BID

    @pytest.mark.parametrize("ohlc", [
        (1.10, 1.09, 1.08, 1.10),  # high below open
        (1.10, 1.12, 1.11, 1.11),  # low above open
        (1.10, 1.12, 1.09, 1.13),  # close above high
        ])
    def test_inconsistent_ohlc(self, ohlc):
        """low <= open, close <= high."""
        open_, high, low, close = ohlc
        with pytest.raises(ValidationError, match="Inconsistent OHLC"):
            MidaSymbolPeriod(symbol="EURUSD", start_date=NOW, timeframe=60, open=open_, high=high, low=low, close=close)

    def test_timeframe_positive(self):
        """Timeframe is a positive number of seconds."""
        with pytest.raises(ValidationError):
            MidaSymbolPeriod(symbol="EURUSD", start_date=NOW, timeframe=0, open=1, high=1, low=1, close=1)


class TestOrders:
    """Test order directives and orders."""

    def test_market_order(self):
        """Without limit or stop the order is a market order."""
        directives = MidaBrokerOrderDirectives(symbol="EURUSD", type="buy", lots=0.1, stop_loss=1.09)
        assert directives.is_market
        assert directives.type is MidaBrokerOrderType.BUY

    def test_limit_order(self):
        """A limit price makes a pending order."""
        directives = MidaBrokerOrderDirectives(symbol="EURUSD", type="sell", lots=1, limit=1.12)
        assert not directives.is_market

    def test_limit_and_stop_exclusive(self):
        """limit and stop cannot be combined."""
        with pytest.raises(ValidationError, match="both limit and stop"):
            MidaBrokerOrderDirectives(symbol="EURUSD", type="buy", lots=1, limit=1.1, stop=1.2)

    def test_lots_positive(self):
        """Lots must be positive."""
        with pytest.raises(ValidationError):
            MidaBrokerOrderDirectives(symbol="EURUSD", type="buy", lots=0)

    def test_order(self):
        """Orders wrap their directives."""
        directives = MidaBrokerOrderDirectives(symbol="EURUSD", type="buy", lots=0.1)
        order = MidaBrokerOrder(ticket=7, directives=directives, status="open", request_date=NOW, open_price=1.1027)
        assert order.status is MidaBrokerOrderStatus.OPEN
        assert order.close_date is None
        assert order.directives.symbol == "EURUSD"
