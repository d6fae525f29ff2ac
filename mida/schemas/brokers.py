"""
Broker schemas for Mida.

Plain data models exchanged through the broker contracts in
mida.services.brokers. Prices, lots and balances are native floats at this
boundary; converting them to MidaDecimal is up to the integrating
application. Derived values that must be exact (spread) are computed
through the decimal core.

**Naming Convention**:
- Mida prefix on every public model, matching the contracts
- Enum values are lowercase strings

**Design Notes**:
- All models are frozen: a changed order is a new MidaBrokerOrder
- The account parameters reference the broker instance, so they allow
  arbitrary types
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mida.utils.decimals import decimal


# =============================================================================
# ENUMS
# =============================================================================

class MidaBrokerAccountType(str, Enum):
    """Account type."""
    DEMO = "demo"
    REAL = "real"


class MidaSymbolType(str, Enum):
    """Symbol asset class."""
    FOREX = "forex"
    CRYPTO = "crypto"
    STOCK = "stock"
    INDEX = "index"
    COMMODITY = "commodity"
    ETF = "etf"


class MidaSymbolQuotationPriceType(str, Enum):
    """Side of the quotation a period is built from."""
    BID = "bid"
    ASK = "ask"


class MidaBrokerOrderType(str, Enum):
    """Order direction."""
    BUY = "buy"
    SELL = "sell"


class MidaBrokerOrderStatus(str, Enum):
    """Order lifecycle state."""
    REQUESTED = "requested"
    REJECTED = "rejected"
    PENDING = "pending"
    CANCELLED = "cancelled"
    OPEN = "open"
    CLOSED = "closed"
    EXPIRED = "expired"


# =============================================================================
# ACCOUNT
# =============================================================================

class MidaBrokerAccountParameters(BaseModel):
    """Constructor parameters of MidaBrokerAccount."""
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    id: str = Field(..., min_length=1, description="Account id")
    owner_name: str = Field(..., description="Account owner full name")
    type: MidaBrokerAccountType = Field(..., description="Demo or real account")
    broker: Any = Field(..., description="MidaBroker the account belongs to")


# =============================================================================
# SYMBOLS
# =============================================================================

class MidaSymbol(BaseModel):
    """
    Tradable symbol as described by the broker.

    Example:
        MidaSymbol(symbol="EURUSD", type=MidaSymbolType.FOREX, description="Euro vs US Dollar",
                   digits=5, lot_units=100000, min_lots=0.01, max_lots=100, leverage=30)
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str = Field(..., min_length=1, description="Symbol string, e.g. 'EURUSD'")
    type: MidaSymbolType = Field(..., description="Asset class")
    description: str = Field(default="", description="Human-readable description")
    digits: int = Field(..., ge=0, description="Number of price digits quoted by the broker")
    lot_units: float = Field(..., gt=0, description="Units of the base asset in one lot")
    min_lots: float = Field(..., gt=0, description="Minimum order size in lots")
    max_lots: float = Field(..., gt=0, description="Maximum order size in lots")
    leverage: float = Field(default=1, gt=0, description="Maximum leverage")

    @model_validator(mode='after')
    def validate_lots_range(self) -> 'MidaSymbol':
        """Ensure min_lots <= max_lots."""
        if self.min_lots > self.max_lots:
            raise ValueError(f"min_lots ({self.min_lots}) must be <= max_lots ({self.max_lots})")
        return self


class MidaSymbolTick(BaseModel):
    """Last quotation of a symbol."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str = Field(..., min_length=1, description="Symbol string")
    date: datetime = Field(..., description="Quotation time")
    bid: float = Field(..., gt=0, description="Bid price")
    ask: float = Field(..., gt=0, description="Ask price")

    @model_validator(mode='after')
    def validate_ask_above_bid(self) -> 'MidaSymbolTick':
        """A crossed quote is rejected."""
        if self.ask < self.bid:
            raise ValueError(f"ask ({self.ask}) must be >= bid ({self.bid})")
        return self

    @property
    def spread(self) -> float:
        """ask - bid, computed exactly (1.1027 - 1.1025 is 0.0002, not 0.00019999...)."""
        return decimal(self.ask).subtract(self.bid).to_number()


class MidaSymbolPeriod(BaseModel):
    """OHLC candle of a symbol."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str = Field(..., min_length=1, description="Symbol string")
    start_date: datetime = Field(..., description="Period open time")
    timeframe: int = Field(..., gt=0, description="Period length in seconds")
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(default=0, ge=0)
    price_type: MidaSymbolQuotationPriceType = Field(default=MidaSymbolQuotationPriceType.BID)

    @model_validator(mode='after')
    def validate_ohlc(self) -> 'MidaSymbolPeriod':
        """Ensure low <= open, close <= high."""
        if not (self.low <= min(self.open, self.close) and max(self.open, self.close) <= self.high):
            raise ValueError(
                f"Inconsistent OHLC: open={self.open} high={self.high} low={self.low} close={self.close}"
                )
        return self


# =============================================================================
# ORDERS
# =============================================================================

class MidaBrokerOrderDirectives(BaseModel):
    """
    What to place: a market order when neither limit nor stop is set.

    Example:
        MidaBrokerOrderDirectives(symbol="EURUSD", type=MidaBrokerOrderType.BUY, lots=0.1, stop_loss=1.09)
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str = Field(..., min_length=1, description="Symbol string")
    type: MidaBrokerOrderType = Field(..., description="Buy or sell")
    lots: float = Field(..., gt=0, description="Order size in lots")
    stop_loss: Optional[float] = Field(default=None, gt=0)
    take_profit: Optional[float] = Field(default=None, gt=0)
    limit: Optional[float] = Field(default=None, gt=0, description="Limit execution price")
    stop: Optional[float] = Field(default=None, gt=0, description="Stop execution price")

    @model_validator(mode='after')
    def validate_execution(self) -> 'MidaBrokerOrderDirectives':
        """limit and stop are mutually exclusive."""
        if self.limit is not None and self.stop is not None:
            raise ValueError("An order cannot have both limit and stop prices")
        return self

    @property
    def is_market(self) -> bool:
        return self.limit is None and self.stop is None


class MidaBrokerOrder(BaseModel):
    """Order as tracked by the broker."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    ticket: int = Field(..., ge=0, description="Broker order ticket")
    directives: MidaBrokerOrderDirectives
    status: MidaBrokerOrderStatus
    request_date: datetime
    open_date: Optional[datetime] = None
    close_date: Optional[datetime] = None
    open_price: Optional[float] = Field(default=None, gt=0)
    close_price: Optional[float] = Field(default=None, gt=0)
