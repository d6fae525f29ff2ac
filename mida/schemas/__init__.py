"""
Pydantic schemas for Mida.

**Organization by Domain**:
- events.py: MidaEvent delivered by MidaEmitter
- brokers.py: Account, symbol, tick, period and order models

**Design Notes**:
- All models use Pydantic v2 and are frozen
- Monetary fields are plain floats, see mida.utils.decimals for exact math
"""
from mida.schemas.brokers import (
    MidaBrokerAccountParameters,
    MidaBrokerAccountType,
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
from mida.schemas.events import MidaEvent

__all__ = [
    "MidaEvent",
    # Enums
    "MidaBrokerAccountType",
    "MidaBrokerOrderStatus",
    "MidaBrokerOrderType",
    "MidaSymbolQuotationPriceType",
    "MidaSymbolType",
    # Models
    "MidaBrokerAccountParameters",
    "MidaBrokerOrder",
    "MidaBrokerOrderDirectives",
    "MidaSymbol",
    "MidaSymbolPeriod",
    "MidaSymbolTick",
    ]
