"""
Broker contracts.

This module provides:
- MidaBroker: Abstract base class for a trading venue (login entry point)
- MidaBrokerAccount: Abstract base class for an account opened on a broker

**Architecture:**
- A concrete integration subclasses both classes and implements every
  abstract coroutine against the venue's API
- Monetary values cross this boundary as plain floats
- Derived values (used margin, margin level) are computed here through
  the decimal core, so integrations only report raw figures
- Each account owns a MidaEmitter; integrations publish events with
  notify_listeners() and users subscribe with on()

Example:
    class PaperBroker(MidaBroker):
        def __init__(self):
            super().__init__("Paper")

        async def login(self, credentials):
            return PaperAccount(MidaBrokerAccountParameters(
                id=credentials["id"], owner_name="Jane Doe",
                type=MidaBrokerAccountType.DEMO, broker=self))
"""
from __future__ import annotations

import asyncio
import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from mida.logging_config import get_logger
from mida.schemas.brokers import (
    MidaBrokerAccountParameters,
    MidaBrokerAccountType,
    MidaBrokerOrder,
    MidaBrokerOrderDirectives,
    MidaSymbol,
    MidaSymbolPeriod,
    MidaSymbolQuotationPriceType,
    MidaSymbolTick,
    MidaSymbolType,
    )
from mida.utils.decimals import decimal
from mida.utils.emitter import MidaEmitter, MidaEventListener

logger = get_logger(__name__)


# =============================================================================
# BROKER
# =============================================================================

class MidaBroker(ABC):
    """Represents a broker."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        """The broker name."""
        return self._name

    @abstractmethod
    async def login(self, credentials: Dict[str, Any]) -> MidaBrokerAccount:
        """
        Log into an account.

        Args:
            credentials: Broker specific credentials (login, password, token, ...)

        Returns:
            The logged account
        """
        pass


# =============================================================================
# BROKER ACCOUNT
# =============================================================================

class MidaBrokerAccount(ABC):
    """
    Represents a broker account.

    **Integration Responsibilities:**
    - Implement every abstract coroutine
    - Publish venue events through notify_listeners()

    **Provided here:**
    - Account identity (id, owner_name, type, broker)
    - get_used_margin(), get_margin_level(), get_symbols_by_type()
    - Event subscription via on()
    """

    def __init__(self, parameters: MidaBrokerAccountParameters):
        self._id = parameters.id
        self._owner_name = parameters.owner_name
        self._type = parameters.type
        self._broker = parameters.broker
        self._emitter = MidaEmitter()

    @property
    def id(self) -> str:
        """The account id."""
        return self._id

    @property
    def owner_name(self) -> str:
        """The account owner full name."""
        return self._owner_name

    @property
    def type(self) -> MidaBrokerAccountType:
        """The account type (demo or real)."""
        return self._type

    @property
    def broker(self) -> MidaBroker:
        """The account broker."""
        return self._broker

    # -------------------------------------------------------------------------
    # Account figures
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_ping(self) -> float:
        """Round trip time to the broker, in milliseconds."""
        pass

    @abstractmethod
    async def get_balance(self) -> float:
        pass

    @abstractmethod
    async def get_equity(self) -> float:
        pass

    @abstractmethod
    async def get_margin(self) -> float:
        pass

    @abstractmethod
    async def get_free_margin(self) -> float:
        pass

    @abstractmethod
    async def get_currency(self) -> str:
        """The account currency ISO code."""
        pass

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_orders(
            self,
            from_date: Optional[datetime] = None,
            to_date: Optional[datetime] = None,
            ) -> List[MidaBrokerOrder]:
        """
        Get the account orders.

        Args:
            from_date: Time range start
            to_date: Time range end

        Returns:
            The orders. Without a time range the broker may return only the
            most recent orders (with a limit chosen by the broker).
        """
        pass

    @abstractmethod
    async def get_order(self, ticket: int) -> Optional[MidaBrokerOrder]:
        """Get an order by ticket, None if unknown."""
        pass

    @abstractmethod
    async def get_order_net_profit(self, ticket: int) -> float:
        """Net profit of an open or closed order."""
        pass

    @abstractmethod
    async def get_order_gross_profit(self, ticket: int) -> float:
        """Gross profit of an open or closed order."""
        pass

    @abstractmethod
    async def get_order_swaps(self, ticket: int) -> float:
        """Swaps of an open or closed order."""
        pass

    @abstractmethod
    async def get_order_commission(self, ticket: int) -> float:
        """Commission of an open or closed order."""
        pass

    @abstractmethod
    async def place_order(self, directives: MidaBrokerOrderDirectives) -> MidaBrokerOrder:
        """
        Place an order.

        Returns:
            The placed order. Market orders resolve once open (open state),
            limit and stop orders once created (pending state).
        """
        pass

    @abstractmethod
    async def cancel_order(self, ticket: int) -> None:
        """Cancel a pending order."""
        pass

    @abstractmethod
    async def close_order(self, ticket: int) -> None:
        """Close an open order."""
        pass

    @abstractmethod
    async def set_order_stop_loss(self, ticket: int, stop_loss: float) -> None:
        pass

    @abstractmethod
    async def set_order_take_profit(self, ticket: int, take_profit: float) -> None:
        pass

    # -------------------------------------------------------------------------
    # Symbols
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_symbols(self) -> List[MidaSymbol]:
        """Symbols operable by the account."""
        pass

    @abstractmethod
    async def get_symbol(self, symbol: str) -> Optional[MidaSymbol]:
        pass

    @abstractmethod
    async def is_symbol_market_open(self, symbol: str) -> bool:
        pass

    @abstractmethod
    async def get_symbol_periods(
            self,
            symbol: str,
            timeframe: int,
            price_type: MidaSymbolQuotationPriceType = MidaSymbolQuotationPriceType.BID,
            ) -> List[MidaSymbolPeriod]:
        """
        Most recent periods of a symbol.

        Args:
            symbol: Symbol string
            timeframe: Period length in seconds
            price_type: Quotation side the periods are built from

        Returns:
            The periods, how many is decided by the broker
        """
        pass

    @abstractmethod
    async def get_symbol_last_tick(self, symbol: str) -> MidaSymbolTick:
        pass

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    async def _used_margin(self):
        return decimal(await self.get_margin()).subtract(await self.get_free_margin())

    async def get_used_margin(self) -> float:
        """Margin minus free margin."""
        return (await self._used_margin()).to_number()

    async def get_margin_level(self) -> float:
        """
        Equity / used margin * 100.

        Returns:
            The margin level in percent, or nan if no margin is used
        """
        used_margin = await self._used_margin()

        if used_margin.equals(0):
            return math.nan

        return decimal(await self.get_equity()).divide(used_margin).multiply(100).to_number()

    async def get_symbols_by_type(self, type: MidaSymbolType) -> List[MidaSymbol]:
        return [symbol for symbol in await self.get_symbols() if symbol.type == type]

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on(self, type: str, listener: Optional[MidaEventListener] = None) -> Union[str, asyncio.Future]:
        """
        Subscribe to account events (see MidaEmitter.on).

        Returns:
            The listener uuid, or a Future resolved with the next event
            when no listener is given
        """
        return self._emitter.on(type, listener)

    def remove_event_listener(self, listener_uuid: str) -> bool:
        return self._emitter.remove_event_listener(listener_uuid)

    def notify_listeners(self, type: str, descriptor: Optional[Dict[str, Any]] = None) -> None:
        """Publish an event to the account listeners. Meant for integrations."""
        logger.debug("Notifying account listeners", account_id=self._id, event_type=type)
        self._emitter.notify_listeners(type, descriptor)
