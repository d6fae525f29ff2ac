"""
Services package.
Broker contracts implemented by trading-venue integrations.
"""
from mida.services.brokers import MidaBroker, MidaBrokerAccount

__all__ = [
    "MidaBroker",
    "MidaBrokerAccount",
    ]
