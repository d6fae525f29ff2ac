"""
Utility modules for Mida.

This package contains:
- decimals: MidaDecimal fixed-point type and the decimal() factory
- emitter: MidaEmitter publish/subscribe helper
"""
