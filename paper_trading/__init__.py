"""
Paper trading portfolio engine.

Simulates leveraged long/short positions against a virtual balance.
"""

__version__ = "1.0.0"
