"""
x402 Server SDK
"""

from x402_osmosis.server.x402_server import TimedResult, X402Server

__all__ = ["X402Server", "TimedResult"]
