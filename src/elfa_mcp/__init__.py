"""JSON-RPC tool server for ELFA market data and technical analysis."""

from __future__ import annotations

__version__ = "1.5.0"
