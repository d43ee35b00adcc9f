"""Technical-analysis engine."""

from elfa_mcp.ta.indicators import bollinger, normalize, rsi
from elfa_mcp.ta.models import BollingerBands

__all__ = [
    "BollingerBands",
    "bollinger",
    "normalize",
    "rsi",
]
