"""Result models for the technical-analysis engine."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BollingerBands(BaseModel):
    """Latest Bollinger Bands over a trailing window.

    ``percent_b`` is ``None`` when the band width is zero and ``bandwidth`` is
    ``None`` when the window mean is zero.
    """

    model_config = {"populate_by_name": True}

    mean: float
    upper: float
    lower: float
    last: float
    percent_b: float | None = Field(default=None, alias="percentB")
    bandwidth: float | None = None
