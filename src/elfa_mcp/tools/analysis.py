"""Technical-analysis tools over caller-supplied prices."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from elfa_mcp.protocols.mcp.models import ToolResult
from elfa_mcp.ta.indicators import bollinger, rsi
from elfa_mcp.tools.base import Tool, ToolArguments, ToolContext

DEFAULT_RSI_PERIOD = 14
DEFAULT_BB_PERIOD = 20
DEFAULT_BB_MULT = 2.0


def _values_field() -> Any:
    return Field(
        min_length=1,
        description="Close prices, oldest to newest; non-numeric entries are dropped",
        json_schema_extra={"items": {"type": "number"}},
    )


_BAND_KEYS = ("mean", "upper", "lower", "last", "percentB", "bandwidth")


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _bands_payload(values: list[Any], period: int, mult: float) -> dict[str, Any] | None:
    bands = bollinger(values, period, mult)
    return bands.model_dump(by_alias=True) if bands is not None else None


class RsiArguments(ToolArguments):
    values: list[Any] = _values_field()
    period: int | None = Field(default=None, ge=1, description="RSI period (default 14)")


class RsiTool(Tool):
    name = "ta_rsi"
    title = "TA: RSI"
    description = (
        "Compute RSI (Wilder). Inputs: values:number[] (oldest→newest), period?:number(14). Returns latest RSI."
    )
    Arguments = RsiArguments

    async def run(self, args: RsiArguments, context: ToolContext) -> ToolResult:
        period = _or_default(args.period, DEFAULT_RSI_PERIOD)
        return ToolResult.from_payload({"ok": True, "rsi": rsi(args.values, period), "period": period})


class BollingerArguments(ToolArguments):
    values: list[Any] = _values_field()
    period: int | None = Field(default=None, ge=1, description="Window length (default 20)")
    mult: float | None = Field(default=None, ge=0, allow_inf_nan=False, description="Std-dev multiplier (default 2)")


class BollingerTool(Tool):
    name = "ta_bollinger"
    title = "TA: Bollinger Bands"
    description = (
        "Compute Bollinger Bands (SMA + population stdev). "
        "Inputs: values:number[] (oldest→newest), period?:number(20), mult?:number(2)."
    )
    Arguments = BollingerArguments

    async def run(self, args: BollingerArguments, context: ToolContext) -> ToolResult:
        period = _or_default(args.period, DEFAULT_BB_PERIOD)
        mult = _or_default(args.mult, DEFAULT_BB_MULT)
        bands = _bands_payload(args.values, period, mult) or dict.fromkeys(_BAND_KEYS)
        return ToolResult.from_payload({"ok": True, **bands, "period": period, "mult": mult})


class SummaryArguments(ToolArguments):
    values: list[Any] = _values_field()
    rsi_period: int | None = Field(default=None, ge=1, description="RSI period (default 14)")
    bb_period: int | None = Field(default=None, ge=1, description="Bollinger window (default 20)")
    bb_mult: float | None = Field(default=None, ge=0, allow_inf_nan=False, description="Bollinger multiplier (default 2)")


class SummaryTool(Tool):
    name = "ta_summary"
    title = "TA: Summary"
    description = (
        "Return both RSI and Bollinger in one call. Inputs: values:number[] (oldest→newest), "
        "rsiPeriod?:number(14), bbPeriod?:number(20), bbMult?:number(2)."
    )
    Arguments = SummaryArguments

    async def run(self, args: SummaryArguments, context: ToolContext) -> ToolResult:
        rsi_period = _or_default(args.rsi_period, DEFAULT_RSI_PERIOD)
        bb_period = _or_default(args.bb_period, DEFAULT_BB_PERIOD)
        bb_mult = _or_default(args.bb_mult, DEFAULT_BB_MULT)
        return ToolResult.from_payload({
            "ok": True,
            "rsi": rsi(args.values, rsi_period),
            "bollinger": _bands_payload(args.values, bb_period, bb_mult),
            "rsiPeriod": rsi_period,
            "bbPeriod": bb_period,
            "bbMult": bb_mult,
        })
