"""WaveTrend oscillator configuration and signal models."""

from enum import Enum

from pydantic import BaseModel

from confluence.models.signal import Bias, IndicatorSignal

WAVETREND_GENERATOR_NAME = "wavetrend"


class WaveTrendCondition(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class WaveTrendConfig(BaseModel):
    """Configuration for the WaveTrend generator."""

    wt_channel_len: int = 10
    wt_average_len: int = 21
    wt_signal_len: int = 4
    rsi_period: int = 14
    mfi_period: int = 14

    # Flag thresholds
    wt_overbought: float = 53.0
    wt_oversold: float = -53.0
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    mfi_overbought: float = 80.0
    mfi_oversold: float = 20.0

    # Diamond thresholds
    diamond_wt_level: float = 40.0
    diamond_rsi_bullish: float = 40.0
    diamond_rsi_bearish: float = 60.0


class WaveTrendSignal(IndicatorSignal):
    """WaveTrend signal with flag/diamond marks at the latest bar."""

    indicator: str = WAVETREND_GENERATOR_NAME

    wt1: float
    wt2: float
    rsi: float
    mfi: float
    flag: Bias | None = None
    diamond: Bias | None = None
    wt_condition: WaveTrendCondition = WaveTrendCondition.NEUTRAL
