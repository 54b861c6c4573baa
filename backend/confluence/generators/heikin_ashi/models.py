"""Heikin-Ashi crossover configuration and signal models."""

from pydantic import BaseModel

from confluence.models.signal import IndicatorSignal

HEIKIN_ASHI_GENERATOR_NAME = "heikin_ashi"


class HeikinAshiConfig(BaseModel):
    """Configuration for the Heikin-Ashi crossover generator."""

    ema_length: int = 55


class HeikinAshiSignal(IndicatorSignal):
    """Heikin-Ashi crossover signal with both oscillator lines."""

    indicator: str = HEIKIN_ASHI_GENERATOR_NAME

    mavi: float  # Blue line, built from HLC3
    kirmizi: float  # Red line, built from Heikin-Ashi close
    long_condition: bool = False
    short_condition: bool = False
