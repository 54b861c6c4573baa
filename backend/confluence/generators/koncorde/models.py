"""Koncorde volume-index oscillator configuration and signal models."""

from enum import Enum

from pydantic import BaseModel

from confluence.models.signal import IndicatorSignal

KONCORDE_GENERATOR_NAME = "koncorde"


class MfiCondition(str, Enum):
    OVERSOLD = "oversold"
    OVERBOUGHT = "overbought"
    NEUTRAL = "neutral"


class KoncordeConfig(BaseModel):
    """Configuration for the Koncorde generator."""

    pvi_period: int = 255
    nvi_period: int = 255
    mfi_period: int = 14
    mfi_overbought: float = 80.0
    mfi_oversold: float = 20.0
    bb_period: int = 20
    bb_std_dev: float = 2.0


class KoncordeSignal(IndicatorSignal):
    """Koncorde signal with volume-index and oscillator readings."""

    indicator: str = KONCORDE_GENERATOR_NAME

    pvi: float
    nvi: float
    mfi: float
    bb_oscillator: float
    strength: float
    pvi_above_nvi: bool
    mfi_condition: MfiCondition
