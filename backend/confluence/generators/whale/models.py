"""Whale (volume anomaly) detector configuration and signal models."""

from enum import Enum

from pydantic import BaseModel

from confluence.models.signal import IndicatorSignal

WHALE_GENERATOR_NAME = "whale"


class WhaleType(str, Enum):
    ACCUMULATION = "ACCUMULATION"  # Buying pressure
    DISTRIBUTION = "DISTRIBUTION"  # Selling pressure


class WhaleConfig(BaseModel):
    """Configuration for the whale detector."""

    volume_period: int = 20
    volume_multiplier: float = 2.5
    min_volume_ratio: float = 1.5
    vwap_period: int = 14
    min_price_change: float = 0.5  # Percent
    min_body_strength: float = 0.6  # Body / range


class WhaleSignal(IndicatorSignal):
    """Whale detector signal with the volume and price-action readings."""

    indicator: str = WHALE_GENERATOR_NAME

    whale_detected: bool = False
    whale_type: WhaleType | None = None
    volume_ratio: float | None = None  # Volume / average, set on anomaly
    price_change: float  # Percent vs previous close
    vwap: float
    above_vwap: bool
    body_strength: float
