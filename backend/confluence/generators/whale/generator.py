"""Whale detector: volume spikes backed by decisive price action.

Signal Logic:
- BUY (accumulation): volume anomaly AND |change| >= min_price_change
  AND strong bullish body AND close above VWAP
- SELL (distribution): the mirror image, close below VWAP

An anomaly is volume above ``avg + volume_multiplier * std`` and above
``avg * min_volume_ratio``, with both statistics over a window that
includes the current bar.
"""

import logging
from typing import Sequence

from confluence.generators.registry import register_generator
from confluence.generators.whale.models import (
    WHALE_GENERATOR_NAME,
    WhaleConfig,
    WhaleSignal,
    WhaleType,
)
from confluence.indicators import sma, stddev, vwap
from confluence.models import Candle, Signal

logger = logging.getLogger(__name__)


def body_strength(candle: Candle) -> float:
    """Body size as a fraction of the full range (0 for a flat bar)."""
    if candle.range_size <= 0:
        return 0.0
    return candle.body_size / candle.range_size


@register_generator(WHALE_GENERATOR_NAME)
class WhaleGenerator:
    """Volume anomaly (whale activity) generator."""

    def __init__(self, config: WhaleConfig | None = None):
        self.config = config or WhaleConfig()

    @property
    def name(self) -> str:
        return WHALE_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        return max(self.config.volume_period, self.config.vwap_period) + 5

    def volume_ratio(self, volumes: Sequence[float]) -> float | None:
        """Volume / average at the latest bar when it is an anomaly, else None."""
        cfg = self.config
        avg = sma(volumes, cfg.volume_period)[-1]
        std = stddev(volumes, cfg.volume_period)[-1]
        if avg is None or std is None or avg <= 0:
            return None

        current = volumes[-1]
        if current > avg + cfg.volume_multiplier * std and current > avg * cfg.min_volume_ratio:
            return current / avg
        return None

    def evaluate(self, candles: Sequence[Candle]) -> WhaleSignal | None:
        if len(candles) < self.min_candles:
            return None

        cfg = self.config
        volumes = [c.volume for c in candles]
        current_vwap = vwap(
            [c.high for c in candles],
            [c.low for c in candles],
            [c.close for c in candles],
            volumes,
            cfg.vwap_period,
        )[-1]
        prev_close = candles[-2].close
        if current_vwap is None or prev_close == 0:
            return None

        candle = candles[-1]
        ratio = self.volume_ratio(volumes)
        price_change = (candle.close - prev_close) / prev_close * 100
        strength = body_strength(candle)

        signal = Signal.NONE
        whale_type = None
        if (
            ratio is not None
            and abs(price_change) >= cfg.min_price_change
            and strength >= cfg.min_body_strength
        ):
            if candle.is_bullish and price_change > 0 and candle.close > current_vwap:
                signal, whale_type = Signal.BUY, WhaleType.ACCUMULATION
            elif candle.is_bearish and price_change < 0 and candle.close < current_vwap:
                signal, whale_type = Signal.SELL, WhaleType.DISTRIBUTION

        if whale_type is not None:
            logger.debug(
                f"Whale {whale_type.value}: volume x{ratio:.2f} change={price_change:.2f}%"
            )

        return WhaleSignal(
            signal=signal,
            timestamp=candle.timestamp,
            whale_detected=ratio is not None,
            whale_type=whale_type,
            volume_ratio=ratio,
            price_change=price_change,
            vwap=current_vwap,
            above_vwap=candle.close > current_vwap,
            body_strength=strength,
        )
