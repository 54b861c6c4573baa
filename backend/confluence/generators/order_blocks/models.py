"""Order-block detector configuration and signal models."""

from pydantic import BaseModel, Field

from confluence.models.signal import IndicatorSignal, OrderBlock

ORDER_BLOCKS_GENERATOR_NAME = "order_blocks"


class OrderBlockConfig(BaseModel):
    """Configuration for the order-block detector."""

    atr_period: int = 14
    min_move_multiplier: float = 2.0  # Summed body vs ATR
    min_consecutive_bars: int = 3
    min_volume_ratio: float = 1.2
    volume_avg_period: int = 20
    lookback_period: int = 20  # Bars scanned back for the block candle
    test_threshold: float = 0.002  # 0.2% from the block edge
    max_order_block_age: int = 100


class OrderBlockSignal(IndicatorSignal):
    """Order-block signal with tested and active blocks."""

    indicator: str = ORDER_BLOCKS_GENERATOR_NAME

    tested_bullish: OrderBlock | None = None
    tested_bearish: OrderBlock | None = None
    active_bullish: list[OrderBlock] = Field(default_factory=list)
    active_bearish: list[OrderBlock] = Field(default_factory=list)

    @property
    def active_bullish_count(self) -> int:
        return len(self.active_bullish)

    @property
    def active_bearish_count(self) -> int:
        return len(self.active_bearish)
