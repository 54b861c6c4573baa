"""Order-block detector.

An order block is the last opposite-coloured candle before a strong
directional move: the last bearish candle before a strong bullish run
(bullish block) or the last bullish candle before a strong bearish run
(bearish block). Blocks must carry above-average volume.

Signal Logic:
- BUY: the latest close tests an active bullish block from above
- SELL: the latest close tests an active bearish block from below
When both sides are tested the more recent block decides.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from confluence.generators.order_blocks.models import (
    ORDER_BLOCKS_GENERATOR_NAME,
    OrderBlockConfig,
    OrderBlockSignal,
)
from confluence.generators.registry import register_generator
from confluence.indicators import Series, atr
from confluence.models import Bias, Candle, OrderBlock, Signal

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StrongMove:
    """Run of same-coloured candles ending at ``index``."""

    index: int
    kind: Bias
    strength: float  # Summed body in ATR multiples


def detect_strong_moves(
    candles: Sequence[Candle],
    atr_values: Series,
    min_consecutive_bars: int = 3,
    min_move_multiplier: float = 2.0,
) -> list[StrongMove]:
    """Bars whose trailing run of same-coloured bodies exceeds the ATR multiple."""
    moves: list[StrongMove] = []

    for i in range(min_consecutive_bars - 1, len(candles)):
        current_atr = atr_values[i]
        if current_atr is None or current_atr <= 0:
            continue

        run = candles[i - min_consecutive_bars + 1 : i + 1]
        total_body = sum(c.body_size for c in run)
        if total_body <= current_atr * min_move_multiplier:
            continue

        if all(c.is_bullish for c in run):
            moves.append(StrongMove(i, Bias.BULLISH, total_body / current_atr))
        elif all(c.is_bearish for c in run):
            moves.append(StrongMove(i, Bias.BEARISH, total_body / current_atr))

    return moves


def find_order_blocks(
    candles: Sequence[Candle],
    moves: Sequence[StrongMove],
    config: OrderBlockConfig,
) -> list[OrderBlock]:
    """
    Resolve each strong move to its block candle, volume-filtered.

    Several moves can resolve to the same candle; those detections are
    merged, keeping the strongest ratio. Returned oldest first.
    """
    blocks: dict[tuple[Bias, int], OrderBlock] = {}

    for move in moves:
        block_index = None
        stop = max(0, move.index - config.lookback_period) - 1
        for j in range(move.index - 1, stop, -1):
            candle = candles[j]
            if (move.kind is Bias.BULLISH and candle.is_bearish) or (
                move.kind is Bias.BEARISH and candle.is_bullish
            ):
                block_index = j
                break

        if block_index is None:
            continue

        preceding = candles[max(0, block_index - config.volume_avg_period) : block_index]
        if not preceding:
            continue
        avg_volume = sum(c.volume for c in preceding) / len(preceding)

        candle = candles[block_index]
        if candle.volume <= avg_volume * config.min_volume_ratio:
            continue

        key = (move.kind, block_index)
        existing = blocks.get(key)
        if existing is not None and existing.strength_ratio >= move.strength:
            continue

        blocks[key] = OrderBlock(
            kind=move.kind,
            index=block_index,
            open=candle.open,
            high=candle.high,
            low=candle.low,
            close=candle.close,
            volume=candle.volume,
            strength_ratio=move.strength,
        )

    return sorted(blocks.values(), key=lambda b: b.index)


def is_block_tested(block: OrderBlock, price: float, threshold: float = 0.002) -> bool:
    """Whether ``price`` sits within ``threshold`` of the block's defended edge."""
    if block.kind is Bias.BULLISH:
        return block.low <= price <= block.low * (1 + threshold)
    return block.high * (1 - threshold) <= price <= block.high


@register_generator(ORDER_BLOCKS_GENERATOR_NAME)
class OrderBlockGenerator:
    """Order-block retest generator."""

    def __init__(self, config: OrderBlockConfig | None = None):
        self.config = config or OrderBlockConfig()

    @property
    def name(self) -> str:
        return ORDER_BLOCKS_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        cfg = self.config
        return max(cfg.atr_period, cfg.lookback_period, cfg.min_consecutive_bars) + 10

    def active_blocks(self, candles: Sequence[Candle]) -> list[OrderBlock]:
        """Blocks no older than ``max_order_block_age`` bars, oldest first."""
        cfg = self.config
        atr_values = atr(
            [c.high for c in candles],
            [c.low for c in candles],
            [c.close for c in candles],
            cfg.atr_period,
        )
        moves = detect_strong_moves(
            candles, atr_values, cfg.min_consecutive_bars, cfg.min_move_multiplier
        )
        last = len(candles) - 1
        return [
            block
            for block in find_order_blocks(candles, moves, cfg)
            if last - block.index <= cfg.max_order_block_age
        ]

    def evaluate(self, candles: Sequence[Candle]) -> OrderBlockSignal | None:
        if len(candles) < self.min_candles:
            return None

        threshold = self.config.test_threshold
        price = candles[-1].close
        blocks = self.active_blocks(candles)
        bullish = [b for b in blocks if b.kind is Bias.BULLISH]
        bearish = [b for b in blocks if b.kind is Bias.BEARISH]

        # Most recent tested block per side
        tested_bullish = next(
            (b for b in reversed(bullish) if is_block_tested(b, price, threshold)), None
        )
        tested_bearish = next(
            (b for b in reversed(bearish) if is_block_tested(b, price, threshold)), None
        )

        signal = Signal.NONE
        if tested_bullish and tested_bearish:
            if tested_bullish.index > tested_bearish.index:
                signal = Signal.BUY
            elif tested_bearish.index > tested_bullish.index:
                signal = Signal.SELL
        elif tested_bullish:
            signal = Signal.BUY
        elif tested_bearish:
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"Order block {signal.value}: close={price} "
                f"bullish={tested_bullish and tested_bullish.index} "
                f"bearish={tested_bearish and tested_bearish.index}"
            )

        return OrderBlockSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            tested_bullish=tested_bullish,
            tested_bearish=tested_bearish,
            active_bullish=bullish,
            active_bearish=bearish,
        )
