"""Order-block detector package."""

from confluence.generators.order_blocks.generator import (
    OrderBlockGenerator,
    StrongMove,
    detect_strong_moves,
    find_order_blocks,
    is_block_tested,
)
from confluence.generators.order_blocks.models import (
    ORDER_BLOCKS_GENERATOR_NAME,
    OrderBlockConfig,
    OrderBlockSignal,
)

__all__ = [
    "OrderBlockGenerator",
    "OrderBlockConfig",
    "OrderBlockSignal",
    "StrongMove",
    "ORDER_BLOCKS_GENERATOR_NAME",
    "detect_strong_moves",
    "find_order_blocks",
    "is_block_tested",
]
