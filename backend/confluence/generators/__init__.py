"""Indicator signal generators.

Public API:
- SignalGenerator: Protocol that all generators must implement
- safe_evaluate: Evaluate a generator, logging and absorbing failures
- register_generator: Decorator to register a generator class
- create_generator: Factory function to instantiate generators by name
- list_generators: Discover all registered generators
- get_generator_class: Get generator class by name without instantiating
- unregister_generator: Remove a registration

Importing this package auto-registers all built-in generators.
"""

from confluence.generators.protocol import SignalGenerator, safe_evaluate
from confluence.generators.registry import (
    create_generator,
    get_generator_class,
    list_generators,
    register_generator,
    unregister_generator,
)

# Import built-in generators to trigger auto-registration
import confluence.generators.heikin_ashi  # noqa: F401
import confluence.generators.trend_momentum  # noqa: F401
import confluence.generators.koncorde  # noqa: F401
import confluence.generators.wavetrend  # noqa: F401
import confluence.generators.whale  # noqa: F401
import confluence.generators.divergence  # noqa: F401
import confluence.generators.order_blocks  # noqa: F401

__all__ = [
    "SignalGenerator",
    "safe_evaluate",
    "register_generator",
    "create_generator",
    "list_generators",
    "get_generator_class",
    "unregister_generator",
]
