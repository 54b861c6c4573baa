"""Name -> class lookup for the indicator generators.

Each generator module decorates its class with @register_generator, and
importing confluence.generators imports every built-in module, so the
aggregator can build its generator set from names alone:

    generator = create_generator("heikin_ashi", config=HeikinAshiConfig(ema_length=21))
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type] = {}


def register_generator(name: str):
    """Class decorator registering a generator under ``name``.

    Raises:
        ValueError: If ``name`` is already taken.
        TypeError: If the class has no ``evaluate`` method.
    """

    def decorator(cls):
        if name in _REGISTRY:
            raise ValueError(
                f"Generator '{name}' is already registered by {_REGISTRY[name].__name__}"
            )
        if not callable(getattr(cls, "evaluate", None)):
            raise TypeError(f"{cls.__name__} does not define evaluate()")
        _REGISTRY[name] = cls
        logger.debug(f"Registered generator {name} -> {cls.__name__}")
        return cls

    return decorator


def unregister_generator(name: str) -> None:
    """Drop a registration; unknown names are ignored."""
    _REGISTRY.pop(name, None)


def get_generator_class(name: str) -> type:
    """Registered class for ``name``.

    Raises:
        KeyError: If nothing is registered under ``name``; the message
            lists the available names.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(list_generators()) or "(none)"
        raise KeyError(f"Unknown generator '{name}'. Available: {available}") from None


def create_generator(name: str, config: BaseModel | None = None):
    """Instantiate the generator registered under ``name``.

    ``config`` is the generator's own pydantic config record; None means
    the generator defaults.
    """
    return get_generator_class(name)(config=config)


def list_generators() -> list[str]:
    """Registered names, sorted."""
    return sorted(_REGISTRY)
