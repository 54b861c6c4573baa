"""Core signal logic: series primitives, indicator generators, convergence.

This package contains pure business logic with no I/O dependencies
(no database, network or notification access). Candles come in from a
collaborator, plain signal records go out. It is shared by any live
runner and by the offline backtesting tools (backtest/).
"""
