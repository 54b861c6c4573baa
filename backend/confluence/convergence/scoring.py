"""Score and conflict rules applied to a filled IndicatorSignals record."""

from typing import Iterable

from confluence.convergence.models import (
    Conflict,
    ConvergenceScore,
    IndicatorSignals,
    IndicatorWeights,
)
from confluence.generators.whale import WhaleType
from confluence.models import Bias, Signal


def side_bonus(
    signals: IndicatorSignals,
    name: str,
    side: Signal,
    weights: IndicatorWeights,
) -> tuple[float, str | None]:
    """Extra score for a generator's mark that agrees with its own signal."""
    if name == "wavetrend":
        record = signals.wavetrend
        wanted = Bias.BULLISH if side is Signal.BUY else Bias.BEARISH
        if record is not None and record.diamond is wanted:
            return weights.diamond_bonus, "wavetrend_diamond"
    elif name == "divergence":
        record = signals.divergence
        if record is None:
            return 0.0, None
        regular = record.regular_bullish if side is Signal.BUY else record.regular_bearish
        if regular:
            return weights.regular_divergence_bonus, "regular_divergence"
    return 0.0, None


def compute_score(
    signals: IndicatorSignals,
    weights: IndicatorWeights,
    enabled: Iterable[str],
    required_convergence: float = 2.0,
) -> ConvergenceScore:
    """Sum weights (plus bonuses) of the enabled generators on each side."""
    score = ConvergenceScore(threshold=required_convergence)

    for name in enabled:
        side = signals.signal_of(name)
        if side is Signal.NONE:
            continue

        bonus, label = side_bonus(signals, name, side, weights)
        points = weights.weight_for(name) + bonus

        if side is Signal.BUY:
            score.buy_score += points
            score.buy_indicators.append(name)
        else:
            score.sell_score += points
            score.sell_indicators.append(name)
        if label is not None:
            score.bonuses.append(label)

    return score


def detect_conflicts(signals: IndicatorSignals, enabled: Iterable[str]) -> list[Conflict]:
    """
    Find signals that contradict the other generators.

    - an order block on one side while another generator points the other way
    - whale distribution while another generator buys, accumulation while
      another generator sells
    """
    enabled = list(enabled)
    conflicts: list[Conflict] = []

    def others_on(side: Signal, source: str) -> bool:
        return any(
            name != source and signals.signal_of(name) is side for name in enabled
        )

    if "order_blocks" in enabled:
        block_side = signals.signal_of("order_blocks")
        if block_side is Signal.SELL and others_on(Signal.BUY, "order_blocks"):
            conflicts.append(
                Conflict(
                    opposes=Signal.BUY,
                    source="order_blocks",
                    message="Bearish order block overhead - resistance expected",
                )
            )
        elif block_side is Signal.BUY and others_on(Signal.SELL, "order_blocks"):
            conflicts.append(
                Conflict(
                    opposes=Signal.SELL,
                    source="order_blocks",
                    message="Bullish order block below - support expected",
                )
            )

    whale = signals.whale if "whale" in enabled else None
    if whale is not None:
        if whale.whale_type is WhaleType.DISTRIBUTION and others_on(Signal.BUY, "whale"):
            conflicts.append(
                Conflict(
                    opposes=Signal.BUY,
                    source="whale",
                    message="Whale distribution detected - institutional selling",
                )
            )
        elif whale.whale_type is WhaleType.ACCUMULATION and others_on(Signal.SELL, "whale"):
            conflicts.append(
                Conflict(
                    opposes=Signal.SELL,
                    source="whale",
                    message="Whale accumulation detected - institutional buying",
                )
            )

    return conflicts


def decide(
    score: ConvergenceScore,
    use_weights: bool,
    max_total: float,
) -> tuple[Signal, float, str]:
    """
    Pick the winning side and its raw confidence (before any penalty).

    A side wins when it reaches the threshold and strictly beats the
    other side. ``max_total`` is the best attainable total: the summed
    weights of the enabled generators, or their count in count mode.
    """
    if use_weights:
        buy, sell = score.buy_score, score.sell_score
    else:
        buy, sell = float(score.buy_count), float(score.sell_count)

    if buy >= score.threshold and buy > sell:
        side, winning, count, label = Signal.BUY, buy, score.buy_count, "bullish"
    elif sell >= score.threshold and sell > buy:
        side, winning, count, label = Signal.SELL, sell, score.sell_count, "bearish"
    else:
        return Signal.NONE, 0.0, ""

    confidence = min(100.0, winning / max_total * 100) if max_total > 0 else 0.0
    if use_weights:
        reason = f"{count} {label} signals (score: {winning:.2f})"
    else:
        reason = f"{count}/{int(max_total)} indicators {label}"
    return side, confidence, reason
