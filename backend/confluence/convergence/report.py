"""Signals summary and human-readable convergence report."""

from confluence.convergence.models import ConvergenceResult, IndicatorSignals, SignalsSummary
from confluence.models import Signal


def summarize_signals(signals: IndicatorSignals) -> SignalsSummary:
    """Tally the generators that produced a record; empty slots are skipped."""
    summary = SignalsSummary()
    for name, record in signals.items():
        if record is None:
            continue
        if record.signal is Signal.BUY:
            summary.buy_signals.append(name)
        elif record.signal is Signal.SELL:
            summary.sell_signals.append(name)
        else:
            summary.neutral_signals.append(name)
    return summary


def format_convergence_report(result: ConvergenceResult | None) -> str:
    """Multi-line text report of a convergence result."""
    if result is None:
        return "No convergent signal data available"

    lines = ["=== CONVERGENT SIGNAL ANALYSIS ===", ""]

    if result.signal is not Signal.NONE:
        lines.append(f"Signal: {result.signal.value}")
        lines.append(f"Confidence: {result.confidence:.1f}%")
        lines.append(f"Reason: {result.reason}")
    else:
        lines.append("Signal: NONE (insufficient convergence)")
    lines.append("")

    score = result.score
    if score.buy_indicators:
        lines.append(f"Bullish Indicators (score {score.buy_score:.2f}):")
        lines.extend(f"  + {name}" for name in score.buy_indicators)
        lines.append("")

    if score.sell_indicators:
        lines.append(f"Bearish Indicators (score {score.sell_score:.2f}):")
        lines.extend(f"  - {name}" for name in score.sell_indicators)
        lines.append("")

    if score.bonuses:
        lines.append(f"Bonuses: {', '.join(score.bonuses)}")
        lines.append("")

    if result.conflicts:
        lines.append("Warnings:")
        lines.extend(
            f"  ! {c.message} (against {c.opposes.value})" for c in result.conflicts
        )
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  Buy Signals: {result.summary.buy_count}")
    lines.append(f"  Sell Signals: {result.summary.sell_count}")
    lines.append(f"  Neutral: {result.summary.neutral_count}")

    return "\n".join(lines)
