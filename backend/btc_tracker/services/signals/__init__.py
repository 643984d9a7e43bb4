"""
Signal Evaluation

Sentiment + RSI gated buy/sell signals.
"""

from btc_tracker.services.signals.evaluator import (
    SignalThresholds,
    evaluate_signal,
    explain_signal,
)

__all__ = [
    "SignalThresholds",
    "evaluate_signal",
    "explain_signal",
]
