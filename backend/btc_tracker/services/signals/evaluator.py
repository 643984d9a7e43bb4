"""
Signal Evaluator

Buy/sell conditions gated on market sentiment and momentum:
    BUY:  Fear & Greed < 20 AND RSI < 30
    SELL: Fear & Greed > 80 AND RSI > 70
"""

from dataclasses import dataclass
from typing import Optional

from btc_tracker.core.config import Settings
from btc_tracker.schemas.indicators import SignalResult


@dataclass(frozen=True)
class SignalThresholds:
    buy_fear_greed_below: int = 20
    buy_rsi_below: float = 30.0
    sell_fear_greed_above: int = 80
    sell_rsi_above: float = 70.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "SignalThresholds":
        return cls(
            buy_fear_greed_below=settings.buy_fear_greed_below,
            buy_rsi_below=settings.buy_rsi_below,
            sell_fear_greed_above=settings.sell_fear_greed_above,
            sell_rsi_above=settings.sell_rsi_above,
        )


def evaluate_signal(
    fear_greed_value: Optional[int],
    rsi: Optional[float],
    thresholds: SignalThresholds = SignalThresholds(),
) -> SignalResult:
    """Evaluate both conditions; a missing input means no signal."""
    if fear_greed_value is None or rsi is None:
        return SignalResult(buy=False, sell=False)

    return SignalResult(
        buy=fear_greed_value < thresholds.buy_fear_greed_below and rsi < thresholds.buy_rsi_below,
        sell=fear_greed_value > thresholds.sell_fear_greed_above and rsi > thresholds.sell_rsi_above,
    )


def explain_signal(
    fear_greed_value: int,
    rsi: Optional[float],
    signal: SignalResult,
    thresholds: SignalThresholds = SignalThresholds(),
) -> str:
    """Human-readable explanation shown next to the signal cards."""
    buy_rule = (
        f"Fear & Greed < {thresholds.buy_fear_greed_below} AND RSI < {thresholds.buy_rsi_below:g}"
    )
    sell_rule = (
        f"Fear & Greed > {thresholds.sell_fear_greed_above} AND RSI > {thresholds.sell_rsi_above:g}"
    )

    if signal.buy:
        return f"BUY conditions met: {buy_rule}"
    if signal.sell:
        return f"SELL conditions met: {sell_rule}"

    rsi_text = f"{rsi:.2f}" if rsi is not None else "N/A"
    return (
        "Waiting for trading signals:\n"
        f"• BUY: {buy_rule} (currently F&G {fear_greed_value}, RSI {rsi_text})\n"
        f"• SELL: {sell_rule} (currently F&G {fear_greed_value}, RSI {rsi_text})"
    )
