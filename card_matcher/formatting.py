"""
Display formatting for recommendations and split strategies
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from .models import CardRecommendationResult, SplitStrategy


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        result = Decimal(str(value))
    return result if result.is_finite() else Decimal('0')


def format_currency(amount: Any) -> str:
    """US dollars without cents, e.g. 25000 -> '$25,000', -50 -> '-$50'"""
    dollars = _as_decimal(amount).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    if dollars < 0:
        return f"-${-dollars:,}"
    return f"${abs(dollars):,}"


def format_percentage(rate: Any) -> str:
    """Plain percentage, e.g. 2 -> '2%', 1.5 -> '1.5%'"""
    value = _as_decimal(rate).normalize()
    return f"{value:f}%"


def generate_savings_explanation(result: CardRecommendationResult, tuition_amount: Any) -> str:
    """
    Multi-line explanation of a recommendation's breakdown

    Args:
        result: Ranked recommendation
        tuition_amount: Amount charged to the card

    Returns:
        Newline-separated lines: bonus, rewards, annual fee, processing fee, net value
    """
    breakdown = result.breakdown
    card = result.card
    lines = []

    if breakdown.signup_bonus_value > 0:
        requirement = card.signup_bonus_requirement or "Meet spend requirement"
        lines.append(f"Signup bonus: {format_currency(breakdown.signup_bonus_value)} ({requirement})")

    lines.append(
        f"Rewards on {format_currency(tuition_amount)} tuition: "
        f"{format_currency(breakdown.rewards_earned)} ({format_percentage(card.rewards_rate)} back)"
    )

    if breakdown.annual_fee_impact < 0:
        lines.append(f"Annual fee: {format_currency(breakdown.annual_fee_impact)}")
    elif card.annual_fee > 0 and card.first_year_waived:
        lines.append(f"Annual fee: {format_currency(card.annual_fee)} (waived first year)")

    if breakdown.processing_fee > 0:
        lines.append(f"Processing fee: -{format_currency(breakdown.processing_fee)}")

    lines.append(f"Net first-year value: {format_currency(breakdown.net_first_year_value)}")
    return "\n".join(lines)


def generate_split_explanation(strategy: SplitStrategy) -> str:
    """One line per card plus the combined total"""
    lines = []
    for allocation in strategy.cards:
        bonus_note = "bonus earned" if allocation.bonus_earned else "bonus not earned"
        lines.append(
            f"{allocation.card.card_name}: charge {format_currency(allocation.allocated_amount)} "
            f"({bonus_note}), net {format_currency(allocation.breakdown.net_first_year_value)}"
        )
    lines.append(
        f"Combined first-year value: {format_currency(strategy.total_savings)} "
        f"({format_percentage(strategy.savings_percentage)} of {format_currency(strategy.total_tuition)})"
    )
    return "\n".join(lines)
