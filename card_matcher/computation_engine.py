"""
Computation engine for first-year savings breakdowns
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from loguru import logger

from .constants import CENTS
from .exceptions import ComputationError
from .models import CreditCardProduct, SavingsBreakdown


def to_cents(value: Decimal) -> Decimal:
    """Round a monetary value to cents, mapping non-finite values to 0"""
    if not value.is_finite():
        return Decimal('0.00')
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class SavingsCalculator:
    """
    Computes the net first-year value of charging an amount to a card.

    The calculation is a pure function of (card, amount); it is called once
    per eligible card for the full tuition and again for every candidate
    allocation explored by the split optimizer.
    """

    def __init__(self, processing_fee_rate: Decimal = Decimal('0.03')):
        """
        Initialize savings calculator

        Args:
            processing_fee_rate: Surcharge applied to every dollar charged
        """
        self.logger = logger
        self.processing_fee_rate = processing_fee_rate

    def _safe_decimal(self, value: Any, default: str = "0") -> Decimal:
        """
        Safely convert a value to Decimal.

        Invalid, missing or non-finite input is logged and replaced by the
        provided default so a single bad field cannot poison a breakdown.
        """
        if value is None:
            return Decimal(default)
        try:
            result = value if isinstance(value, Decimal) else Decimal(str(value))
        except Exception as e:
            self.logger.warning(f"Invalid decimal value '{value}' - using default {default}. Error: {e}")
            return Decimal(default)
        if not result.is_finite():
            self.logger.warning(f"Non-finite value '{value}' - using default {default}")
            return Decimal(default)
        return result

    def processing_fee(self, amount: Any) -> Decimal:
        return to_cents(self._safe_decimal(amount) * self.processing_fee_rate)

    def calculate(self, card: CreditCardProduct, amount: Any,
                  bonus_earned: bool = True) -> SavingsBreakdown:
        """
        Compute the savings breakdown for charging ``amount`` to ``card``

        Args:
            card: Catalog entry
            amount: Dollars charged to this card
            bonus_earned: Whether the signup bonus counts toward the value

        Returns:
            SavingsBreakdown with every component rounded to cents
        """
        try:
            charged = self._safe_decimal(amount)
            rate = self._safe_decimal(card.rewards_rate)

            signup_bonus = to_cents(self._safe_decimal(card.signup_bonus_value)) if bonus_earned else Decimal('0.00')
            rewards_earned = to_cents(charged * rate / Decimal('100'))
            if card.first_year_waived:
                annual_fee_impact = Decimal('0.00')
            else:
                annual_fee_impact = -to_cents(self._safe_decimal(card.annual_fee))
            processing_fee = self.processing_fee(charged)

            net = signup_bonus + rewards_earned + annual_fee_impact - processing_fee

            self.logger.debug(
                f"{card.card_name} @ {charged}: bonus={signup_bonus} rewards={rewards_earned} "
                f"fee={annual_fee_impact} processing={processing_fee} net={net}"
            )
            return SavingsBreakdown(
                signup_bonus_value=signup_bonus,
                rewards_earned=rewards_earned,
                annual_fee_impact=annual_fee_impact,
                processing_fee=processing_fee,
                net_first_year_value=to_cents(net),
            )

        except Exception as e:
            self.logger.error(f"Error computing savings for {getattr(card, 'card_name', card)}: {str(e)}")
            raise ComputationError(f"Savings computation failed: {str(e)}")

    def total_savings(self, *breakdowns: Optional[SavingsBreakdown]) -> Decimal:
        """Sum of net values across breakdowns"""
        return to_cents(sum(
            (b.net_first_year_value for b in breakdowns if b is not None),
            Decimal('0'),
        ))
