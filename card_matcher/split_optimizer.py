"""
Split-strategy optimizer

Searches pairs of eligible cards for the two-card allocation of a single
payment with the highest combined net value. One card per issuer family.
"""

from decimal import Decimal
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .computation_engine import SavingsCalculator, to_cents
from .config import MatcherConfig, get_config
from .metadata import CardMetadataDeriver
from .models import CreditCardProduct, SplitCardAllocation, SplitStrategy


class SplitOptimizer:
    """
    Bounded pairwise search over the highest-bonus eligible cards
    """

    def __init__(self, calculator: Optional[SavingsCalculator] = None,
                 deriver: Optional[CardMetadataDeriver] = None,
                 config: Optional[MatcherConfig] = None):
        """
        Initialize split optimizer

        Args:
            calculator: Savings calculator used for each allocation
            deriver: Metadata deriver supplying issuer keys and spend requirements
            config: Matcher configuration. If None, uses the global configuration.
        """
        self.logger = logger
        self.config = config or get_config()
        self.calculator = calculator or SavingsCalculator(self.config.processing_fee_rate)
        self.deriver = deriver or CardMetadataDeriver()

    def candidates(self, eligible: Sequence[CreditCardProduct]) -> List[CreditCardProduct]:
        """Cards with a positive bonus, highest bonus first, capped to the pool size"""
        with_bonus = [card for card in eligible if card.signup_bonus_value > 0]
        with_bonus.sort(key=lambda card: card.signup_bonus_value, reverse=True)
        return with_bonus[:self.config.split_candidate_pool]

    def allocate(self, requirement_a: Decimal, requirement_b: Decimal,
                 tuition: Decimal) -> Tuple[Decimal, Decimal]:
        """
        Split ``tuition`` between two cards

        Card A is funded up to its requirement, card B takes the remainder.
        If B then falls short while A holds more than it needs, the smaller of
        A's slack and B's shortfall moves from A to B. With A funded at
        min(requirement, tuition) its slack is never positive, so the move
        never fires here.
        """
        amount_a = min(requirement_a, tuition)
        amount_b = tuition - amount_a

        shortfall = requirement_b - amount_b
        slack = amount_a - requirement_a
        if shortfall > 0 and slack > 0:
            transfer = min(slack, shortfall)
            amount_a -= transfer
            amount_b += transfer

        return amount_a, amount_b

    def is_degenerate(self, requirement_a: Decimal, requirement_b: Decimal, tuition: Decimal) -> bool:
        limit = tuition * self.config.split_degenerate_ratio
        return requirement_a > limit and requirement_b > limit

    def evaluate_pair(self, card_a: CreditCardProduct, card_b: CreditCardProduct,
                      tuition: Decimal) -> Optional[SplitStrategy]:
        """
        Build the split strategy for one pair, or None if the pair is not viable

        Args:
            card_a: Higher-bonus card of the pair
            card_b: Lower-bonus card of the pair
            tuition: Total payment

        Returns:
            SplitStrategy for the pair, or None for same-issuer or degenerate pairs
        """
        meta_a = self.deriver.get(card_a)
        meta_b = self.deriver.get(card_b)
        if meta_a.issuer_key == meta_b.issuer_key:
            return None

        requirement_a = meta_a.spend_requirement
        requirement_b = meta_b.spend_requirement
        if self.is_degenerate(requirement_a, requirement_b, tuition):
            self.logger.debug(f"Skipping degenerate pair {card_a.card_name} + {card_b.card_name}")
            return None

        amount_a, amount_b = self.allocate(requirement_a, requirement_b, tuition)

        allocations = []
        for card, amount, requirement in ((card_a, amount_a, requirement_a), (card_b, amount_b, requirement_b)):
            bonus_earned = amount >= requirement
            allocations.append(SplitCardAllocation(
                card=card,
                allocated_amount=to_cents(amount),
                breakdown=self.calculator.calculate(card, amount, bonus_earned=bonus_earned),
                bonus_earned=bonus_earned,
            ))

        total = self.calculator.total_savings(*(a.breakdown for a in allocations))
        return SplitStrategy(
            cards=allocations,
            total_savings=total,
            total_tuition=to_cents(tuition),
            savings_percentage=to_cents(total / tuition * Decimal('100')),
        )

    def optimize(self, eligible: Sequence[CreditCardProduct], tuition: Decimal) -> Optional[SplitStrategy]:
        """
        Best two-card split of the payment

        Args:
            eligible: Cards that passed every eligibility gate
            tuition: Total payment

        Returns:
            The highest-total SplitStrategy (first found on ties), or None
        """
        if tuition < self.config.split_min_tuition:
            self.logger.debug(f"Tuition {tuition} below split threshold {self.config.split_min_tuition}")
            return None

        pool = self.candidates(eligible)
        if len(pool) < 2:
            self.logger.debug(f"Only {len(pool)} split candidates, no split proposed")
            return None

        best: Optional[SplitStrategy] = None
        for card_a, card_b in combinations(pool, 2):
            strategy = self.evaluate_pair(card_a, card_b, tuition)
            if strategy is None:
                continue
            if best is None or strategy.total_savings > best.total_savings:
                best = strategy

        if best is None:
            self.logger.info("No viable cross-issuer pair for a split")
        else:
            names = " + ".join(a.card.card_name for a in best.cards)
            self.logger.info(f"Best split: {names} for {best.total_savings}")
        return best
