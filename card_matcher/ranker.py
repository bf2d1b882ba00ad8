"""
Ranker

Orders scored cards, keeps a short list and applies category diversity
rules so the user always sees an alternative reward type.
"""

from typing import List, Optional

from loguru import logger

from .constants import CardCategory, RewardsPreference
from .models import CardRecommendationResult


def sort_results(results: List[CardRecommendationResult]) -> List[CardRecommendationResult]:
    """
    Sort by estimated savings, descending.

    ``sorted`` is stable, so ties keep catalog order.
    """
    return sorted(results, key=lambda r: r.estimated_savings, reverse=True)


def best_of_category(ranked: List[CardRecommendationResult], category: str,
                     exclude: List[CardRecommendationResult]) -> Optional[CardRecommendationResult]:
    """Highest-ranked result in ``category`` that is not already selected"""
    selected_ids = {id(r.card) for r in exclude}
    for result in ranked:
        if result.category == category and id(result.card) not in selected_ids:
            return result
    return None


def apply_diversity(ranked: List[CardRecommendationResult], selected: List[CardRecommendationResult],
                    preference: str) -> List[CardRecommendationResult]:
    """
    Append picks from categories missing in the short list

    Args:
        ranked: Full sorted list of scored cards
        selected: Top-N slice of ``ranked``
        preference: The user's rewards preference

    Returns:
        ``selected`` plus at most one card per missing category
    """
    diversified = list(selected)
    present = {r.category for r in diversified}

    if preference == RewardsPreference.FLEXIBLE.value:
        wanted = [CardCategory.CASH_BACK.value, CardCategory.TRAVEL.value]
        missing = [category for category in wanted if category not in present]
    elif preference == RewardsPreference.CASH_BACK.value:
        missing = [CardCategory.TRAVEL.value] if CardCategory.TRAVEL.value not in present else []
    else:
        missing = [CardCategory.CASH_BACK.value] if CardCategory.CASH_BACK.value not in present else []

    for category in missing:
        pick = best_of_category(ranked, category, diversified)
        if pick is not None:
            logger.debug(f"Adding {pick.card.card_name} as the best {category} alternative")
            diversified.append(pick)

    return diversified


def assign_ranks(results: List[CardRecommendationResult]) -> List[CardRecommendationResult]:
    """Rebuild each result with its 1-based display rank"""
    return [
        CardRecommendationResult(
            card=result.card,
            estimated_savings=result.estimated_savings,
            breakdown=result.breakdown,
            category=result.category,
            preference_multiplier=result.preference_multiplier,
            rank=position,
        )
        for position, result in enumerate(results, start=1)
    ]


def rank_recommendations(results: List[CardRecommendationResult], preference: str,
                         top_n: int = 3) -> List[CardRecommendationResult]:
    """
    Produce the final display list

    Args:
        results: Scored eligible cards, in catalog order
        preference: The user's rewards preference
        top_n: Cards kept before diversity picks are appended

    Returns:
        Ranked recommendations, ranks 1..N in display order
    """
    ranked = sort_results(results)
    selected = apply_diversity(ranked, ranked[:top_n], preference)
    return assign_ranks(selected)
