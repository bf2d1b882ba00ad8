"""
Core Card Matcher implementation
"""

import time
import warnings
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Type

import pandas as pd
from loguru import logger

from .catalog_loader import catalog_from_dataframe, parse_catalog_entries
from .computation_engine import SavingsCalculator
from .config import MatcherConfig, get_config
from .eligibility_checker import EligibilityChecker
from .exceptions import ComputationError, EmptyCatalogWarning, MatcherWarning, NoEligibleCardsWarning
from .metadata import CardMetadataDeriver, MetadataCache, SpendRequirementCache
from .models import CardRecommendationResult, CreditCardProduct, MatchingCriteria, MatchResult
from .preference_scorer import PreferenceScorer
from .ranker import rank_recommendations
from .split_optimizer import SplitOptimizer
from .validator import validate_criteria


def get_card_matcher_version() -> str:
    """Get the current card matcher version"""
    return "1.0.0"


def configure_logging(level: str = "INFO", log_format: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with a stdout sink at ``level``

    Args:
        level: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)
        log_format: Loguru format string; defaults to the configured format
    """
    logger.remove()
    logger.add(
        lambda msg: print(msg, end=""),
        level=level.upper(),
        format=log_format or get_config().log_format,
    )


class CardMatcher:
    """
    Main Card Matcher class for recommending cards for a tuition payment
    """

    def __init__(self, config: Optional[MatcherConfig] = None,
                 metadata_cache: Optional[MetadataCache] = None,
                 spend_cache: Optional[SpendRequirementCache] = None,
                 log_level: Optional[str] = None):
        """
        Initialize the Card Matcher

        Args:
            config: Matcher configuration. If None, uses the global configuration.
            metadata_cache: Card metadata cache; pass one in to share it across matchers
            spend_cache: Spend-requirement cache; pass one in to share it across matchers
            log_level: If given, reconfigures logging at this level
        """
        self.config = config or get_config()
        if spend_cache is None:
            spend_cache = SpendRequirementCache(self.config.spend_requirement_cache_limit)

        self.deriver = CardMetadataDeriver(metadata_cache=metadata_cache, spend_cache=spend_cache)
        self.calculator = SavingsCalculator(self.config.processing_fee_rate)
        self.eligibility_checker = EligibilityChecker(self.deriver, self.config)
        self.scorer = PreferenceScorer(self.config)
        self.split_optimizer = SplitOptimizer(self.calculator, self.deriver, self.config)

        if log_level:
            configure_logging(log_level, self.config.log_format)

        logger.debug(f"Card Matcher {get_card_matcher_version()} initialized")

    def _warn(self, result: MatchResult, message: str, category: Type[MatcherWarning]) -> None:
        warnings.warn(message, category, stacklevel=3)
        result.warnings.append(message)

    def _coerce_catalog(self, catalog: Any) -> List[CreditCardProduct]:
        if catalog is None:
            return []
        if isinstance(catalog, pd.DataFrame):
            return catalog_from_dataframe(catalog, active_only=False)
        return parse_catalog_entries(catalog)

    def score_cards(self, eligible: Iterable[CreditCardProduct], criteria: MatchingCriteria,
                    result: MatchResult) -> List[CardRecommendationResult]:
        """
        Compute breakdown and preference-adjusted savings for each eligible card

        Args:
            eligible: Cards that passed every gate
            criteria: Normalized matching criteria
            result: Match result collecting warnings for skipped cards

        Returns:
            Unranked recommendations, in catalog order
        """
        scored = []
        for card in eligible:
            try:
                breakdown = self.calculator.calculate(card, criteria.tuition_amount)
            except ComputationError as e:
                logger.error(f"Skipping {card.card_name}: {e}")
                result.warnings.append(f"Could not compute savings for {card.card_name}")
                continue

            metadata = self.deriver.get(card)
            scored.append(CardRecommendationResult(
                card=card,
                estimated_savings=self.scorer.score(breakdown.net_first_year_value, metadata, criteria),
                breakdown=breakdown,
                category=metadata.category,
                preference_multiplier=self.scorer.multiplier(metadata, criteria),
            ))
        return scored

    def match(self, criteria: Any, catalog: Any) -> MatchResult:
        """
        Run one matching request

        Args:
            criteria: Raw criteria payload or MatchingCriteria
            catalog: Sequence of CreditCardProduct / mappings, or a DataFrame

        Returns:
            MatchResult with ranked recommendations and the optional split strategy

        Raises:
            ValidationError: If the criteria are invalid
        """
        start_time = time.perf_counter()
        validated = validate_criteria(criteria)
        result = MatchResult(processed_at=datetime.now(), engine_version=get_card_matcher_version())

        products = self._coerce_catalog(catalog)
        if not products:
            self._warn(result, "Card catalog is empty", EmptyCatalogWarning)
            return self._finish(result, start_time)

        result.total_cards_evaluated = min(len(products), self.config.max_catalog_size)
        logger.info(
            f"Matching {result.total_cards_evaluated} cards for ${validated.tuition_amount} "
            f"({validated.preferred_rewards_type})"
        )

        eligible = self.eligibility_checker.filter_catalog(products, validated)
        result.total_eligible = len(eligible)
        if not eligible:
            self._warn(result, "No cards matched the eligibility criteria", NoEligibleCardsWarning)
            return self._finish(result, start_time)

        scored = self.score_cards(eligible, validated, result)
        result.recommendations = rank_recommendations(
            scored, validated.preferred_rewards_type, self.config.top_n
        )

        try:
            result.split_strategy = self.split_optimizer.optimize(eligible, validated.tuition_amount)
        except ComputationError as e:
            logger.error(f"Split optimization failed: {e}")
            result.warnings.append("Split strategy could not be computed")

        return self._finish(result, start_time)

    def _finish(self, result: MatchResult, start_time: float) -> MatchResult:
        result.processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Matched {len(result.recommendations)} recommendations "
            f"({result.total_eligible}/{result.total_cards_evaluated} eligible) "
            f"in {result.processing_time_ms:.2f}ms"
        )
        return result

    def explain_exclusions(self, criteria: Any, catalog: Any) -> Mapping[str, str]:
        """Card name -> reason for every excluded catalog entry"""
        validated = validate_criteria(criteria)
        reasons = {}
        for card in self._coerce_catalog(catalog)[:self.config.max_catalog_size]:
            reason = self.eligibility_checker.explain(card, validated)
            if reason is not None:
                reasons[card.card_name] = reason
        return reasons
