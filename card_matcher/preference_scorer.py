"""
Preference weighting of savings for ranking
"""

from decimal import Decimal
from typing import Optional

from loguru import logger

from .computation_engine import to_cents
from .config import MatcherConfig, get_config
from .constants import CardCategory, PartnerKind, RewardsPreference
from .models import CardMetadata, MatchingCriteria
from .name_matching import explicit_partners


class PreferenceScorer:
    """
    Soft multiplier on net first-year value based on stated preferences.

    The adjusted number is used for ranking only; the breakdown shown to the
    user stays unadjusted. Scoring never affects eligibility.
    """

    def __init__(self, config: Optional[MatcherConfig] = None):
        self.logger = logger
        self.config = config or get_config()

    def partner_matches(self, metadata: CardMetadata, criteria: MatchingCriteria) -> bool:
        """Whether the card's named partner is one the user explicitly asked for"""
        if metadata.partner is None:
            return False
        if metadata.partner_kind == PartnerKind.AIRLINE:
            preferred = explicit_partners(criteria.preferred_airlines)
        else:
            preferred = explicit_partners(criteria.preferred_hotels)
        return preferred is not None and metadata.partner in preferred

    def multiplier(self, metadata: CardMetadata, criteria: MatchingCriteria) -> Decimal:
        preference = criteria.preferred_rewards_type
        is_cash_back = metadata.category == CardCategory.CASH_BACK

        if is_cash_back:
            if preference in (RewardsPreference.CASH_BACK.value, RewardsPreference.FLEXIBLE.value):
                return self.config.preference_multiplier
            return Decimal('1')

        # travel category
        if preference in (RewardsPreference.TRAVEL_POINTS.value, RewardsPreference.FLEXIBLE.value):
            if self.partner_matches(metadata, criteria):
                return self.config.partner_match_multiplier
            return self.config.preference_multiplier
        return Decimal('1')

    def score(self, net_value: Decimal, metadata: CardMetadata,
              criteria: MatchingCriteria) -> Decimal:
        """
        Preference-adjusted estimated savings

        Args:
            net_value: Unadjusted net first-year value
            metadata: Derived metadata of the card
            criteria: Normalized matching criteria

        Returns:
            net_value times the applicable multiplier, rounded to cents
        """
        multiplier = self.multiplier(metadata, criteria)
        adjusted = to_cents(net_value * multiplier)
        if multiplier != 1:
            self.logger.debug(f"{metadata.normalized_name}: {net_value} x {multiplier} = {adjusted}")
        return adjusted
