"""
Eligibility checking for catalog entries

Hard exclusion gates, evaluated in order with short-circuit on the first
failure:
1. Structural - non-blank id / name / issuer, product active
2. Credit - card minimum within the user's tier threshold
3. Business - business cards only for users who opted in
4. Ownership - cards the user already holds
5. Chase application rule - '5+' recent applications excludes Chase
6. AMEX history - once-per-lifetime welcome bonus families
7. Affordability - spend requirement reachable with the payment
8. Partner - co-branded cards outside the user's partner preferences
"""

from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from .config import MatcherConfig, get_config
from .constants import CHASE_RESTRICTED_BUCKETS, CREDIT_SCORE_THRESHOLDS, PartnerKind
from .exceptions import EligibilityError
from .metadata import CardMetadataDeriver, parse_timeframe_months
from .models import CardMetadata, CreditCardProduct, MatchingCriteria
from .name_matching import excluded_amex_families, explicit_partners, held_card_matches

GateResult = Tuple[bool, Optional[str]]


class EligibilityChecker:
    """
    Applies the ordered eligibility gates to catalog entries
    """

    def __init__(self, deriver: Optional[CardMetadataDeriver] = None,
                 config: Optional[MatcherConfig] = None):
        """
        Initialize eligibility checker

        Args:
            deriver: Metadata deriver (and its caches). If None, creates a new one.
            config: Matcher configuration. If None, uses the global configuration.
        """
        self.logger = logger
        self.deriver = deriver or CardMetadataDeriver()
        self.config = config or get_config()

        self.gates: List[Tuple[str, Callable[[CreditCardProduct, CardMetadata, MatchingCriteria], GateResult]]] = [
            ('structural', self._check_structure),
            ('credit', self._check_credit_score),
            ('business', self._check_business),
            ('ownership', self._check_ownership),
            ('chase_applications', self._check_chase_applications),
            ('amex_history', self._check_amex_history),
            ('affordability', self._check_affordability),
            ('partner', self._check_partner_preference),
        ]

    def credit_threshold(self, criteria: MatchingCriteria) -> int:
        """Numeric score implied by the user's credit tier"""
        if criteria.credit_score_range is None:
            return self.config.default_credit_score
        return CREDIT_SCORE_THRESHOLDS.get(criteria.credit_score_range, self.config.default_credit_score)

    def spend_allowance(self, card: CreditCardProduct, criteria: MatchingCriteria) -> Decimal:
        """
        Spend the user can put toward the card's bonus requirement

        The tuition payment alone, unless monthly spend counting is enabled and
        the user reported a monthly capacity; then the capacity over the bonus
        timeframe is added on top.
        """
        allowance = criteria.tuition_amount
        if self.config.count_monthly_spend_toward_requirement and criteria.monthly_spend_capacity:
            months = parse_timeframe_months(card.signup_bonus_timeframe)
            allowance += criteria.monthly_spend_capacity * months
        return allowance

    def _check_structure(self, card: CreditCardProduct, metadata: CardMetadata,
                         criteria: MatchingCriteria) -> GateResult:
        for field_name in ('id', 'card_name', 'issuer'):
            if not getattr(card, field_name):
                return False, f"Missing required field '{field_name}'"
        if not card.is_active:
            return False, "Card is not active"
        return True, None

    def _check_credit_score(self, card: CreditCardProduct, metadata: CardMetadata,
                            criteria: MatchingCriteria) -> GateResult:
        if card.min_credit_score is None:
            return True, None
        threshold = self.credit_threshold(criteria)
        if card.min_credit_score > threshold:
            return False, f"Requires credit score {card.min_credit_score}, user tier implies {threshold}"
        return True, None

    def _check_business(self, card: CreditCardProduct, metadata: CardMetadata,
                        criteria: MatchingCriteria) -> GateResult:
        if (card.is_business_card or metadata.is_chase_ink) and not criteria.open_to_business_cards:
            return False, "Business card and user is not open to business cards"
        return True, None

    def _check_ownership(self, card: CreditCardProduct, metadata: CardMetadata,
                         criteria: MatchingCriteria) -> GateResult:
        for held in criteria.current_cards:
            if held_card_matches(held, card.card_name, card.issuer):
                return False, f"User already holds '{held}'"
        return True, None

    def _check_chase_applications(self, card: CreditCardProduct, metadata: CardMetadata,
                                  criteria: MatchingCriteria) -> GateResult:
        if metadata.is_chase and criteria.recent_card_applications in CHASE_RESTRICTED_BUCKETS:
            return False, f"Chase card with {criteria.recent_card_applications} recent applications"
        return True, None

    def _check_amex_history(self, card: CreditCardProduct, metadata: CardMetadata,
                            criteria: MatchingCriteria) -> GateResult:
        if not metadata.is_amex or metadata.amex_family is None:
            return True, None
        if metadata.amex_family in excluded_amex_families(criteria.amex_history_cards):
            return False, f"AMEX history rules out the {metadata.amex_family.value} bonus"
        return True, None

    def _check_affordability(self, card: CreditCardProduct, metadata: CardMetadata,
                             criteria: MatchingCriteria) -> GateResult:
        allowance = self.spend_allowance(card, criteria)
        if metadata.spend_requirement > allowance:
            return False, f"Spend requirement ${metadata.spend_requirement} exceeds available ${allowance}"
        return True, None

    def _check_partner_preference(self, card: CreditCardProduct, metadata: CardMetadata,
                                  criteria: MatchingCriteria) -> GateResult:
        if metadata.partner is None or metadata.is_flexible_points:
            return True, None
        if metadata.partner_kind == PartnerKind.AIRLINE:
            preferred = explicit_partners(criteria.preferred_airlines)
        else:
            preferred = explicit_partners(criteria.preferred_hotels)
        if preferred is not None and metadata.partner not in preferred:
            return False, f"Partner {metadata.partner} not among preferred {sorted(preferred)}"
        return True, None

    def explain(self, card: CreditCardProduct, criteria: MatchingCriteria) -> Optional[str]:
        """
        Reason the card is excluded

        Args:
            card: Catalog entry
            criteria: Normalized matching criteria

        Returns:
            The first failing gate's reason, or None if the card is eligible
        """
        try:
            metadata = self.deriver.get(card)
            for gate_name, gate in self.gates:
                passed, reason = gate(card, metadata, criteria)
                if not passed:
                    return f"{gate_name}: {reason}"
            return None

        except Exception as e:
            self.logger.error(f"Error checking eligibility of {getattr(card, 'card_name', card)}: {str(e)}")
            raise EligibilityError(f"Eligibility check failed: {str(e)}")

    def check(self, card: CreditCardProduct, criteria: MatchingCriteria) -> bool:
        return self.explain(card, criteria) is None

    def filter_catalog(self, catalog: Sequence[CreditCardProduct],
                       criteria: MatchingCriteria) -> List[CreditCardProduct]:
        """
        Subset of the catalog passing every gate, in catalog order

        Args:
            catalog: Catalog entries; only the first ``max_catalog_size`` are considered
            criteria: Normalized matching criteria

        Returns:
            Eligible cards
        """
        limit = self.config.max_catalog_size
        if len(catalog) > limit:
            self.logger.warning(f"Catalog has {len(catalog)} entries, considering the first {limit}")
        eligible = []
        for card in catalog[:limit]:
            try:
                reason = self.explain(card, criteria)
            except EligibilityError as e:
                self.logger.warning(f"Excluding {card.card_name}: {e}")
                continue
            if reason is None:
                eligible.append(card)
            else:
                self.logger.debug(f"Excluded {card.card_name} - {reason}")
        self.logger.info(f"{len(eligible)} of {min(len(catalog), limit)} cards eligible")
        return eligible
