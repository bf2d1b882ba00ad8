"""
Data models for the Card Matcher
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

import pandas as pd
from pydantic import BaseModel, Field, validator

from .constants import (
    DEFAULT_REWARDS_RATE,
    AmexFamily,
    CardCategory,
    CreditScoreRange,
    PartnerKind,
    RecentApplications,
    RewardsPreference,
)


def _is_missing(v: Any) -> bool:
    """True for None, blank strings and pandas/NumPy NaN"""
    if v is None:
        return True
    if isinstance(v, str) and not v.strip():
        return True
    if isinstance(v, float) and pd.isna(v):
        return True
    return False


def _to_decimal(v: Any) -> Decimal:
    """Parse numbers and loose money strings such as '$4,000' into Decimal"""
    if isinstance(v, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(v, Decimal):
        value = v
    else:
        text = str(v).strip().replace("$", "").replace(",", "")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"'{v}' is not a number")
    if not value.is_finite():
        raise ValueError("value must be finite")
    return value


class CreditCardProduct(BaseModel):
    """Catalog entry for a single credit-card product"""

    id: str
    card_name: str
    issuer: str

    # Signup bonus
    signup_bonus_value: Decimal = Decimal('0')
    signup_bonus_requirement: Optional[str] = None
    signup_bonus_timeframe: Optional[str] = None

    # Fees and earn rate
    annual_fee: Decimal = Decimal('0')
    first_year_waived: bool = False
    rewards_rate: Decimal = DEFAULT_REWARDS_RATE  # percent, e.g. 2 == 2%
    rewards_type: Optional[str] = None

    # Underwriting
    min_credit_score: Optional[int] = None
    is_business_card: bool = False
    is_active: bool = True
    application_url: Optional[str] = None

    # Point valuations (dollar value of the bonus per redemption partner)
    cash_value: Optional[Decimal] = None
    delta_value: Optional[Decimal] = None
    united_value: Optional[Decimal] = None
    southwest_value: Optional[Decimal] = None
    aa_value: Optional[Decimal] = None
    hyatt_value: Optional[Decimal] = None
    marriott_value: Optional[Decimal] = None

    class Config:
        frozen = True

    @validator('id', 'card_name', 'issuer', pre=True)
    def coerce_required_strings(cls, v):
        if _is_missing(v):
            return ""
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return str(v).strip()

    @validator('signup_bonus_requirement', 'signup_bonus_timeframe', 'rewards_type',
               'application_url', pre=True)
    def coerce_optional_strings(cls, v):
        if _is_missing(v):
            return None
        return str(v).strip()

    @validator('signup_bonus_value', 'annual_fee', pre=True)
    def parse_non_negative_money(cls, v):
        if _is_missing(v):
            return Decimal('0')
        value = _to_decimal(v)
        if value < 0:
            raise ValueError("must be non-negative")
        return value

    @validator('rewards_rate', pre=True)
    def parse_rewards_rate(cls, v):
        if _is_missing(v):
            return DEFAULT_REWARDS_RATE
        return _to_decimal(v)

    @validator('cash_value', 'delta_value', 'united_value', 'southwest_value',
               'aa_value', 'hyatt_value', 'marriott_value', pre=True)
    def parse_valuation(cls, v):
        if _is_missing(v):
            return None
        return _to_decimal(v)

    @validator('min_credit_score', pre=True)
    def parse_credit_score(cls, v):
        if _is_missing(v):
            return None
        return int(_to_decimal(v))

    @validator('first_year_waived', 'is_business_card', pre=True)
    def parse_flag(cls, v):
        if _is_missing(v):
            return False
        if hasattr(v, 'item'):
            v = v.item()
        return v

    @validator('is_active', pre=True)
    def parse_active_flag(cls, v):
        if _is_missing(v):
            return True
        if hasattr(v, 'item'):
            v = v.item()
        return v


class MatchingCriteria(BaseModel):
    """Per-request matching criteria collected by the assessment flow"""

    tuition_amount: Decimal = Field(..., alias="tuitionAmount", ge=100, le=500000)
    credit_score_range: Optional[CreditScoreRange] = Field(default=None, alias="creditScoreRange")
    preferred_rewards_type: RewardsPreference = Field(..., alias="preferredRewardsType")

    current_cards: List[str] = Field(default_factory=list, alias="currentCards")
    amex_history_cards: List[str] = Field(default_factory=list, alias="amexHistoryCards")
    preferred_airlines: List[str] = Field(default_factory=list, alias="preferredAirlines")
    preferred_hotels: List[str] = Field(default_factory=list, alias="preferredHotels")

    open_to_business_cards: bool = Field(default=False, alias="openToBusinessCards")
    recent_card_applications: RecentApplications = Field(
        default=RecentApplications.NONE, alias="recentCardApplications"
    )
    monthly_spend_capacity: Optional[Decimal] = Field(default=None, alias="monthlySpendCapacity", ge=0)

    class Config:
        populate_by_name = True
        use_enum_values = True

    @validator('tuition_amount', pre=True)
    def parse_tuition(cls, v):
        if _is_missing(v):
            raise ValueError("tuition amount is required")
        return _to_decimal(v)

    @validator('monthly_spend_capacity', pre=True)
    def parse_spend_capacity(cls, v):
        if _is_missing(v):
            return None
        return _to_decimal(v)

    @validator('credit_score_range', pre=True)
    def normalize_credit_range(cls, v):
        if _is_missing(v):
            return None
        return str(v).strip().lower()

    @validator('preferred_rewards_type', pre=True)
    def normalize_rewards_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @validator('recent_card_applications', pre=True)
    def normalize_recent_applications(cls, v):
        if _is_missing(v):
            return RecentApplications.NONE.value
        return str(v).strip()

    @validator('current_cards', 'amex_history_cards', 'preferred_airlines',
               'preferred_hotels', pre=True)
    def require_list(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("must be a list")
        return [str(item).strip() for item in v if not _is_missing(item)]

    @validator('open_to_business_cards', pre=True)
    def parse_business_opt_in(cls, v):
        if v is None:
            return False
        return v


class CardMetadata(BaseModel):
    """Derived facts about a catalog entry, computed once per product"""

    normalized_name: str
    normalized_issuer: str
    issuer_key: str

    is_amex: bool = False
    is_chase: bool = False
    is_personal_platinum: bool = False
    is_personal_gold: bool = False
    is_business_platinum: bool = False
    is_business_gold: bool = False
    is_chase_ink: bool = False
    amex_family: Optional[AmexFamily] = None

    spend_requirement: Decimal = Decimal('0')
    category: CardCategory = CardCategory.TRAVEL
    partner: Optional[str] = None
    partner_kind: Optional[PartnerKind] = None
    is_flexible_points: bool = False

    class Config:
        frozen = True


class SavingsBreakdown(BaseModel):
    """First-year value of charging an amount to a card"""
    signup_bonus_value: Decimal = Decimal('0')
    rewards_earned: Decimal = Decimal('0')
    annual_fee_impact: Decimal = Decimal('0')
    processing_fee: Decimal = Decimal('0')
    net_first_year_value: Decimal = Decimal('0')


class CardRecommendationResult(BaseModel):
    """A scored card ready for display"""
    card: CreditCardProduct
    estimated_savings: Decimal
    breakdown: SavingsBreakdown
    category: CardCategory
    preference_multiplier: Decimal = Decimal('1')
    rank: int = 0

    class Config:
        use_enum_values = True


class SplitCardAllocation(BaseModel):
    """One leg of a split payment"""
    card: CreditCardProduct
    allocated_amount: Decimal
    breakdown: SavingsBreakdown
    bonus_earned: bool


class SplitStrategy(BaseModel):
    """Two-card allocation of a single tuition payment"""
    cards: List[SplitCardAllocation] = Field(..., min_length=2, max_length=2)
    total_savings: Decimal
    total_tuition: Decimal
    savings_percentage: Decimal


class PartnerValuation(BaseModel):
    """Display-only valuation of a card's bonus with one redemption partner"""
    partner: str
    value: Decimal
    cents_per_point: Decimal


class MatchResult(BaseModel):
    """Output of a single matching run"""

    recommendations: List[CardRecommendationResult] = Field(default_factory=list)
    split_strategy: Optional[SplitStrategy] = None

    # Summary statistics
    total_cards_evaluated: int = 0
    total_eligible: int = 0

    # Processing metadata
    processed_at: datetime = Field(default_factory=datetime.now)
    processing_time_ms: Optional[float] = None
    engine_version: str = "1.0.0"

    warnings: List[str] = Field(default_factory=list)

    def split_beats_best_single(self) -> bool:
        """Whether the split strategy out-earns every single-card pick in real dollars"""
        if self.split_strategy is None:
            return False
        best_single = max(
            (r.breakdown.net_first_year_value for r in self.recommendations),
            default=Decimal('0'),
        )
        return self.split_strategy.total_savings > best_single
