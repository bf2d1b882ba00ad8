"""
Card Matcher Constants

Fixed vocabularies, tier thresholds and family tables used by the matching
engine. Tunable numbers (fees, caps, multipliers) live in config.py.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class RewardsPreference(str, Enum):
    """Reward type the user asked for."""
    CASH_BACK = "cash_back"
    TRAVEL_POINTS = "travel_points"
    FLEXIBLE = "flexible"


class CardCategory(str, Enum):
    """Coarse category every catalog entry falls into."""
    CASH_BACK = "cash_back"
    TRAVEL = "travel"


class CreditScoreRange(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    BELOW = "below"


class RecentApplications(str, Enum):
    """Personal cards opened in the last 24 months."""
    NONE = "0"
    ONE_TO_TWO = "1-2"
    THREE_TO_FOUR = "3-4"
    FIVE_PLUS = "5+"


class PartnerKind(str, Enum):
    AIRLINE = "airline"
    HOTEL = "hotel"


class AmexFamily(str, Enum):
    """AMEX product families subject to the once-per-lifetime bonus rule."""
    PERSONAL_PLATINUM = "personal_platinum"
    PERSONAL_GOLD = "personal_gold"
    BUSINESS_PLATINUM = "business_platinum"
    BUSINESS_GOLD = "business_gold"


# =============================================================================
# CREDIT SCORE TIERS
# =============================================================================

CREDIT_SCORE_THRESHOLDS: Dict[str, int] = {
    CreditScoreRange.EXCELLENT.value: 750,
    CreditScoreRange.GOOD.value: 700,
    CreditScoreRange.FAIR.value: 650,
    CreditScoreRange.BELOW.value: 300,
}


# =============================================================================
# ISSUER VOCABULARY
# =============================================================================

# alias substring -> canonical issuer key
ISSUER_ALIASES: List[Tuple[str, str]] = [
    ("american express", "amex"),
    ("amex", "amex"),
    ("chase", "chase"),
    ("capital one", "capital_one"),
    ("citibank", "citi"),
    ("citi", "citi"),
    ("wells fargo", "wells_fargo"),
    ("bank of america", "bank_of_america"),
    ("discover", "discover"),
    ("barclays", "barclays"),
    ("u.s. bank", "us_bank"),
    ("us bank", "us_bank"),
]

AMEX_MARKERS: Tuple[str, ...] = ("amex", "american express")
CHASE_MARKERS: Tuple[str, ...] = ("chase",)

# The '5+' bucket is the only one that trips the Chase application rule
CHASE_RESTRICTED_BUCKETS: FrozenSet[str] = frozenset({RecentApplications.FIVE_PLUS.value})

# history family -> families whose bonus is no longer available
AMEX_FAMILY_EXCLUSIONS: Dict[AmexFamily, FrozenSet[AmexFamily]] = {
    AmexFamily.PERSONAL_PLATINUM: frozenset({AmexFamily.PERSONAL_PLATINUM, AmexFamily.PERSONAL_GOLD}),
    AmexFamily.PERSONAL_GOLD: frozenset({AmexFamily.PERSONAL_GOLD}),
    AmexFamily.BUSINESS_PLATINUM: frozenset({AmexFamily.BUSINESS_PLATINUM, AmexFamily.BUSINESS_GOLD}),
    AmexFamily.BUSINESS_GOLD: frozenset({AmexFamily.BUSINESS_GOLD}),
}


# =============================================================================
# CATEGORY / PARTNER / FLEXIBLE VOCABULARY
# =============================================================================

CASH_TERMS: Tuple[str, ...] = ("cash", "cashback")

# keyword -> (canonical partner, kind); first match wins, airlines before hotels
PARTNER_KEYWORDS: List[Tuple[str, str, PartnerKind]] = [
    ("delta", "Delta", PartnerKind.AIRLINE),
    ("united", "United", PartnerKind.AIRLINE),
    ("southwest", "Southwest", PartnerKind.AIRLINE),
    ("american airlines", "American Airlines", PartnerKind.AIRLINE),
    ("aadvantage", "American Airlines", PartnerKind.AIRLINE),
    ("hyatt", "Hyatt", PartnerKind.HOTEL),
    ("marriott", "Marriott", PartnerKind.HOTEL),
    ("bonvoy", "Marriott", PartnerKind.HOTEL),
    ("hilton", "Hilton", PartnerKind.HOTEL),
]

FLEXIBLE_POINTS_MARKERS: Tuple[str, ...] = (
    "sapphire",
    "venture",
    "membership rewards",
    "ultimate rewards",
    "thankyou",
)

AMEX_FLEXIBLE_TIERS: Tuple[str, ...] = ("gold", "platinum")

# Preference entries meaning "no preference", e.g. "Any / No Preference"
ANY_PREFERENCE_MARKERS: Tuple[str, ...] = ("any", "no preference", "none")


# =============================================================================
# PARTNER VALUATIONS
# =============================================================================

# (product field, display name, implied cents-per-point)
PARTNER_VALUATION_FIELDS: List[Tuple[str, str, Decimal]] = [
    ("cash_value", "Cash", Decimal("1.0")),
    ("hyatt_value", "Hyatt", Decimal("2.2")),
    ("southwest_value", "Southwest", Decimal("1.5")),
    ("delta_value", "Delta", Decimal("1.2")),
    ("united_value", "United", Decimal("1.2")),
    ("aa_value", "American Airlines", Decimal("1.3")),
    ("marriott_value", "Marriott", Decimal("0.7")),
]


# =============================================================================
# DEFAULTS
# =============================================================================

CENTS = Decimal("0.01")
DEFAULT_REWARDS_RATE = Decimal("1")
DEFAULT_TIMEFRAME_MONTHS = 3
