"""
Tuition Card Matcher

Recommends the credit cards that maximize net first-year value for a large
one-time tuition payment, and proposes a two-card split when one pays more.
"""

__version__ = "1.0.0"
__author__ = "Card Matcher Team"

from .core import CardMatcher, configure_logging
from .catalog_loader import load_catalog
from .models import (
    CreditCardProduct,
    MatchingCriteria,
    CardRecommendationResult,
    SplitStrategy,
    MatchResult,
)
from .metadata import MetadataCache, SpendRequirementCache
from .exceptions import CardMatcherError, ValidationError, ComputationError, CatalogError

__all__ = [
    "CardMatcher",
    "configure_logging",
    "load_catalog",
    "CreditCardProduct",
    "MatchingCriteria",
    "CardRecommendationResult",
    "SplitStrategy",
    "MatchResult",
    "MetadataCache",
    "SpendRequirementCache",
    "CardMatcherError",
    "ValidationError",
    "ComputationError",
    "CatalogError",
]
