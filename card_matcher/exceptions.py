"""
Custom exceptions and warnings for the Card Matcher
"""

from typing import Dict, List, Optional


class CardMatcherError(Exception):
    """Base exception for all card matcher errors"""
    pass


class ValidationError(CardMatcherError):
    """Raised when matching criteria fail validation"""

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors: Dict[str, List[str]] = errors or {}

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        details = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in self.errors.items()
        )
        return f"{super().__str__()} ({details})"


class ComputationError(CardMatcherError):
    """Raised when a savings computation fails"""
    pass


class EligibilityError(CardMatcherError):
    """Raised when eligibility checking fails"""
    pass


class CatalogError(CardMatcherError):
    """Raised when a card catalog cannot be loaded"""
    pass


class MatcherWarning(UserWarning):
    """Base category for non-fatal matching outcomes"""
    pass


class EmptyCatalogWarning(MatcherWarning):
    """Issued when no catalog entries were supplied"""
    pass


class NoEligibleCardsWarning(MatcherWarning):
    """Issued when every catalog entry was filtered out"""
    pass
