"""
Per-partner point valuations for display

Read-through projection of a card's valuation fields. Nothing here feeds the
ranking score.
"""

from typing import List, Optional

from .constants import PARTNER_VALUATION_FIELDS
from .models import CreditCardProduct, PartnerValuation


def resolve_partner_valuations(card: CreditCardProduct) -> List[PartnerValuation]:
    """
    Valuations present on the card, in fixed partner order

    Args:
        card: Catalog entry

    Returns:
        One PartnerValuation per non-null valuation field
    """
    valuations = []
    for field_name, partner, cents_per_point in PARTNER_VALUATION_FIELDS:
        value = getattr(card, field_name)
        if value is None:
            continue
        valuations.append(PartnerValuation(partner=partner, value=value, cents_per_point=cents_per_point))
    return valuations


def best_valuation(card: CreditCardProduct) -> Optional[PartnerValuation]:
    """Highest-value redemption, earliest partner on ties"""
    valuations = resolve_partner_valuations(card)
    if not valuations:
        return None
    return max(valuations, key=lambda v: v.value)
