"""
Card metadata derivation and caching

Derived facts (issuer family, category, partner, parsed spend requirement,
flexible-points classification) are expensive enough to compute once per
catalog entry. Catalog entries are treated as immutable for the lifetime of
the cache, so nothing here is ever invalidated except by an explicit clear().
"""

import re
import threading
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple

from loguru import logger

from .constants import (
    AMEX_FLEXIBLE_TIERS,
    AMEX_MARKERS,
    CASH_TERMS,
    CHASE_MARKERS,
    DEFAULT_TIMEFRAME_MONTHS,
    FLEXIBLE_POINTS_MARKERS,
    AmexFamily,
    CardCategory,
)
from .models import CardMetadata, CreditCardProduct
from .name_matching import (
    amex_family,
    contains_any,
    contains_term,
    find_partner,
    issuer_key,
    normalize,
)

_DOLLAR_AMOUNT = re.compile(r"\$\s*(\d[\d,]*(?:\.\d+)?)")
_MONTHS = re.compile(r"(\d+)\s*month", re.IGNORECASE)


class SpendRequirementCache:
    """
    Parsed spend requirements keyed by the exact requirement text

    Many cards share phrasing ("Spend $4,000 in 3 months"), so the cache is
    keyed by string rather than by card. It is cleared wholesale once it grows
    past ``max_entries``.
    """

    def __init__(self, max_entries: int = 500):
        self.max_entries = max_entries
        self._entries: Dict[str, Decimal] = {}
        self._lock = threading.Lock()

    def get(self, requirement: Optional[str]) -> Decimal:
        if not requirement:
            return Decimal('0')
        with self._lock:
            cached = self._entries.get(requirement)
            if cached is not None:
                return cached
            if len(self._entries) >= self.max_entries:
                logger.debug(f"Spend requirement cache reached {len(self._entries)} entries, clearing")
                self._entries.clear()
            value = parse_spend_requirement(requirement)
            self._entries[requirement] = value
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class MetadataCache:
    """CardMetadata keyed by product identity"""

    def __init__(self):
        # id(product) -> (product, metadata); holding the product keeps its id stable
        self._entries: Dict[int, Tuple[CreditCardProduct, CardMetadata]] = {}
        self._lock = threading.Lock()

    def get(self, product: CreditCardProduct) -> Optional[CardMetadata]:
        entry = self._entries.get(id(product))
        if entry is not None and entry[0] is product:
            return entry[1]
        return None

    def put(self, product: CreditCardProduct, metadata: CardMetadata) -> CardMetadata:
        with self._lock:
            entry = self._entries.get(id(product))
            if entry is not None and entry[0] is product:
                return entry[1]
            self._entries[id(product)] = (product, metadata)
            return metadata

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def parse_spend_requirement(requirement: Optional[str]) -> Decimal:
    """
    Extract the first dollar amount from free text

    Args:
        requirement: e.g. "Spend $4,000 in the first 3 months"

    Returns:
        The amount as Decimal, or 0 when absent or unparseable
    """
    if not requirement:
        return Decimal('0')
    match = _DOLLAR_AMOUNT.search(requirement)
    if not match:
        return Decimal('0')
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        logger.warning(f"Unparseable spend requirement: {requirement!r}")
        return Decimal('0')


def parse_timeframe_months(timeframe: Optional[str]) -> int:
    """Months allowed to meet the requirement, defaulting to 3"""
    if timeframe:
        match = _MONTHS.search(timeframe)
        if match:
            return int(match.group(1))
    return DEFAULT_TIMEFRAME_MONTHS


class CardMetadataDeriver:
    """
    Computes CardMetadata for catalog entries, at most once per product
    """

    def __init__(self, metadata_cache: Optional[MetadataCache] = None,
                 spend_cache: Optional[SpendRequirementCache] = None):
        self.logger = logger
        self.metadata_cache = metadata_cache if metadata_cache is not None else MetadataCache()
        self.spend_cache = spend_cache if spend_cache is not None else SpendRequirementCache()

    def get(self, product: CreditCardProduct) -> CardMetadata:
        cached = self.metadata_cache.get(product)
        if cached is not None:
            return cached
        return self.metadata_cache.put(product, self.derive(product))

    def spend_requirement(self, product: CreditCardProduct) -> Decimal:
        return self.spend_cache.get(product.signup_bonus_requirement)

    def derive(self, product: CreditCardProduct) -> CardMetadata:
        name = normalize(product.card_name)
        issuer = normalize(product.issuer)
        rewards_type = normalize(product.rewards_type)
        combined = f"{issuer} {name}"

        is_amex = contains_any(combined, AMEX_MARKERS)
        is_chase = contains_any(combined, CHASE_MARKERS)
        partner = find_partner(name)
        # co-branded cards (Delta Gold, Hilton Platinum) are separate AMEX products
        family = amex_family(name) if is_amex and partner is None else None

        is_flexible = contains_any(name, FLEXIBLE_POINTS_MARKERS) or (
            is_amex and partner is None and contains_any(name, AMEX_FLEXIBLE_TIERS)
        )

        if contains_any(rewards_type, CASH_TERMS) or contains_any(name, CASH_TERMS):
            category = CardCategory.CASH_BACK
        else:
            category = CardCategory.TRAVEL

        metadata = CardMetadata(
            normalized_name=name,
            normalized_issuer=issuer,
            issuer_key=issuer_key(product.issuer),
            is_amex=is_amex,
            is_chase=is_chase,
            is_personal_platinum=family == AmexFamily.PERSONAL_PLATINUM,
            is_personal_gold=family == AmexFamily.PERSONAL_GOLD,
            is_business_platinum=family == AmexFamily.BUSINESS_PLATINUM,
            is_business_gold=family == AmexFamily.BUSINESS_GOLD,
            is_chase_ink=is_chase and contains_term(name, "ink"),
            amex_family=family,
            spend_requirement=self.spend_requirement(product),
            category=category,
            partner=partner[0] if partner else None,
            partner_kind=partner[1] if partner else None,
            is_flexible_points=is_flexible,
        )
        self.logger.debug(
            f"Derived metadata for {product.card_name}: category={category.value}, "
            f"partner={metadata.partner}, flexible={is_flexible}, requirement={metadata.spend_requirement}"
        )
        return metadata
