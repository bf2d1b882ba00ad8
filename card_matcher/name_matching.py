"""
Name normalization and matching rules

Every fuzzy string comparison the engine makes lives here:
- normalizing card / issuer names
- resolving an issuer to its canonical family key
- matching a user's held card against a catalog entry
- mapping AMEX product names and history answers onto the family table
- resolving airline / hotel names and preference lists to canonical partners

Matching rule set:
1. Text is lowercased, trademark symbols dropped, punctuation other than
   '.', '&' and '+' turned into spaces, whitespace collapsed.
2. Substring checks are token-aligned: "ink" matches "chase ink cash" but not
   "link".
3. A held card matches a catalog entry when, after removing the catalog
   issuer's aliases from both names, either remainder contains the other.
"""

import re
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from .constants import (
    AMEX_FAMILY_EXCLUSIONS,
    ANY_PREFERENCE_MARKERS,
    ISSUER_ALIASES,
    PARTNER_KEYWORDS,
    AmexFamily,
    PartnerKind,
)

_TRADEMARKS = re.compile(r"[®™©]")
_PUNCTUATION = re.compile(r"[^a-z0-9.&+ ]+")
_WHITESPACE = re.compile(r"\s+")

MIN_CORE_LENGTH = 3


def normalize(text: Optional[str]) -> str:
    """Lowercase, strip trademark symbols and punctuation, collapse spaces"""
    if not text:
        return ""
    value = _TRADEMARKS.sub("", str(text).lower())
    value = _PUNCTUATION.sub(" ", value)
    return _WHITESPACE.sub(" ", value).strip()


def contains_term(text: str, term: str) -> bool:
    """Token-aligned substring check on already-normalized text"""
    if not term:
        return False
    return f" {term} " in f" {text} "


def contains_any(text: str, terms: Iterable[str]) -> bool:
    return any(contains_term(text, term) for term in terms)


def issuer_key(issuer: Optional[str]) -> str:
    """Canonical issuer family, e.g. 'American Express' and 'AMEX' -> 'amex'"""
    normalized = normalize(issuer)
    for alias, key in ISSUER_ALIASES:
        if contains_term(normalized, alias):
            return key
    return normalized


def issuer_aliases(issuer: Optional[str]) -> List[str]:
    """All spellings of the issuer's family, longest first"""
    key = issuer_key(issuer)
    aliases = {alias for alias, alias_key in ISSUER_ALIASES if alias_key == key}
    normalized = normalize(issuer)
    if normalized:
        aliases.add(normalized)
    return sorted(aliases, key=len, reverse=True)


def strip_issuer(name: str, issuer: Optional[str]) -> str:
    """Remove every alias of the issuer from a normalized card name"""
    stripped = f" {name} "
    for alias in issuer_aliases(issuer):
        stripped = stripped.replace(f" {alias} ", " ")
    return _WHITESPACE.sub(" ", stripped).strip()


def held_card_matches(held_card: str, card_name: str, issuer: Optional[str]) -> bool:
    """
    Whether a card the user already holds is the given catalog product

    Args:
        held_card: Free-text card name from the user
        card_name: Catalog card name
        issuer: Catalog issuer, stripped from both sides before comparing

    Returns:
        True if either issuer-stripped name contains the other
    """
    held_core = strip_issuer(normalize(held_card), issuer)
    card_core = strip_issuer(normalize(card_name), issuer)
    if len(held_core) < MIN_CORE_LENGTH or len(card_core) < MIN_CORE_LENGTH:
        return False
    return contains_term(card_core, held_core) or contains_term(held_core, card_core)


def amex_family(name: str) -> Optional[AmexFamily]:
    """Map an AMEX product name or history answer to its family"""
    normalized = normalize(name)
    is_business = contains_term(normalized, "business")
    if contains_term(normalized, "platinum"):
        return AmexFamily.BUSINESS_PLATINUM if is_business else AmexFamily.PERSONAL_PLATINUM
    if contains_term(normalized, "gold"):
        return AmexFamily.BUSINESS_GOLD if is_business else AmexFamily.PERSONAL_GOLD
    return None


def excluded_amex_families(history: Iterable[str]) -> FrozenSet[AmexFamily]:
    """Families whose welcome bonus the user can no longer earn"""
    excluded: Set[AmexFamily] = set()
    for entry in history:
        family = amex_family(entry)
        if family is not None:
            excluded |= AMEX_FAMILY_EXCLUSIONS[family]
    return frozenset(excluded)


def find_partner(name: str) -> Optional[Tuple[str, PartnerKind]]:
    """First partner keyword found in a normalized name"""
    for keyword, partner, kind in PARTNER_KEYWORDS:
        if contains_term(name, keyword):
            return partner, kind
    return None


def is_any_preference(entry: str) -> bool:
    normalized = normalize(entry)
    return any(normalized.startswith(marker) for marker in ANY_PREFERENCE_MARKERS)


def explicit_partners(preferences: Iterable[str]) -> Optional[FrozenSet[str]]:
    """
    Canonical partners named in a preference list

    Returns None when the list is empty or contains an "any" answer, meaning
    the user expressed no restriction.
    """
    entries = [entry for entry in preferences if normalize(entry)]
    if not entries or any(is_any_preference(entry) for entry in entries):
        return None
    partners = set()
    for entry in entries:
        found = find_partner(normalize(entry))
        partners.add(found[0] if found else normalize(entry))
    return frozenset(partners)
