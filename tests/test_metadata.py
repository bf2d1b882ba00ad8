from decimal import Decimal
import threading

from conftest import make_card

from card_matcher.constants import AmexFamily, CardCategory, PartnerKind
from card_matcher.metadata import (
    CardMetadataDeriver,
    MetadataCache,
    SpendRequirementCache,
    parse_spend_requirement,
    parse_timeframe_months,
)


def test_parse_spend_requirement():
    assert parse_spend_requirement("Spend $4,000 in the first 3 months") == Decimal("4000")
    assert parse_spend_requirement("$ 15,000 within 3 months, then $500 more") == Decimal("15000")
    assert parse_spend_requirement("Spend $1,500.50") == Decimal("1500.50")
    assert parse_spend_requirement("Make 10 purchases") == Decimal("0")
    assert parse_spend_requirement("") == Decimal("0")
    assert parse_spend_requirement(None) == Decimal("0")


def test_parse_timeframe_months():
    assert parse_timeframe_months("6 months") == 6
    assert parse_timeframe_months("first 12 Months from account opening") == 12
    assert parse_timeframe_months("90 days") == 3
    assert parse_timeframe_months(None) == 3


def test_spend_cache_is_keyed_by_text_and_cleared_when_full():
    cache = SpendRequirementCache(max_entries=2)

    assert cache.get("Spend $1,000") == Decimal("1000")
    assert cache.get("Spend $1,000") == Decimal("1000")
    assert len(cache) == 1

    cache.get("Spend $2,000")
    assert len(cache) == 2
    cache.get("Spend $3,000")
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_metadata_computed_once_per_product(travel_card):
    calls = []

    class CountingDeriver(CardMetadataDeriver):
        def derive(self, product):
            calls.append(product.id)
            return super().derive(product)

    deriver = CountingDeriver()
    first = deriver.get(travel_card)
    second = deriver.get(travel_card)

    assert first is second
    assert calls == ["csp"]


def test_metadata_cache_uses_identity_not_content(travel_card):
    cache = MetadataCache()
    deriver = CardMetadataDeriver(metadata_cache=cache)
    twin = travel_card.copy()

    deriver.get(travel_card)
    deriver.get(twin)

    assert len(cache) == 2


def test_shared_cache_across_threads(catalog):
    deriver = CardMetadataDeriver()
    results = []

    def worker():
        results.append([deriver.get(card) for card in catalog])

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(deriver.metadata_cache) == len(catalog)
    for run in results:
        assert all(a is b for a, b in zip(run, results[0]))


def test_chase_flexible_travel(deriver, travel_card):
    metadata = deriver.get(travel_card)

    assert metadata.is_chase
    assert not metadata.is_amex
    assert metadata.issuer_key == "chase"
    assert metadata.category == CardCategory.TRAVEL
    assert metadata.is_flexible_points
    assert metadata.partner is None
    assert metadata.spend_requirement == Decimal("4000")


def test_cash_back_category(deriver, cash_card):
    metadata = deriver.get(cash_card)

    assert metadata.category == CardCategory.CASH_BACK
    assert metadata.issuer_key == "citi"
    assert not metadata.is_flexible_points


def test_amex_sub_product_flags(deriver, amex_cards):
    platinum, gold, business_gold = (deriver.get(card) for card in amex_cards)

    assert platinum.is_amex and platinum.is_personal_platinum
    assert platinum.amex_family == AmexFamily.PERSONAL_PLATINUM
    assert platinum.is_flexible_points
    assert gold.is_personal_gold and not gold.is_personal_platinum
    assert business_gold.is_business_gold and not business_gold.is_personal_gold
    assert business_gold.amex_family == AmexFamily.BUSINESS_GOLD


def test_co_branded_amex_card(deriver):
    card = make_card("delta-gold", "Delta SkyMiles® Gold American Express Card", "American Express",
                     rewards_type="airline_miles")
    metadata = deriver.get(card)

    assert metadata.is_amex
    assert metadata.partner == "Delta"
    assert metadata.partner_kind == PartnerKind.AIRLINE
    assert metadata.amex_family is None
    assert not metadata.is_personal_gold
    assert not metadata.is_flexible_points
    assert metadata.category == CardCategory.TRAVEL


def test_chase_ink_family(deriver):
    metadata = deriver.get(make_card("ink", "Ink Business Preferred", "Chase"))

    assert metadata.is_chase_ink
    assert not deriver.get(make_card("link", "Link Rewards", "Chase")).is_chase_ink


def test_hotel_partner(deriver):
    metadata = deriver.get(make_card("hyatt", "World of Hyatt Credit Card", "Chase", rewards_type="hotel_points"))

    assert metadata.partner == "Hyatt"
    assert metadata.partner_kind == PartnerKind.HOTEL
    assert metadata.category == CardCategory.TRAVEL
