import pytest

from conftest import make_card, make_criteria

from card_matcher.config import MatcherConfig
from card_matcher.eligibility_checker import EligibilityChecker
from card_matcher.exceptions import EligibilityError


@pytest.fixture
def checker(deriver, config):
    return EligibilityChecker(deriver, config)


def _ids(cards):
    return {card.id for card in cards}


def test_default_request(checker, catalog):
    eligible = checker.filter_catalog(catalog, make_criteria())

    assert _ids(eligible) == {"citi-double", "csp", "amex-plat", "amex-gold", "cff", "delta-gold"}


def test_eligible_cards_keep_catalog_order(checker, catalog):
    eligible = checker.filter_catalog(catalog, make_criteria())

    positions = [catalog.index(card) for card in eligible]
    assert positions == sorted(positions)


def test_structural_gate(checker):
    blank = make_card("", "Nameless", "Chase")
    inactive = make_card("old", "Retired Card", "Citi", is_active=False)

    assert checker.explain(blank, make_criteria()).startswith("structural")
    assert "not active" in checker.explain(inactive, make_criteria())


@pytest.mark.parametrize("tier, expected", [
    ("excellent", True),
    ("good", False),
    ("fair", False),
    ("below", False),
])
def test_credit_gate(checker, catalog, tier, expected):
    venture_x = next(card for card in catalog if card.id == "venture-x")

    assert checker.check(venture_x, make_criteria(creditScoreRange=tier)) is expected


def test_absent_tier_defaults_to_700(checker, travel_card):
    criteria = make_criteria(creditScoreRange=None)

    assert checker.credit_threshold(criteria) == 700
    assert checker.check(travel_card, criteria)


def test_business_gate(checker, catalog):
    business_ids = {"amex-biz-gold", "ink-cash"}

    closed = _ids(checker.filter_catalog(catalog, make_criteria()))
    opened = _ids(checker.filter_catalog(catalog, make_criteria(openToBusinessCards=True)))

    assert not closed & business_ids
    assert business_ids <= opened


def test_ownership_gate(checker, catalog):
    criteria = make_criteria(currentCards=["Sapphire Preferred", "Chase Freedom Unlimited"])
    eligible = _ids(checker.filter_catalog(catalog, criteria))

    assert "csp" not in eligible
    assert "cff" in eligible
    assert "ownership" in checker.explain(catalog[1], criteria)


def test_chase_gate_only_for_five_plus(checker, catalog):
    chase_ids = {"csp", "cff"}

    assert chase_ids <= _ids(checker.filter_catalog(catalog, make_criteria(recentCardApplications="3-4")))
    eligible = _ids(checker.filter_catalog(catalog, make_criteria(recentCardApplications="5+")))
    assert not eligible & chase_ids
    assert {"citi-double", "amex-plat"} <= eligible


def test_amex_personal_platinum_history(checker, catalog):
    criteria = make_criteria(amexHistoryCards=["AMEX Personal Platinum"], openToBusinessCards=True)
    eligible = _ids(checker.filter_catalog(catalog, criteria))

    assert "amex-plat" not in eligible
    assert "amex-gold" not in eligible
    assert "amex-biz-gold" in eligible
    assert "delta-gold" in eligible


def test_amex_personal_gold_history(checker, catalog):
    eligible = _ids(checker.filter_catalog(catalog, make_criteria(amexHistoryCards=["AMEX Personal Gold"])))

    assert "amex-gold" not in eligible
    assert "amex-plat" in eligible


def test_amex_business_platinum_history(checker, catalog):
    criteria = make_criteria(amexHistoryCards=["AMEX Business Platinum"], openToBusinessCards=True)
    eligible = _ids(checker.filter_catalog(catalog, criteria))

    assert "amex-biz-gold" not in eligible
    assert {"amex-plat", "amex-gold"} <= eligible


def test_affordability_gate(checker, catalog):
    eligible = _ids(checker.filter_catalog(catalog, make_criteria(tuitionAmount=5000)))

    assert "amex-plat" not in eligible
    assert "amex-gold" not in eligible
    assert "csp" in eligible


def test_monthly_spend_allowance_is_opt_in(deriver, catalog):
    criteria = make_criteria(tuitionAmount=5000, monthlySpendCapacity=1000)

    default = EligibilityChecker(deriver, MatcherConfig())
    allowing = EligibilityChecker(deriver, MatcherConfig(count_monthly_spend_toward_requirement=True))

    assert "amex-plat" not in _ids(default.filter_catalog(catalog, criteria))
    # 5000 + 1000 x 3 default months covers the $8,000 requirement
    assert "amex-plat" in _ids(allowing.filter_catalog(catalog, criteria))


def test_partner_gate(checker, catalog):
    delta_excluded = _ids(checker.filter_catalog(catalog, make_criteria(preferredAirlines=["United"])))
    delta_kept = _ids(checker.filter_catalog(catalog, make_criteria(preferredAirlines=["Delta", "United"])))
    no_preference = _ids(checker.filter_catalog(catalog, make_criteria(preferredAirlines=["Any / No Preference"])))
    hotels_only = _ids(checker.filter_catalog(catalog, make_criteria(preferredHotels=["Hyatt (Best Value)"])))

    assert "delta-gold" not in delta_excluded
    assert "csp" in delta_excluded
    assert "delta-gold" in delta_kept
    assert "delta-gold" in no_preference
    assert "delta-gold" in hotels_only


def test_flexible_cards_skip_partner_gate(checker):
    card = make_card("ur-united", "Chase Sapphire United Edition", "Chase")

    assert checker.check(card, make_criteria(preferredAirlines=["Delta"]))


def test_catalog_is_capped(deriver):
    catalog = [make_card(f"card-{i}", f"Cash Card {i}", "Citi", rewards_type="cash_back") for i in range(12)]
    checker = EligibilityChecker(deriver, MatcherConfig(max_catalog_size=10))

    assert len(checker.filter_catalog(catalog, make_criteria())) == 10


def test_removing_a_card_never_adds_one(checker, catalog):
    criteria = make_criteria(openToBusinessCards=True)
    full = _ids(checker.filter_catalog(catalog, criteria))

    for index in range(len(catalog)):
        reduced = catalog[:index] + catalog[index + 1:]
        assert _ids(checker.filter_catalog(reduced, criteria)) <= full


def test_lowering_tier_never_adds_cards(checker, catalog):
    tiers = ["excellent", "good", "fair", "below"]
    eligible_sets = [_ids(checker.filter_catalog(catalog, make_criteria(creditScoreRange=t))) for t in tiers]

    for higher, lower in zip(eligible_sets, eligible_sets[1:]):
        assert lower <= higher


def test_gate_failures_are_wrapped(checker, travel_card):
    def broken(card, metadata, criteria):
        raise RuntimeError("boom")

    checker.gates[0] = ("structural", broken)

    with pytest.raises(EligibilityError):
        checker.explain(travel_card, make_criteria())
    assert checker.filter_catalog([travel_card], make_criteria()) == []
