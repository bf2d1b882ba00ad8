from card_matcher.constants import AmexFamily
from card_matcher.name_matching import (
    amex_family,
    excluded_amex_families,
    explicit_partners,
    find_partner,
    held_card_matches,
    issuer_key,
    normalize,
    strip_issuer,
)


def test_normalize():
    assert normalize("Chase Sapphire Preferred®") == "chase sapphire preferred"
    assert normalize("  The Platinum Card™ from  American-Express ") == "the platinum card from american express"
    assert normalize("cash_back") == "cash back"
    assert normalize(None) == ""


def test_issuer_key_folds_aliases():
    assert issuer_key("American Express") == "amex"
    assert issuer_key("AMEX") == "amex"
    assert issuer_key("JPMorgan Chase") == "chase"
    assert issuer_key("Citibank") == "citi"
    assert issuer_key("Credit Union of Somewhere") == "credit union of somewhere"


def test_strip_issuer_removes_all_aliases():
    assert strip_issuer("amex gold card", "American Express") == "gold card"
    assert strip_issuer("american express gold card", "AMEX") == "gold card"


def test_held_card_matches_in_either_direction():
    assert held_card_matches("Sapphire Preferred", "Chase Sapphire Preferred", "Chase")
    assert held_card_matches("chase sapphire preferred card", "Chase Sapphire Preferred", "Chase")
    assert held_card_matches("Amex Gold", "American Express Gold", "American Express")


def test_held_card_does_not_match_siblings():
    assert not held_card_matches("Chase Freedom Unlimited", "Chase Freedom Flex", "Chase")
    assert not held_card_matches("Chase Sapphire Reserve", "Chase Sapphire Preferred", "Chase")


def test_held_card_matching_is_token_aligned():
    assert not held_card_matches("Link", "Chase Ink Business Cash", "Chase")
    assert not held_card_matches("Chase", "Chase Freedom Flex", "Chase")


def test_amex_family():
    assert amex_family("AMEX Personal Platinum") == AmexFamily.PERSONAL_PLATINUM
    assert amex_family("American Express Gold Card") == AmexFamily.PERSONAL_GOLD
    assert amex_family("AMEX Business Platinum") == AmexFamily.BUSINESS_PLATINUM
    assert amex_family("Business Gold Rewards") == AmexFamily.BUSINESS_GOLD
    assert amex_family("Blue Cash Everyday") is None
    assert amex_family("None of the above") is None


def test_excluded_amex_families():
    assert excluded_amex_families(["AMEX Personal Platinum"]) == {
        AmexFamily.PERSONAL_PLATINUM, AmexFamily.PERSONAL_GOLD,
    }
    assert excluded_amex_families(["AMEX Personal Gold"]) == {AmexFamily.PERSONAL_GOLD}
    assert excluded_amex_families(["AMEX Business Platinum", "AMEX Personal Gold"]) == {
        AmexFamily.BUSINESS_PLATINUM, AmexFamily.BUSINESS_GOLD, AmexFamily.PERSONAL_GOLD,
    }
    assert excluded_amex_families(["None of the above"]) == frozenset()


def test_find_partner():
    assert find_partner("delta skymiles gold american express card")[0] == "Delta"
    assert find_partner("citi aadvantage platinum select")[0] == "American Airlines"
    assert find_partner("marriott bonvoy boundless")[0] == "Marriott"
    assert find_partner("chase sapphire preferred") is None


def test_explicit_partners():
    assert explicit_partners([]) is None
    assert explicit_partners(["Any / No Preference"]) is None
    assert explicit_partners(["Delta", "Any / No Preference"]) is None
    assert explicit_partners(["Delta Air Lines", "United"]) == {"Delta", "United"}
    assert explicit_partners(["Hyatt (Best Value)"]) == {"Hyatt"}
