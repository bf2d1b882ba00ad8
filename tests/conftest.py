import pytest

from card_matcher.config import MatcherConfig
from card_matcher.core import CardMatcher
from card_matcher.metadata import CardMetadataDeriver
from card_matcher.models import CreditCardProduct, MatchingCriteria


def make_card(card_id, card_name, issuer, **fields):
    return CreditCardProduct(id=card_id, card_name=card_name, issuer=issuer, **fields)


def make_criteria(**fields):
    payload = {
        "tuitionAmount": 25000,
        "preferredRewardsType": "cash_back",
        "creditScoreRange": "good",
    }
    payload.update(fields)
    return MatchingCriteria(**payload)


@pytest.fixture
def config():
    return MatcherConfig()


@pytest.fixture
def deriver():
    return CardMetadataDeriver()


@pytest.fixture
def matcher(config):
    return CardMatcher(config=config)


@pytest.fixture
def cash_card():
    return make_card(
        "citi-double", "Citi Double Cash", "Citi",
        signup_bonus_value=200, annual_fee=0, rewards_rate=2,
        rewards_type="cash_back", min_credit_score=670,
    )


@pytest.fixture
def travel_card():
    return make_card(
        "csp", "Chase Sapphire Preferred", "Chase",
        signup_bonus_value=750, signup_bonus_requirement="Spend $4,000 in 3 months",
        annual_fee=95, rewards_rate=2, rewards_type="travel_points", min_credit_score=700,
    )


@pytest.fixture
def amex_cards():
    return [
        make_card("amex-plat", "The Platinum Card from American Express", "American Express",
                  signup_bonus_value=800, signup_bonus_requirement="Spend $8,000 in 6 months",
                  annual_fee=695, rewards_type="travel_points"),
        make_card("amex-gold", "American Express Gold Card", "American Express",
                  signup_bonus_value=600, signup_bonus_requirement="Spend $6,000 in 6 months",
                  annual_fee=325, rewards_type="travel_points"),
        make_card("amex-biz-gold", "American Express Business Gold Card", "American Express",
                  signup_bonus_value=1000, signup_bonus_requirement="Spend $15,000 in 3 months",
                  annual_fee=375, rewards_type="travel_points", is_business_card=True),
    ]


@pytest.fixture
def catalog(cash_card, travel_card, amex_cards):
    return [
        cash_card,
        travel_card,
        *amex_cards,
        make_card("cff", "Chase Freedom Flex", "Chase",
                  signup_bonus_value=200, signup_bonus_requirement="Spend $500 in 3 months",
                  rewards_type="cash_back", rewards_rate=1),
        make_card("delta-gold", "Delta SkyMiles Gold American Express Card", "American Express",
                  signup_bonus_value=500, signup_bonus_requirement="Spend $2,000 in 6 months",
                  annual_fee=150, first_year_waived=True, rewards_type="airline_miles"),
        make_card("venture-x", "Capital One Venture X", "Capital One",
                  signup_bonus_value=750, signup_bonus_requirement="Spend $4,000 in 3 months",
                  annual_fee=395, rewards_rate=2, rewards_type="travel_points", min_credit_score=740),
        make_card("ink-cash", "Chase Ink Business Cash", "Chase",
                  signup_bonus_value=750, signup_bonus_requirement="Spend $6,000 in 3 months",
                  rewards_type="cash_back"),
    ]
