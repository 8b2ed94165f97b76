from decimal import Decimal

import pytest

from pos_discounts.schemas import (
    BatchConfiguration, BuyGetRule, CustomDiscount, DiscountKind,
    ProductConfiguration, RuleBundle, RuleCategory,
)
from pos_discounts.services.errors import ConfigurationError
from pos_discounts.services.validation import duplicate_scopes, validate_campaign
from conftest import campaign, line, rule


def test_valid_campaign_passes(default_campaign):
    validate_campaign(default_campaign, [line("A")])


@pytest.mark.parametrize("bad_rule, message", [
    (rule("fixed", "-1"), "negative"),
    (rule("percentage", "100.01"), "exceed 100"),
    (rule("fixed", "1", condition_min=Decimal("5"), condition_max=Decimal("2")), "below condition_min"),
])
def test_malformed_rules_are_rejected(bad_rule, message):
    c = campaign(default_rules=RuleBundle(value_rule=bad_rule))

    with pytest.raises(ConfigurationError) as exc:
        validate_campaign(c)

    assert message in str(exc.value)


def test_threshold_must_be_positive():
    c = campaign(product_configurations=[ProductConfiguration(
        product_id="A",
        quantity_threshold_rule=rule("fixed", "1", condition_min=Decimal("0")),
    )])

    with pytest.raises(ConfigurationError) as exc:
        validate_campaign(c)

    assert exc.value.problems == ["product A quantity_threshold rule 'rule': threshold must be greater than 0"]


def test_all_problems_are_collected():
    c = campaign(
        cart_price_rule=rule("percentage", "120"),
        buy_get_rules=[BuyGetRule(id="x", name="broken", buy_product_id="A", buy_quantity=Decimal("0"),
                                  get_product_id="A", get_quantity=Decimal("1"))],
    )

    with pytest.raises(ConfigurationError) as exc:
        validate_campaign(c)

    assert len(exc.value.problems) == 2


def test_custom_discount_is_validated():
    items = [line("A", custom_discount=CustomDiscount(kind=DiscountKind.PERCENTAGE, amount=Decimal("101")))]
    with pytest.raises(ConfigurationError):
        validate_campaign(None, items)

    items = [line("A", custom_discount=CustomDiscount(kind=DiscountKind.FIXED, amount=Decimal("1"),
                                                      category=RuleCategory.CART_PRICE))]
    with pytest.raises(ConfigurationError):
        validate_campaign(None, items)


def test_duplicate_scopes():
    c = campaign(
        product_configurations=[
            ProductConfiguration(product_id="A"),
            ProductConfiguration(product_id="A"),
            ProductConfiguration(product_id="B"),
        ],
        batch_configurations=[BatchConfiguration(batch_id="B1")],
    )

    assert duplicate_scopes(c) == ["product A"]
