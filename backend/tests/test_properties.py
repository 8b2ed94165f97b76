"""Свойства движка на случайных корзинах: идемпотентность и неотрицательность."""
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from pos_discounts.schemas import BuyGetRule, BuyGetKind, ProductConfiguration, RuleBundle
from pos_discounts.services.engine import evaluate_cart
from conftest import campaign, line, rule


money = st.decimals(min_value=Decimal("0"), max_value=Decimal("500"), places=2,
                    allow_nan=False, allow_infinity=False)
quantities = st.decimals(min_value=Decimal("0.5"), max_value=Decimal("20"), places=1,
                         allow_nan=False, allow_infinity=False)

items_strategy = st.lists(
    st.builds(
        lambda product, price, qty: line(product, price=str(price), quantity=str(qty)),
        st.sampled_from(["A", "B", "C"]),
        money,
        quantities,
    ),
    min_size=0,
    max_size=6,
)


def _campaign(one_time: bool):
    return campaign(
        is_one_time_per_transaction=one_time,
        default_rules=RuleBundle(
            value_rule=rule("percentage", "15", name="value"),
            quantity_rule=rule("fixed", "40", name="qty", condition_min=Decimal("2")),
        ),
        product_configurations=[
            ProductConfiguration(product_id="A", value_rule=rule("fixed", "300", name="big", apply_fixed_once=True)),
        ],
        buy_get_rules=[
            BuyGetRule(id="bg", name="B for C", buy_product_id="B", buy_quantity=Decimal("1"),
                       get_product_id="C", get_quantity=Decimal("1"), kind=BuyGetKind.FREE),
        ],
        cart_price_rule=rule("fixed", "250", name="cart", apply_fixed_once=True),
    )


@settings(max_examples=75, deadline=None)
@given(items=items_strategy, one_time=st.booleans())
def test_evaluation_is_idempotent(items, one_time):
    c = _campaign(one_time)
    assert evaluate_cart(items, c).model_dump() == evaluate_cart(items, c).model_dump()


@settings(max_examples=75, deadline=None)
@given(items=items_strategy, one_time=st.booleans())
def test_totals_never_negative(items, one_time):
    result = evaluate_cart(items, _campaign(one_time))

    assert result.final_total >= 0
    for l in result.lines:
        assert l.net_total >= 0
        assert l.discount == sum((e.amount for e in l.applied), Decimal("0"))
    assert result.total_discount == result.total_item_discount + result.total_cart_discount
