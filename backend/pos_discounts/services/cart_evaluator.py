import logging
from decimal import Decimal
from typing import List, Sequence
from pos_discounts.schemas.rules import Campaign, RuleCategory, Tier
from pos_discounts.schemas.result import AppliedDiscount, LineDiscount
from pos_discounts.services.rules import ZERO, condition_met, calculate_rule_discount

logger = logging.getLogger(__name__)


def evaluate_cart_rules(campaign: Campaign, lines: Sequence[LineDiscount]) -> List[AppliedDiscount]:
    """
    Правила на всю корзину, один раз после строк.
    Цена проверяется по сумме после скидок строк, количество по числу единиц.
    Срабатывает только первое подходящее правило: сначала по цене, потом по количеству.
    """
    subtotal = sum((line.net_total for line in lines), ZERO)
    total_quantity = sum((line.quantity for line in lines), Decimal("0"))

    candidates = [
        (RuleCategory.CART_PRICE, campaign.cart_price_rule, subtotal),
        (RuleCategory.CART_QUANTITY, campaign.cart_quantity_rule, total_quantity),
    ]

    for category, rule, measured in candidates:
        if not rule or not rule.is_enabled:
            continue
        if not condition_met(rule, measured):
            logger.debug("Cart rule '%s' not met: %s", rule.name, measured)
            continue

        amount = calculate_rule_discount(rule, subtotal, total_quantity)
        if amount <= 0:
            continue

        capped = amount > subtotal
        if capped:
            amount = subtotal

        return [AppliedDiscount(
            rule_id=f"cart:{campaign.id}:{category.value}",
            rule_name=rule.name,
            category=category,
            tier=Tier.CART,
            amount=amount,
            applied_once=True,
            capped=capped,
            description=f"Cart rule '{rule.name}' applied.",
        )]

    return []
