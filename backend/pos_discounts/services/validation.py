"""
Проверка конфигурации кампании до оценки.

Некорректная кампания не оценивается частично: validate_campaign
собирает все проблемы и бросает ConfigurationError.
"""
from decimal import Decimal
from typing import Iterable, List, Optional
from pos_discounts.schemas.rules import (
    Campaign, DiscountRule, DiscountKind, BuyGetRule, BuyGetKind,
    RuleCategory, LINE_CATEGORIES, THRESHOLD_CATEGORIES,
)
from pos_discounts.schemas.cart import LineItem
from pos_discounts.services.errors import ConfigurationError


HUNDRED = Decimal("100")


def rule_problems(rule: Optional[DiscountRule], where: str, category: RuleCategory) -> List[str]:
    if rule is None:
        return []

    problems = []
    label = f"{where} '{rule.name}'"

    if rule.amount < 0:
        problems.append(f"{label}: amount must not be negative")
    if rule.kind == DiscountKind.PERCENTAGE and rule.amount > HUNDRED:
        problems.append(f"{label}: percentage must not exceed 100")
    if category in THRESHOLD_CATEGORIES and (rule.condition_min is None or rule.condition_min <= 0):
        problems.append(f"{label}: threshold must be greater than 0")
    if rule.condition_min is not None and rule.condition_min < 0:
        problems.append(f"{label}: condition_min must not be negative")
    if (
        rule.condition_min is not None
        and rule.condition_max is not None
        and rule.condition_max < rule.condition_min
    ):
        problems.append(f"{label}: condition_max is below condition_min")

    return problems


def buy_get_problems(rule: BuyGetRule) -> List[str]:
    problems = []
    label = f"buy-get rule '{rule.name}'"

    if rule.buy_quantity <= 0:
        problems.append(f"{label}: buy quantity must be greater than 0")
    if rule.get_quantity <= 0:
        problems.append(f"{label}: get quantity must be greater than 0")
    if rule.amount < 0:
        problems.append(f"{label}: amount must not be negative")
    if rule.kind == BuyGetKind.PERCENTAGE and rule.amount > HUNDRED:
        problems.append(f"{label}: percentage must not exceed 100")

    return problems


def campaign_problems(campaign: Campaign) -> List[str]:
    problems = []

    for category, rule in campaign.default_rules.rules():
        problems += rule_problems(rule, f"default {category.value} rule", category)

    for config in campaign.product_configurations:
        for category, rule in config.rules():
            problems += rule_problems(rule, f"product {config.product_id} {category.value} rule", category)

    for config in campaign.batch_configurations:
        for category, rule in config.rules():
            problems += rule_problems(rule, f"batch {config.batch_id} {category.value} rule", category)

    for rule in campaign.buy_get_rules:
        problems += buy_get_problems(rule)

    problems += rule_problems(campaign.cart_price_rule, "cart price rule", RuleCategory.CART_PRICE)
    problems += rule_problems(campaign.cart_quantity_rule, "cart quantity rule", RuleCategory.CART_QUANTITY)

    return problems


def custom_discount_problems(items: Iterable[LineItem]) -> List[str]:
    problems = []

    for index, item in enumerate(items):
        custom = item.custom_discount
        if custom is None:
            continue
        label = f"custom discount on line {item.line_id or index}"
        if custom.category not in LINE_CATEGORIES:
            problems.append(f"{label}: category {custom.category.value} cannot be overridden")
        if custom.amount < 0:
            problems.append(f"{label}: amount must not be negative")
        if custom.kind == DiscountKind.PERCENTAGE and custom.amount > HUNDRED:
            problems.append(f"{label}: percentage must not exceed 100")

    return problems


def validate_campaign(campaign: Optional[Campaign], items: Iterable[LineItem] = ()) -> None:
    problems = custom_discount_problems(items)
    if campaign is not None:
        problems = campaign_problems(campaign) + problems

    if problems:
        raise ConfigurationError(problems)


def duplicate_scopes(campaign: Campaign) -> List[str]:
    """Ключи, для которых в одном уровне задано больше одной конфигурации"""
    duplicates = []

    for tier_name, keys in (
        ("product", [c.product_id for c in campaign.product_configurations]),
        ("batch", [c.batch_id for c in campaign.batch_configurations]),
    ):
        seen = set()
        for key in keys:
            if key in seen and f"{tier_name} {key}" not in duplicates:
                duplicates.append(f"{tier_name} {key}")
            seen.add(key)

    return duplicates
