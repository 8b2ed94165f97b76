from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from pos_discounts.schemas.rules import DiscountRule, DiscountKind, BuyGetRule, BuyGetKind


Q = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(Q, rounding=ROUND_HALF_UP)


def condition_met(rule: DiscountRule, measured: Decimal) -> bool:
    """Проверка условий conditionMin / conditionMax"""
    if rule.condition_min is not None and measured < rule.condition_min:
        return False
    if rule.condition_max is not None and measured > rule.condition_max:
        return False
    return True


def fixed_amount(rule: DiscountRule, units: Decimal) -> Decimal:
    if rule.apply_fixed_once:
        return rule.amount
    return rule.amount * units


def percentage_amount(rule: DiscountRule, base_value: Decimal) -> Decimal:
    # Процент всегда от полной суммы строки, не от единицы
    return base_value * (rule.amount / HUNDRED)


def calculate_rule_discount(rule: DiscountRule, base_value: Decimal, units: Decimal) -> Decimal:
    """Рассчитать скидку правила (без проверки условий)"""
    if rule.kind == DiscountKind.PERCENTAGE:
        return to_money(percentage_amount(rule, base_value))
    elif rule.kind == DiscountKind.FIXED:
        return to_money(fixed_amount(rule, units))
    return ZERO


def evaluate_rule(rule: Optional[DiscountRule], measured: Decimal, base_value: Decimal, units: Decimal) -> Decimal:
    """Скидка правила или 0, если оно выключено или условие не выполнено"""
    if not rule or not rule.is_enabled:
        return ZERO
    if not condition_met(rule, measured):
        return ZERO
    return calculate_rule_discount(rule, base_value, units)


def calculate_buy_get_discount(rule: BuyGetRule, unit_price: Decimal, units: Decimal) -> Decimal:
    """Скидка на units единиц товара по правилу buy-get"""
    if units <= 0:
        return ZERO

    max_discount = unit_price * units
    if rule.kind == BuyGetKind.FREE:
        discount = max_discount
    elif rule.kind == BuyGetKind.PERCENTAGE:
        discount = unit_price * (rule.amount / HUNDRED) * units
    else:
        discount = rule.amount * units

    return to_money(min(discount, max_discount))
