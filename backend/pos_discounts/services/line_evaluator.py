import logging
from decimal import Decimal
from typing import Dict, List
from pos_discounts.schemas.rules import DiscountKind, RuleCategory, Tier, LINE_CATEGORIES
from pos_discounts.schemas.cart import LineItem
from pos_discounts.schemas.result import AppliedDiscount, LineDiscount
from pos_discounts.services.resolver import ResolvedRule, BuyGetAllocation
from pos_discounts.services.rules import (
    ZERO, to_money, evaluate_rule, calculate_buy_get_discount,
)
from pos_discounts.services.tracker import EvaluationContext

logger = logging.getLogger(__name__)


# Какое значение строки проверяется условием правила
MEASURES = {
    RuleCategory.VALUE: lambda item: item.line_total,
    RuleCategory.QUANTITY: lambda item: item.quantity,
    RuleCategory.QUANTITY_THRESHOLD: lambda item: item.quantity,
    RuleCategory.UNIT_PRICE_THRESHOLD: lambda item: item.unit_price,
}


def _cap(entry: AppliedDiscount, remaining: Decimal) -> AppliedDiscount:
    """Урезать вклад до остатка строки, чтобы сумма не ушла в минус"""
    if entry.amount > remaining:
        entry.amount = remaining
        entry.capped = True
    return entry


def _category_discount(
    item: LineItem,
    resolved: ResolvedRule,
    remaining: Decimal,
    context: EvaluationContext,
) -> AppliedDiscount | None:
    rule = resolved.rule
    amount = evaluate_rule(rule, MEASURES[resolved.category](item), item.line_total, item.quantity)
    if amount <= 0:
        return None

    tracked = resolved.tier != Tier.CUSTOM and context.one_time
    applied_once = tracked or (rule.kind == DiscountKind.FIXED and rule.apply_fixed_once)

    entry = _cap(AppliedDiscount(
        rule_id=resolved.identity,
        rule_name=rule.name,
        category=resolved.category,
        tier=resolved.tier,
        amount=amount,
        applied_once=applied_once,
        description=f"{resolved.tier.value.capitalize()} {resolved.category.value} rule '{rule.name}' applied.",
    ), remaining)

    # Вклад, урезанный до нуля, не расходует правило
    if tracked and entry.amount > 0 and not context.tracker.claim(resolved.identity):
        logger.debug("Rule %s already applied in this transaction, skipping", resolved.identity)
        entry.amount = ZERO
        entry.already_applied = True
        entry.description = f"Rule '{rule.name}' already applied in this transaction."

    return entry


def _buy_get_discount(
    item: LineItem,
    allocation: BuyGetAllocation,
    remaining: Decimal,
    context: EvaluationContext,
) -> AppliedDiscount | None:
    rule = allocation.rule
    amount = calculate_buy_get_discount(rule, item.unit_price, allocation.units)
    if amount <= 0:
        return None

    return _cap(AppliedDiscount(
        rule_id=f"buy_get:{rule.id}",
        rule_name=rule.name,
        category=RuleCategory.BUY_GET,
        amount=amount,
        applied_once=not rule.is_repeatable or context.one_time,
        units=allocation.units,
        description=f"Offer: {rule.name}",
    ), remaining)


def evaluate_line(
    item: LineItem,
    line_id: str,
    bindings: Dict[RuleCategory, ResolvedRule],
    allocations: List[BuyGetAllocation],
    context: EvaluationContext,
) -> LineDiscount:
    """Скидки одной строки в порядке: value, quantity, пороги, buy-get"""
    line_total = to_money(item.line_total)
    remaining = line_total
    entries = []

    for category in LINE_CATEGORIES:
        resolved = bindings.get(category)
        if resolved is None:
            continue
        entry = _category_discount(item, resolved, remaining, context)
        if entry:
            entries.append(entry)
            remaining -= entry.amount

    for allocation in allocations:
        entry = _buy_get_discount(item, allocation, remaining, context)
        if entry:
            entries.append(entry)
            remaining -= entry.amount

    capped = any(e.capped for e in entries)
    discount = line_total - remaining

    return LineDiscount(
        line_id=line_id,
        product_id=item.product_id,
        batch_id=item.batch_id,
        quantity=item.quantity,
        unit_price=item.unit_price,
        line_total=line_total,
        discount=discount,
        net_total=line_total - discount,
        capped=capped,
        applied=entries,
    )
