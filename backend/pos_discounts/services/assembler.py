from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
from pos_discounts.schemas.rules import Campaign
from pos_discounts.schemas.cart import LineItem
from pos_discounts.schemas.result import (
    AppliedDiscount, AppliedRuleSummary, DiscountResult, EvaluationStatus, LineDiscount,
)
from pos_discounts.services.rules import ZERO, to_money
from pos_discounts.services.tracker import EvaluationContext


def summarize_rules(
    lines: Sequence[LineDiscount],
    cart_discounts: Sequence[AppliedDiscount],
) -> List[AppliedRuleSummary]:
    """Плоский список сработавших правил для аудита/UI"""
    summary: Dict[Tuple[str, Optional[str]], AppliedRuleSummary] = {}

    entries = [(entry, line.product_id) for line in lines for entry in line.applied]
    entries += [(entry, None) for entry in cart_discounts]

    for entry, product_id in entries:
        if entry.amount <= 0:
            continue
        key = (entry.rule_id, product_id)
        if key in summary:
            summary[key].total_amount += entry.amount
            summary[key].occurrences += 1
            continue
        summary[key] = AppliedRuleSummary(
            rule_id=entry.rule_id,
            source_rule_name=entry.rule_name,
            category=entry.category,
            tier=entry.tier,
            product_id=product_id,
            applied_once=entry.applied_once,
            total_amount=entry.amount,
        )

    return list(summary.values())


def original_subtotal(items: Sequence[LineItem]) -> Decimal:
    return sum((to_money(item.line_total) for item in items), ZERO)


def assemble_result(
    campaign: Optional[Campaign],
    lines: Sequence[LineDiscount],
    cart_discounts: Sequence[AppliedDiscount],
    context: EvaluationContext,
) -> DiscountResult:
    subtotal = sum((line.line_total for line in lines), ZERO)
    item_discount = sum((line.discount for line in lines), ZERO)
    cart_discount = sum((d.amount for d in cart_discounts), ZERO)
    total_discount = item_discount + cart_discount

    result = DiscountResult(
        campaign_id=campaign.id if campaign else None,
        campaign_name=campaign.name if campaign else None,
        warnings=list(context.warnings),
        original_subtotal=subtotal,
        total_item_discount=item_discount,
        total_cart_discount=cart_discount,
        total_discount=total_discount,
        final_total=max(subtotal - total_discount, ZERO),
        lines=list(lines),
        cart_discounts=list(cart_discounts),
        applied_rules=summarize_rules(lines, cart_discounts),
    )
    # Результат не должен ссылаться на внутренние объекты оценки
    return result.model_copy(deep=True)


def assemble_error(
    campaign: Optional[Campaign],
    items: Sequence[LineItem],
    problems: List[str],
) -> DiscountResult:
    subtotal = original_subtotal(items)
    return DiscountResult(
        status=EvaluationStatus.ERROR,
        errors=list(problems),
        campaign_id=campaign.id if campaign else None,
        campaign_name=campaign.name if campaign else None,
        original_subtotal=subtotal,
        final_total=subtotal,
    )
