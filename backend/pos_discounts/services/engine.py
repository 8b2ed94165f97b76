"""
Движок скидок кассы.

evaluate_cart является чистой функцией: снимок корзины + снимок кампании ->
DiscountResult. Всё изменяемое состояние (учёт "один раз за
транзакцию", предупреждения) живёт в EvaluationContext этого вызова.

Порядок:
1. Проверка конфигурации (ConfigurationError -> status="error")
2. Разрешение правил по уровням custom > batch > product > default
3. Скидки строк (+ buy-get)
4. Правила корзины по сумме после скидок строк
5. Сборка результата
"""
import logging
from datetime import datetime
from typing import Optional, Sequence
from pos_discounts.schemas.rules import Campaign
from pos_discounts.schemas.cart import LineItem
from pos_discounts.schemas.result import DiscountResult
from pos_discounts.services.assembler import assemble_error, assemble_result
from pos_discounts.services.cart_evaluator import evaluate_cart_rules
from pos_discounts.services.errors import ConfigurationError, CAMPAIGN_NOT_ACTIVE, NO_CAMPAIGN
from pos_discounts.services.line_evaluator import evaluate_line
from pos_discounts.services.resolver import build_tiers, resolve_buy_get, resolve_line
from pos_discounts.services.tracker import EvaluationContext
from pos_discounts.services.validation import validate_campaign

logger = logging.getLogger(__name__)


def _line_id(item: LineItem, index: int) -> str:
    return item.line_id or str(index)


def _undiscounted(items: Sequence[LineItem], campaign: Optional[Campaign], context: EvaluationContext) -> DiscountResult:
    lines = [
        evaluate_line(item, _line_id(item, index), {}, [], context)
        for index, item in enumerate(items)
    ]
    return assemble_result(campaign, lines, [], context)


def evaluate_cart(
    items: Sequence[LineItem],
    campaign: Optional[Campaign],
    evaluated_at: Optional[datetime] = None,
    context: Optional[EvaluationContext] = None,
) -> DiscountResult:
    """Рассчитать скидки корзины по активной кампании"""
    items = list(items)
    context = context or EvaluationContext.for_campaign(campaign, evaluated_at)

    try:
        validate_campaign(campaign, items)
    except ConfigurationError as exc:
        logger.warning("Campaign configuration rejected: %s", exc)
        return assemble_error(campaign, items, exc.problems)

    if campaign is None:
        context.warn(NO_CAMPAIGN, "No active campaign, prices are not discounted")
        return _undiscounted(items, None, context)

    if not campaign.is_active_at(context.evaluated_at):
        context.warn(CAMPAIGN_NOT_ACTIVE, f"Campaign '{campaign.name}' is not active at {context.evaluated_at.isoformat()}")
        return _undiscounted(items, campaign, context)

    logger.debug(
        "Evaluating campaign '%s' for %d lines, one-time deal is %s",
        campaign.name, len(items), "ACTIVE" if context.one_time else "INACTIVE",
    )

    tiers = build_tiers(campaign, context)
    allocations = resolve_buy_get(items, campaign, context)

    lines = []
    for index, item in enumerate(items):
        line_id = _line_id(item, index)
        bindings = resolve_line(item, line_id, tiers)
        lines.append(evaluate_line(item, line_id, bindings, allocations.get(index, []), context))

    cart_discounts = evaluate_cart_rules(campaign, lines)

    return assemble_result(campaign, lines, cart_discounts, context)
