import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from pos_discounts.schemas.rules import (
    Campaign, DiscountRule, RuleBundle, BuyGetRule,
    RuleCategory, Tier, LINE_CATEGORIES,
)
from pos_discounts.schemas.cart import LineItem
from pos_discounts.services.errors import RESOLUTION_AMBIGUITY
from pos_discounts.services.tracker import EvaluationContext

logger = logging.getLogger(__name__)


DEFAULT_SCOPE = "*"


@dataclass(frozen=True)
class ResolvedRule:
    """Правило, победившее для категории на конкретной строке"""
    rule: DiscountRule
    category: RuleCategory
    tier: Tier
    scope_key: Optional[str]

    @property
    def identity(self) -> str:
        return f"{self.tier.value}:{self.scope_key}:{self.category.value}"


@dataclass(frozen=True)
class BuyGetAllocation:
    rule: BuyGetRule
    units: Decimal


@dataclass
class TierTable:
    tier: Tier
    bundles: Dict[str, RuleBundle]
    scope_key: Callable[[LineItem], Optional[str]]

    def lookup(self, item: LineItem) -> Tuple[Optional[str], Optional[RuleBundle]]:
        key = self.scope_key(item)
        if key is None:
            return None, None
        return key, self.bundles.get(key)


def _index_configs(tier: Tier, configs, key_attr: str, context: EvaluationContext) -> Dict[str, RuleBundle]:
    """Активные конфигурации по ключу; при дубликате побеждает последняя"""
    bundles = {}
    for config in configs:
        if not config.is_active:
            continue
        key = getattr(config, key_attr)
        if key in bundles:
            context.warn(
                RESOLUTION_AMBIGUITY,
                f"Multiple {tier.value} configurations for '{key}', using the last defined",
            )
        bundles[key] = config
    return bundles


def build_tiers(campaign: Campaign, context: EvaluationContext) -> List[TierTable]:
    """
    Упорядоченный список уровней: batch > product > default.
    Custom не входит в список, он задаётся на самой строке.
    """
    return [
        TierTable(
            tier=Tier.BATCH,
            bundles=_index_configs(Tier.BATCH, campaign.batch_configurations, "batch_id", context),
            scope_key=lambda item: item.batch_id,
        ),
        TierTable(
            tier=Tier.PRODUCT,
            bundles=_index_configs(Tier.PRODUCT, campaign.product_configurations, "product_id", context),
            scope_key=lambda item: item.product_id,
        ),
        TierTable(
            tier=Tier.DEFAULT,
            bundles={DEFAULT_SCOPE: campaign.default_rules},
            scope_key=lambda item: DEFAULT_SCOPE,
        ),
    ]


def custom_rule(item: LineItem, line_id: str) -> Optional[ResolvedRule]:
    custom = item.custom_discount
    if custom is None:
        return None

    rule = DiscountRule(
        name=f"Custom {custom.kind.value} discount",
        kind=custom.kind,
        amount=custom.amount,
        apply_fixed_once=custom.apply_fixed_once,
    )
    return ResolvedRule(rule=rule, category=custom.category, tier=Tier.CUSTOM, scope_key=line_id)


def resolve_line(item: LineItem, line_id: str, tiers: Sequence[TierTable]) -> Dict[RuleCategory, ResolvedRule]:
    """Для каждой категории: первое включённое правило по приоритету уровней"""
    bindings = {}

    custom = custom_rule(item, line_id)
    if custom:
        bindings[custom.category] = custom

    for category in LINE_CATEGORIES:
        if category in bindings:
            continue

        for table in tiers:
            key, bundle = table.lookup(item)
            if bundle is None:
                continue
            rule = bundle.rule_for(category)
            if rule is not None and rule.is_enabled:
                bindings[category] = ResolvedRule(rule=rule, category=category, tier=table.tier, scope_key=key)
                break

    logger.debug(
        "Line %s resolved: %s",
        line_id,
        {c.value: f"{r.tier.value}/{r.rule.name}" for c, r in bindings.items()},
    )
    return bindings


def resolve_buy_get(
    items: Sequence[LineItem],
    campaign: Campaign,
    context: EvaluationContext,
) -> Dict[int, List[BuyGetAllocation]]:
    """
    Распределить бесплатные/льготные единицы по строкам.
    Возвращает {индекс строки: [аллокации]} в порядке корзины.
    """
    allocations: Dict[int, List[BuyGetAllocation]] = {}

    for rule in campaign.buy_get_rules:
        if not rule.is_enabled:
            continue

        total_bought = sum(
            (item.quantity for item in items if item.product_id == rule.buy_product_id),
            Decimal("0"),
        )
        if total_bought < rule.buy_quantity:
            continue

        # Флаг кампании "один раз за транзакцию" сильнее настройки самого правила
        if rule.is_repeatable and not context.one_time:
            applications = total_bought // rule.buy_quantity
        else:
            applications = Decimal("1")

        units_left = applications * rule.get_quantity
        for index, item in enumerate(items):
            if units_left <= 0:
                break
            if item.product_id != rule.get_product_id:
                continue
            units = min(item.quantity, units_left)
            allocations.setdefault(index, []).append(BuyGetAllocation(rule=rule, units=units))
            units_left -= units

    return allocations
