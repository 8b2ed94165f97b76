from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum


class DiscountKind(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class BuyGetKind(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    FREE = "free"


class RuleCategory(str, Enum):
    VALUE = "value"
    QUANTITY = "quantity"
    QUANTITY_THRESHOLD = "quantity_threshold"
    UNIT_PRICE_THRESHOLD = "unit_price_threshold"
    BUY_GET = "buy_get"
    CART_PRICE = "cart_price"
    CART_QUANTITY = "cart_quantity"


# Порядок оценки категорий на строке
LINE_CATEGORIES = (
    RuleCategory.VALUE,
    RuleCategory.QUANTITY,
    RuleCategory.QUANTITY_THRESHOLD,
    RuleCategory.UNIT_PRICE_THRESHOLD,
)

THRESHOLD_CATEGORIES = (
    RuleCategory.QUANTITY_THRESHOLD,
    RuleCategory.UNIT_PRICE_THRESHOLD,
)


class Tier(str, Enum):
    CUSTOM = "custom"
    BATCH = "batch"
    PRODUCT = "product"
    DEFAULT = "default"
    CART = "cart"


class DiscountRule(BaseModel):
    """Правило скидки (любая категория строки или корзины)"""
    name: str
    is_enabled: bool = True
    kind: DiscountKind
    amount: Decimal
    condition_min: Optional[Decimal] = None
    condition_max: Optional[Decimal] = None
    apply_fixed_once: bool = False


class RuleBundle(BaseModel):
    """Набор слотов правил: по одному на категорию"""
    value_rule: Optional[DiscountRule] = None
    quantity_rule: Optional[DiscountRule] = None
    quantity_threshold_rule: Optional[DiscountRule] = None
    unit_price_threshold_rule: Optional[DiscountRule] = None

    def rule_for(self, category: RuleCategory) -> Optional[DiscountRule]:
        return getattr(self, f"{category.value}_rule", None)

    def rules(self):
        for category in LINE_CATEGORIES:
            rule = self.rule_for(category)
            if rule is not None:
                yield category, rule


class ProductConfiguration(RuleBundle):
    id: Optional[str] = None
    product_id: str
    is_active: bool = True


class BatchConfiguration(RuleBundle):
    id: Optional[str] = None
    batch_id: str
    is_active: bool = True


class BuyGetRule(BaseModel):
    """Купи N, получи M"""
    id: str
    name: str
    is_enabled: bool = True
    buy_product_id: str
    buy_quantity: Decimal
    get_product_id: str
    get_quantity: Decimal
    kind: BuyGetKind = BuyGetKind.FREE
    amount: Decimal = Decimal("0")
    is_repeatable: bool = True


def naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def aware_utc(moment: datetime) -> datetime:
    """Наивное время считается UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class Campaign(BaseModel):
    """Снимок кампании, передаваемый в движок"""
    id: Optional[int] = None
    name: str
    description: Optional[str] = None

    is_active: bool = True
    is_default: bool = False
    is_one_time_per_transaction: bool = False

    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None

    product_configurations: List[ProductConfiguration] = []
    batch_configurations: List[BatchConfiguration] = []
    buy_get_rules: List[BuyGetRule] = []

    default_rules: RuleBundle = RuleBundle()
    cart_price_rule: Optional[DiscountRule] = None
    cart_quantity_rule: Optional[DiscountRule] = None

    def is_active_at(self, moment: datetime) -> bool:
        if not self.is_active:
            return False
        moment = naive_utc(moment)
        if self.valid_from and naive_utc(self.valid_from) > moment:
            return False
        if self.valid_to and naive_utc(self.valid_to) < moment:
            return False
        return True
