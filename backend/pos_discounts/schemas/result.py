from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from enum import Enum
from pos_discounts.schemas.rules import RuleCategory, Tier


class EvaluationStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


class EvaluationWarning(BaseModel):
    code: str
    message: str


class AppliedDiscount(BaseModel):
    """Одна запись аудита: вклад конкретного правила"""
    rule_id: str
    rule_name: str
    category: RuleCategory
    tier: Optional[Tier] = None
    amount: Decimal
    applied_once: bool = False
    already_applied: bool = False
    capped: bool = False
    units: Optional[Decimal] = None  # для buy-get: сколько единиц со скидкой
    description: str = ""


class LineDiscount(BaseModel):
    line_id: str
    product_id: str
    batch_id: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    discount: Decimal
    net_total: Decimal
    capped: bool = False
    applied: List[AppliedDiscount] = []


class AppliedRuleSummary(BaseModel):
    rule_id: str
    source_rule_name: str
    category: RuleCategory
    tier: Optional[Tier] = None
    product_id: Optional[str] = None
    applied_once: bool = False
    occurrences: int = 1
    total_amount: Decimal


class DiscountResult(BaseModel):
    status: EvaluationStatus = EvaluationStatus.OK
    errors: List[str] = []
    warnings: List[EvaluationWarning] = []

    campaign_id: Optional[int] = None
    campaign_name: Optional[str] = None

    original_subtotal: Decimal = Decimal("0.00")
    total_item_discount: Decimal = Decimal("0.00")
    total_cart_discount: Decimal = Decimal("0.00")
    total_discount: Decimal = Decimal("0.00")
    final_total: Decimal = Decimal("0.00")

    lines: List[LineDiscount] = []
    cart_discounts: List[AppliedDiscount] = []
    applied_rules: List[AppliedRuleSummary] = []

    @property
    def is_ok(self) -> bool:
        return self.status == EvaluationStatus.OK
