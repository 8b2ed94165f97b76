from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pos_discounts.schemas.rules import Campaign, DiscountKind, RuleCategory


class CustomDiscount(BaseModel):
    """Ручная скидка кассира на строку"""
    kind: DiscountKind
    amount: Decimal
    category: RuleCategory = RuleCategory.VALUE
    apply_fixed_once: bool = False


class LineItem(BaseModel):
    line_id: Optional[str] = None
    product_id: str
    batch_id: Optional[str] = None
    quantity: Decimal = Field(gt=0)  # уже в базовых единицах товара
    unit_price: Decimal = Field(ge=0)
    custom_discount: Optional[CustomDiscount] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class EvaluateRequest(BaseModel):
    items: List[LineItem]
    campaign: Optional[Campaign] = None
    campaign_id: Optional[int] = None
    evaluated_at: Optional[datetime] = None
