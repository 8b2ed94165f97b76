from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from pos_discounts.schemas.rules import (
    Campaign, DiscountRule, RuleBundle,
    ProductConfiguration, BatchConfiguration, BuyGetRule,
)


class CampaignResponse(Campaign):
    id: int
    created_at: datetime
    updated_at: datetime


class CampaignCreate(Campaign):
    pass


class CampaignUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None
    is_one_time_per_transaction: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    product_configurations: Optional[List[ProductConfiguration]] = None
    batch_configurations: Optional[List[BatchConfiguration]] = None
    buy_get_rules: Optional[List[BuyGetRule]] = None
    default_rules: Optional[RuleBundle] = None
    cart_price_rule: Optional[DiscountRule] = None
    cart_quantity_rule: Optional[DiscountRule] = None
