from .rules import (
    DiscountKind, BuyGetKind, RuleCategory, Tier,
    DiscountRule, RuleBundle, ProductConfiguration, BatchConfiguration,
    BuyGetRule, Campaign,
)
from .cart import CustomDiscount, LineItem, EvaluateRequest
from .result import (
    EvaluationStatus, EvaluationWarning, AppliedDiscount,
    LineDiscount, AppliedRuleSummary, DiscountResult,
)
from .campaign import CampaignResponse, CampaignCreate, CampaignUpdate

__all__ = [
    "DiscountKind", "BuyGetKind", "RuleCategory", "Tier",
    "DiscountRule", "RuleBundle", "ProductConfiguration", "BatchConfiguration",
    "BuyGetRule", "Campaign",
    "CustomDiscount", "LineItem", "EvaluateRequest",
    "EvaluationStatus", "EvaluationWarning", "AppliedDiscount",
    "LineDiscount", "AppliedRuleSummary", "DiscountResult",
    "CampaignResponse", "CampaignCreate", "CampaignUpdate",
]
