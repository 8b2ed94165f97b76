from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from pos_discounts.api.deps import get_db
from pos_discounts.models.campaign import CampaignRecord
from pos_discounts.schemas.cart import EvaluateRequest
from pos_discounts.schemas.result import DiscountResult
from pos_discounts.services.campaigns import get_active_campaign, record_to_campaign
from pos_discounts.services.engine import evaluate_cart

router = APIRouter(prefix="/api/discounts", tags=["discounts"])


@router.post("/evaluate", response_model=DiscountResult)
def evaluate(data: EvaluateRequest, db: Session = Depends(get_db)):
    """
    Рассчитать скидки корзины.
    Кампания: переданный снимок > campaign_id > активная кампания из БД.
    """
    campaign = data.campaign

    if campaign is None and data.campaign_id is not None:
        record = db.get(CampaignRecord, data.campaign_id)
        if not record:
            raise HTTPException(status_code=404, detail="Campaign not found")
        campaign = record_to_campaign(record)
    elif campaign is None:
        record = get_active_campaign(db, data.evaluated_at)
        campaign = record_to_campaign(record) if record else None

    return evaluate_cart(data.items, campaign, evaluated_at=data.evaluated_at)
