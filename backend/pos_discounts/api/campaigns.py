from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from typing import List
from pos_discounts.api.deps import get_db
from pos_discounts.models.campaign import CampaignRecord
from pos_discounts.schemas.campaign import CampaignResponse, CampaignCreate, CampaignUpdate
from pos_discounts.services.campaigns import (
    build_campaign_response, create_campaign, get_active_campaign, get_campaigns, update_campaign,
)

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


@router.get("/active", response_model=CampaignResponse)
def get_active(db: Session = Depends(get_db)):
    """Кампания, которая сейчас применяется к продажам"""
    record = get_active_campaign(db)
    if not record:
        raise HTTPException(status_code=404, detail="No active campaign")
    return build_campaign_response(record)


@router.get("/", response_model=List[CampaignResponse])
def list_campaigns(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    return [build_campaign_response(record) for record in get_campaigns(db, skip, limit)]


@router.get("/{campaign_id}", response_model=CampaignResponse)
def get_campaign(campaign_id: int, db: Session = Depends(get_db)):
    record = db.get(CampaignRecord, campaign_id)
    if not record:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return build_campaign_response(record)


@router.post("/", response_model=CampaignResponse)
def create(data: CampaignCreate, db: Session = Depends(get_db)):
    """Создать кампанию (правила проверяются до записи)"""
    return build_campaign_response(create_campaign(db, data))


@router.patch("/{campaign_id}", response_model=CampaignResponse)
def update(campaign_id: int, data: CampaignUpdate, db: Session = Depends(get_db)):
    record = db.get(CampaignRecord, campaign_id)
    if not record:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return build_campaign_response(update_campaign(db, record, data))


@router.delete("/{campaign_id}")
def delete_campaign(campaign_id: int, db: Session = Depends(get_db)):
    record = db.get(CampaignRecord, campaign_id)
    if not record:
        raise HTTPException(status_code=404, detail="Campaign not found")

    db.delete(record)
    db.commit()
    return {"message": "Campaign deleted"}
