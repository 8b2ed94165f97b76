import logging
from datetime import datetime
from typing import List, Optional
from fastapi import HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select
from pos_discounts.models.campaign import CampaignRecord, utc_now
from pos_discounts.schemas.rules import Campaign, aware_utc
from pos_discounts.schemas.campaign import CampaignCreate, CampaignUpdate, CampaignResponse
from pos_discounts.services.errors import ConfigurationError
from pos_discounts.services.validation import validate_campaign, duplicate_scopes

logger = logging.getLogger(__name__)


RULE_COLUMNS = (
    "product_configurations",
    "batch_configurations",
    "buy_get_rules",
    "default_rules",
    "cart_price_rule",
    "cart_quantity_rule",
)


def record_to_campaign(record: CampaignRecord) -> Campaign:
    """Снимок кампании для движка из записи БД"""
    return Campaign.model_validate(record_to_dict(record))


def record_to_dict(record: CampaignRecord) -> dict:
    data = record.model_dump()
    if not data.get("default_rules"):
        data["default_rules"] = {}
    return data


def build_campaign_response(record: CampaignRecord) -> CampaignResponse:
    return CampaignResponse.model_validate(record_to_dict(record))


def campaign_columns(campaign: Campaign) -> dict:
    """Поля записи из схемы: правила сериализуются в JSON"""
    data = campaign.model_dump(mode="json", include=set(RULE_COLUMNS))
    data.update(campaign.model_dump(exclude=set(RULE_COLUMNS) | {"id"}))
    for key in ("valid_from", "valid_to"):
        if data.get(key):
            data[key] = aware_utc(data[key])
    return data


def ensure_writable(campaign: Campaign) -> None:
    """Проверка на границе записи: корректные правила и уникальные ключи"""
    try:
        validate_campaign(campaign)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=exc.problems)

    duplicates = duplicate_scopes(campaign)
    if duplicates:
        raise HTTPException(
            status_code=400,
            detail=[f"Duplicate configuration for {key}" for key in duplicates],
        )


def get_campaigns(db: Session, skip: int = 0, limit: int = 50) -> List[CampaignRecord]:
    stmt = select(CampaignRecord).offset(skip).limit(limit).order_by(CampaignRecord.id.desc())
    return list(db.exec(stmt).all())


def get_active_campaign(db: Session, now: Optional[datetime] = None) -> Optional[CampaignRecord]:
    """
    Кампания для оценки: активная и в окне действия.
    Обычная кампания важнее кампании по умолчанию, новая важнее старой.
    """
    now = aware_utc(now) if now else utc_now()

    stmt = select(CampaignRecord).where(
        CampaignRecord.is_active == True,
        (CampaignRecord.valid_from == None) | (CampaignRecord.valid_from <= now),
        (CampaignRecord.valid_to == None) | (CampaignRecord.valid_to >= now),
    ).order_by(CampaignRecord.is_default, CampaignRecord.id.desc())

    return db.exec(stmt).first()


def create_campaign(db: Session, data: CampaignCreate) -> CampaignRecord:
    ensure_writable(data)

    record = CampaignRecord(**campaign_columns(data))
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info("Campaign created: %s - %s", record.id, record.name)
    return record


def update_campaign(db: Session, record: CampaignRecord, data: CampaignUpdate) -> CampaignRecord:
    update_data = data.model_dump(exclude_unset=True)

    merged = record_to_dict(record)
    merged.update(update_data)
    for key in ("product_configurations", "batch_configurations", "buy_get_rules"):
        merged[key] = merged.get(key) or []
    merged["default_rules"] = merged.get("default_rules") or {}
    try:
        campaign = Campaign.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail=[f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()],
        )
    ensure_writable(campaign)

    columns = campaign_columns(campaign)
    for key in update_data:
        setattr(record, key, columns[key])
    record.updated_at = utc_now()

    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info("Campaign updated: %s - %s", record.id, record.name)
    return record
