from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, List
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CampaignRecord(SQLModel, table=True):
    __tablename__ = "campaigns"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None

    is_active: bool = Field(default=True)
    is_default: bool = Field(default=False)
    is_one_time_per_transaction: bool = Field(default=False)

    # Время хранится в UTC с часовым поясом
    valid_from: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    valid_to: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Правила хранятся как JSON-снимки схем из schemas.rules
    product_configurations: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    batch_configurations: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    buy_get_rules: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    default_rules: dict = Field(default_factory=dict, sa_column=Column(JSON))
    cart_price_rule: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    cart_quantity_rule: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
