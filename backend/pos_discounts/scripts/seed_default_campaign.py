"""
Seed-скрипт: создание таблиц и кампании по умолчанию, если её нет
Запуск: python -m pos_discounts.scripts.seed_default_campaign
"""
from decimal import Decimal
from sqlmodel import SQLModel, Session, select
from pos_discounts.db.session import engine
from pos_discounts.models.campaign import CampaignRecord
from pos_discounts.schemas.campaign import CampaignCreate
from pos_discounts.schemas.rules import DiscountKind, DiscountRule, RuleBundle
from pos_discounts.services.campaigns import create_campaign
from pos_discounts.core.config import settings


def create_tables():
    """Создание всех таблиц"""
    SQLModel.metadata.create_all(engine)


def default_campaign() -> CampaignCreate:
    """Базовая скидка 2 на каждую строку; ручные и специальные правила её перекрывают"""
    return CampaignCreate(
        name=settings.DEFAULT_CAMPAIGN_NAME,
        description="A baseline discount on all items. Can be overridden by other campaigns or manual discounts.",
        is_active=True,
        is_default=True,
        is_one_time_per_transaction=True,
        default_rules=RuleBundle(
            value_rule=DiscountRule(
                name="Default 2% Item Discount",
                kind=DiscountKind.FIXED,
                amount=Decimal("2"),
                condition_min=Decimal("0"),
                apply_fixed_once=True,
            ),
        ),
    )


def seed_default_campaign():
    with Session(engine) as session:
        stmt = select(CampaignRecord).where(CampaignRecord.is_default == True)
        existing = session.exec(stmt).first()

        if existing:
            print(f"Default campaign already exists: {existing.name}")
            return

        record = create_campaign(session, default_campaign())
        print(f"Default campaign created: {record.name}")


def main():
    print("Creating tables...")
    create_tables()
    print("Seeding default campaign...")
    seed_default_campaign()
    print("Done!")


if __name__ == "__main__":
    main()
