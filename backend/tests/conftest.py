from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from pos_discounts.main import app
from pos_discounts.api.deps import get_db
from pos_discounts.schemas import (
    Campaign, DiscountRule, DiscountKind, LineItem, RuleBundle,
)


def rule(kind="fixed", amount="10", name="rule", **kwargs) -> DiscountRule:
    return DiscountRule(name=name, kind=DiscountKind(kind), amount=Decimal(amount), **kwargs)


def line(product_id="A", price="100", quantity="1", **kwargs) -> LineItem:
    return LineItem(product_id=product_id, unit_price=Decimal(price), quantity=Decimal(quantity), **kwargs)


def campaign(**kwargs) -> Campaign:
    kwargs.setdefault("id", 1)
    kwargs.setdefault("name", "Test campaign")
    return Campaign(**kwargs)


@pytest.fixture
def default_campaign() -> Campaign:
    """Кампания по умолчанию: фикс. 2 один раз на строку"""
    return campaign(
        name="Default Discounts",
        is_default=True,
        default_rules=RuleBundle(
            value_rule=rule("fixed", "2", name="Default 2% Item Discount",
                            condition_min=Decimal("0"), apply_fixed_once=True),
        ),
    )


@pytest.fixture
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
