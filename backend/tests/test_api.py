from decimal import Decimal


CAMPAIGN = {
    "name": "Summer",
    "is_one_time_per_transaction": False,
    "product_configurations": [
        {"product_id": "A", "value_rule": {"name": "Ten percent", "kind": "percentage", "amount": "10"}},
    ],
    "cart_price_rule": {"name": "Big basket", "kind": "fixed", "amount": "5",
                        "condition_min": "100", "apply_fixed_once": True},
}

ITEMS = [{"product_id": "A", "quantity": "2", "unit_price": "60"}]


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_campaign_crud(client):
    response = client.post("/api/campaigns/", json=CAMPAIGN)
    assert response.status_code == 200
    created = response.json()
    assert created["id"]
    assert created["product_configurations"][0]["value_rule"]["name"] == "Ten percent"

    response = client.patch(f"/api/campaigns/{created['id']}", json={"name": "Summer sale"})
    assert response.status_code == 200
    assert response.json()["name"] == "Summer sale"
    assert response.json()["cart_price_rule"]["name"] == "Big basket"

    assert len(client.get("/api/campaigns/").json()) == 1
    assert client.get(f"/api/campaigns/{created['id']}").status_code == 200

    assert client.delete(f"/api/campaigns/{created['id']}").status_code == 200
    assert client.get(f"/api/campaigns/{created['id']}").status_code == 404


def test_invalid_campaign_is_rejected(client):
    bad = dict(CAMPAIGN, cart_price_rule={"name": "x", "kind": "percentage", "amount": "150"})
    response = client.post("/api/campaigns/", json=bad)
    assert response.status_code == 400

    duplicated = dict(CAMPAIGN, product_configurations=CAMPAIGN["product_configurations"] * 2)
    response = client.post("/api/campaigns/", json=duplicated)
    assert response.status_code == 400
    assert response.json()["detail"] == ["Duplicate configuration for product A"]


def test_active_campaign_prefers_regular_over_default(client):
    assert client.get("/api/campaigns/active").status_code == 404

    client.post("/api/campaigns/", json=dict(CAMPAIGN, name="Default", is_default=True))
    client.post("/api/campaigns/", json=CAMPAIGN)
    client.post("/api/campaigns/", json=dict(CAMPAIGN, name="Off", is_active=False))

    assert client.get("/api/campaigns/active").json()["name"] == "Summer"


def test_evaluate_with_stored_campaign(client):
    client.post("/api/campaigns/", json=CAMPAIGN)

    response = client.post("/api/discounts/evaluate", json={"items": ITEMS})
    assert response.status_code == 200
    result = response.json()

    assert result["status"] == "ok"
    assert Decimal(result["total_item_discount"]) == Decimal("12.00")
    # 120 - 12 = 108 >= 100
    assert Decimal(result["total_cart_discount"]) == Decimal("5.00")
    assert Decimal(result["final_total"]) == Decimal("103.00")
    assert [r["source_rule_name"] for r in result["applied_rules"]] == ["Ten percent", "Big basket"]


def test_evaluate_with_inline_campaign_and_unknown_id(client):
    response = client.post("/api/discounts/evaluate", json={"items": ITEMS, "campaign": CAMPAIGN})
    assert Decimal(response.json()["final_total"]) == Decimal("103.00")

    response = client.post("/api/discounts/evaluate", json={"items": ITEMS, "campaign_id": 999})
    assert response.status_code == 404


def test_evaluate_without_campaign(client):
    response = client.post("/api/discounts/evaluate", json={"items": ITEMS})
    result = response.json()

    assert Decimal(result["final_total"]) == Decimal("120.00")
    assert result["warnings"][0]["code"] == "no_campaign"


def test_evaluate_reports_configuration_error(client):
    bad = dict(CAMPAIGN, cart_price_rule={"name": "x", "kind": "fixed", "amount": "-5"})
    response = client.post("/api/discounts/evaluate", json={"items": ITEMS, "campaign": bad})

    assert response.status_code == 200
    assert response.json()["status"] == "error"


def test_update_with_invalid_value_is_rejected(client):
    created = client.post("/api/campaigns/", json=CAMPAIGN).json()

    response = client.patch(f"/api/campaigns/{created['id']}", json={"name": None})
    assert response.status_code == 400
    assert response.json()["detail"][0].startswith("name:")

    assert client.get(f"/api/campaigns/{created['id']}").json()["name"] == "Summer"


def test_active_campaign_respects_validity_window(client):
    client.post("/api/campaigns/", json=dict(CAMPAIGN, name="Current", valid_from="2020-01-01T00:00:00+03:00"))
    client.post("/api/campaigns/", json=dict(CAMPAIGN, name="Past", valid_to="2020-01-01T00:00:00Z"))

    assert client.get("/api/campaigns/active").json()["name"] == "Current"
