import pytest

from app.exceptions import ProtectedRuleError, ValidationError
from app.models.price_rule_model import PriceRule
from app.services import price_rule_service

RULE_PAYLOAD = {
    "name": "2025 summer",
    "chinese_price": 110,
    "non_chinese_base_price": 90,
    "non_chinese_discount_new": 80,
    "non_chinese_discount_old": 75,
    "non_chinese_four_sub_price": 70,
}


def active_ids(db):
    db.expire_all()
    return [r.rule_id for r in db.query(PriceRule).filter(PriceRule.is_active.is_(True)).all()]


def test_seed_creates_active_locked_rule_once(db):
    rule = price_rule_service.seed_default_price_rule(db)
    assert rule.is_active and rule.is_locked
    assert rule.chinese_price == 100
    assert rule.non_chinese_four_sub_price == 72
    assert price_rule_service.seed_default_price_rule(db) is None


def test_activate_is_exclusive_and_idempotent(db, default_rule):
    other = price_rule_service.clone(db, default_rule.rule_id)
    third = price_rule_service.clone(db, default_rule.rule_id)

    price_rule_service.activate(db, other.rule_id)
    assert active_ids(db) == [other.rule_id]

    price_rule_service.activate(db, other.rule_id)
    assert active_ids(db) == [other.rule_id]

    price_rule_service.activate(db, third.rule_id)
    assert active_ids(db) == [third.rule_id]


def test_activate_unknown_rule_is_noop(db, default_rule):
    assert price_rule_service.activate(db, 999) is None
    assert active_ids(db) == [default_rule.rule_id]


def test_clone_copies_prices_and_resets_flags(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id, name="copy")

    assert clone.rule_id != default_rule.rule_id
    assert clone.name == "copy"
    assert clone.is_active is False
    assert clone.is_locked is False
    assert clone.chinese_price == default_rule.chinese_price
    assert clone.non_chinese_discount_old == default_rule.non_chinese_discount_old
    assert clone.created_at is not None


def test_locked_rule_rejects_price_edit(db, default_rule):
    with pytest.raises(ProtectedRuleError):
        price_rule_service.update_field(db, default_rule.rule_id, "chinese_price", 120)
    db.refresh(default_rule)
    assert default_rule.chinese_price == 100


def test_locked_rule_can_be_unlocked_then_edited(db, default_rule):
    price_rule_service.update_field(db, default_rule.rule_id, "is_locked", False)
    rule = price_rule_service.update_field(db, default_rule.rule_id, "chinese_price", 120)
    assert rule.chinese_price == 120


def test_update_is_active_routes_through_activate(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    price_rule_service.update_field(db, clone.rule_id, "is_active", True)
    assert active_ids(db) == [clone.rule_id]


def test_update_rejects_unknown_field_and_bad_value(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    with pytest.raises(ValidationError):
        price_rule_service.update_field(db, clone.rule_id, "rule_id", 5)
    with pytest.raises(ValidationError):
        price_rule_service.update_field(db, clone.rule_id, "chinese_price", "abc")
    with pytest.raises(ValidationError):
        price_rule_service.update_field(db, clone.rule_id, "chinese_price", -1)


def test_delete_active_rule_fails_and_store_unchanged(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    with pytest.raises(ProtectedRuleError):
        price_rule_service.delete(db, default_rule.rule_id)

    db.expire_all()
    assert db.query(PriceRule).count() == 2
    assert active_ids(db) == [default_rule.rule_id]
    assert clone.rule_id in [r.rule_id for r in db.query(PriceRule).all()]


def test_delete_inactive_rule_and_fallback_selection(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    price_rule_service.delete(db, clone.rule_id)

    assert db.query(PriceRule).count() == 1
    assert price_rule_service.fallback_selection(db, clone.rule_id, clone.rule_id) == default_rule.rule_id
    assert price_rule_service.fallback_selection(db, default_rule.rule_id, clone.rule_id) == default_rule.rule_id


def test_fallback_selection_empty_store(db):
    assert price_rule_service.fallback_selection(db, 1, 1) is None


def test_resolve_default_rule_falls_back_to_first(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    price_rule_service.update_field(db, default_rule.rule_id, "is_active", False)

    assert price_rule_service.resolve_default_rule(db).rule_id == default_rule.rule_id
    price_rule_service.activate(db, clone.rule_id)
    assert price_rule_service.resolve_default_rule(db).rule_id == clone.rule_id


# --- API ---

def test_api_create_and_list_rules(client, default_rule):
    response = client.post("/api/v1/price_rules/", json=RULE_PAYLOAD)
    assert response.status_code == 201
    assert response.json()["is_active"] is False

    rules = client.get("/api/v1/price_rules/").json()
    assert [r["name"] for r in rules] == ["2024年标准价格体系", "2025 summer"]


def test_api_delete_active_rule_returns_conflict(client, default_rule):
    response = client.delete(f"/api/v1/price_rules/{default_rule.rule_id}")
    assert response.status_code == 409
    assert len(client.get("/api/v1/price_rules/").json()) == 1


def test_api_locked_rule_edit_returns_conflict(client, default_rule):
    response = client.patch(
        f"/api/v1/price_rules/{default_rule.rule_id}",
        json={"field": "name", "value": "renamed"},
    )
    assert response.status_code == 409


def test_api_clone_activate_delete_flow(client, default_rule):
    clone = client.post(f"/api/v1/price_rules/{default_rule.rule_id}/clone", json={"name": "v2"}).json()
    assert clone["name"] == "v2"

    activated = client.post(f"/api/v1/price_rules/{clone['rule_id']}/activate").json()
    assert activated["is_active"] is True
    assert client.get("/api/v1/price_rules/default").json()["rule_id"] == clone["rule_id"]

    response = client.delete(
        f"/api/v1/price_rules/{default_rule.rule_id}",
        params={"selected_rule_id": default_rule.rule_id},
    )
    assert response.status_code == 200
    assert response.json()["selected_rule_id"] == clone["rule_id"]


def test_api_unknown_rule_returns_404(client, default_rule):
    assert client.get("/api/v1/price_rules/999").status_code == 404
    assert client.post("/api/v1/price_rules/999/activate").status_code == 404
    assert client.delete("/api/v1/price_rules/999").status_code == 404


def test_update_rejects_non_finite_values(db, default_rule):
    clone = price_rule_service.clone(db, default_rule.rule_id)
    for value in ("nan", "inf", "-inf", float("nan"), float("inf")):
        with pytest.raises(ValidationError):
            price_rule_service.update_field(db, clone.rule_id, "chinese_price", value)

    db.expire_all()
    assert db.get(PriceRule, clone.rule_id).chinese_price == default_rule.chinese_price


def test_api_patch_non_finite_value_returns_400(client, default_rule):
    clone = client.post(f"/api/v1/price_rules/{default_rule.rule_id}/clone").json()
    for value in ("nan", "inf", "-inf"):
        response = client.patch(
            f"/api/v1/price_rules/{clone['rule_id']}",
            json={"field": "chinese_price", "value": value},
        )
        assert response.status_code == 400, value

    assert client.get(f"/api/v1/price_rules/{clone['rule_id']}").json()["chinese_price"] == 100


def test_api_create_rule_rejects_non_finite_price(client, default_rule):
    response = client.post("/api/v1/price_rules/", json={**RULE_PAYLOAD, "chinese_price": "nan"})
    assert response.status_code == 422
    assert len(client.get("/api/v1/price_rules/").json()) == 1


def test_api_delete_rule_reports_utc_timestamp(client, default_rule):
    clone = client.post(f"/api/v1/price_rules/{default_rule.rule_id}/clone").json()
    response = client.delete(f"/api/v1/price_rules/{clone['rule_id']}")
    assert response.status_code == 200
    assert response.json()["deleted_at"].endswith("+00:00")
