"""
Integration tests for the /me/usage endpoints and the require_credit dependency.
"""
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.core.credit_guard import require_credit
from app.core.exceptions import CreditLimitExceeded, TransientStoreError
from app.core.security import create_access_token
from app.db.models.user import User
from app.main import credit_limit_exceeded_handler
from app.services.usage_service import record_usage
from conftest import TestSessionLocal


def test_usage_requires_auth(client, plans):
    response = client.post("/me/usage/check")
    assert response.status_code == 401


def test_check_fresh_user(client, plans, auth_headers):
    response = client.post("/me/usage/check", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["can_process"] is True
    assert data["current_usage"] == 0
    assert data["limit"] == 5
    assert data["remaining"] == 5
    assert data["plan"] == "free"
    assert data["message"] is None


def test_record_then_check_exhausts_credits(client, plans, auth_headers):
    for kind in ["pdf", "pdf", "animation", "pdf", "animation"]:
        response = client.post("/me/usage/record", json={"kind": kind}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "error": None}

    response = client.post("/me/usage/check?lang=en", headers=auth_headers)

    data = response.json()
    assert data["can_process"] is False
    assert data["current_usage"] == 5
    assert data["limit"] == 5
    assert data["message"] == "You have used 5/5 credits this month. Please upgrade your plan to continue."


def test_limit_message_defaults_to_user_language(client, db, plans, test_user, auth_headers):
    for _ in range(5):
        record_usage(db, test_user.id, "pdf")

    data = client.post("/me/usage/check", headers=auth_headers).json()

    assert data["message"].startswith("Bu ay 5/5 kredi")


def test_record_rejects_unknown_kind(client, plans, auth_headers):
    response = client.post("/me/usage/record", json={"kind": "video"}, headers=auth_headers)
    assert response.status_code == 422


def test_record_failure_still_answers_200(client, plans, auth_headers, monkeypatch):
    from app.services.usage_service import RecordResult

    monkeypatch.setattr(
        "app.api.routes.usage.record_usage",
        lambda *args, **kwargs: RecordResult(success=False, error="Usage could not be recorded"),
    )

    response = client.post("/me/usage/record", json={"kind": "pdf"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["success"] is False


def test_usage_summary(client, db, plans, test_user, auth_headers):
    record_usage(db, test_user.id, "pdf")
    record_usage(db, test_user.id, "animation")

    response = client.get("/me/usage?lang=en", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "free"
    assert data["plan_display_name"] == "Free Plan"
    assert data["pdfs_processed"] == 1
    assert data["animations_created"] == 1
    assert data["current_usage"] == 2
    assert data["remaining"] == 3
    assert data["can_process"] is True


def test_missing_free_plan_returns_500(client, auth_headers):
    response = client.post("/me/usage/check", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "configuration_error"


def test_transient_failure_returns_503(client, plans, auth_headers, monkeypatch):
    def broken_usage(*args, **kwargs):
        raise TransientStoreError("Usage could not be read")

    monkeypatch.setattr("app.services.limit_policy.get_current_usage", broken_usage)

    response = client.post("/me/usage/check", headers=auth_headers)

    assert response.status_code == 503
    assert response.json()["detail"]["retryable"] is True


def test_blocked_user_is_rejected(client, plans, user_factory):
    blocked = user_factory("blocked@example.com", is_blocked=True)
    headers = {"Authorization": f"Bearer {create_access_token({'sub': blocked.id})}"}

    response = client.post("/me/usage/check", headers=headers)

    assert response.status_code == 403


def test_subscribe_and_read_subscription(client, plans, auth_headers):
    response = client.get("/me/subscription", headers=auth_headers)
    assert response.json()["plan"]["name"] == "free"
    assert response.json()["subscription"] is None

    response = client.post("/me/subscription", json={"plan": "starter"}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["plan"]["name"] == "starter"

    data = client.get("/me/subscription", headers=auth_headers).json()
    assert data["subscription"]["status"] == "active"

    check = client.post("/me/usage/check", headers=auth_headers).json()
    assert check["limit"] == 30


def test_subscribe_unknown_plan(client, plans, auth_headers):
    response = client.post("/me/subscription", json={"plan": "enterprise"}, headers=auth_headers)
    assert response.status_code == 404


def test_list_plans(client, plans):
    response = client.get("/plans")

    assert response.status_code == 200
    assert [plan["name"] for plan in response.json()] == ["free", "starter", "pro"]
    assert response.json()[0]["features"][0]["tr"]


def _guarded_app():
    guarded = FastAPI()
    guarded.state.session_factory = TestSessionLocal
    guarded.add_exception_handler(CreditLimitExceeded, credit_limit_exceeded_handler)

    @guarded.post("/analyze")
    def analyze(user: User = Depends(require_credit())):
        return {"user_id": user.id}

    return guarded


def test_require_credit_allows_with_credits(db, plans, test_user, auth_headers):
    response = TestClient(_guarded_app()).post("/analyze", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"user_id": test_user.id}


def test_require_credit_returns_paywall(db, plans, test_user, auth_headers):
    for _ in range(5):
        record_usage(db, test_user.id, "animation")

    response = TestClient(_guarded_app()).post("/analyze?lang=en", headers=auth_headers)

    assert response.status_code == 402
    detail = response.json()["detail"]
    assert detail["code"] == "PAYWALL"
    assert detail["used"] == 5
    assert detail["limit"] == 5
    assert detail["upgrade_url"].endswith("/pricing")
