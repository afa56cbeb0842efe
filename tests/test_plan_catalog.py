"""
Unit tests for plan catalog access and subscription resolution.
"""
import pytest
from datetime import datetime, timezone
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConfigurationError, NotFoundError, TransientStoreError
from app.core.plan_defaults import resolve_credit_limit, normalize_language
from app.db.models.subscription import UserSubscription
from app.services.plan_catalog import get_plan_by_name, list_active_plans, seed_default_plans
from app.services.subscription_service import (
    ActivePlan,
    NoSubscription,
    add_months,
    create_user_subscription,
    get_active_subscription,
    resolve_entitlement,
)


def test_seed_is_idempotent(db):
    assert seed_default_plans(db) == 3
    assert seed_default_plans(db) == 0


def test_list_active_plans_ordered_and_filtered(db, plans):
    plans["starter"].is_active = False
    db.commit()

    names = [plan.name for plan in list_active_plans(db)]

    assert names == ["free", "pro"]


def test_get_plan_by_name(db, plans):
    plan = get_plan_by_name(db, "starter")

    assert plan.monthly_credit_limit == 30
    assert plan.display_name("tr") == "Başlangıç Planı"
    assert plan.display_name("en") == "Starter Plan"


def test_get_plan_by_name_missing(db, plans):
    with pytest.raises(NotFoundError):
        get_plan_by_name(db, "enterprise")


def test_catalog_read_failure_is_configuration_error(db, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT subscription_plans", {}, Exception("relation does not exist"))

    monkeypatch.setattr(db, "query", broken_query)

    with pytest.raises(ConfigurationError):
        list_active_plans(db)


@pytest.mark.parametrize("value,expected", [(30, 30), (0, 5), (None, 5), (-3, 5)])
def test_resolve_credit_limit(value, expected):
    assert resolve_credit_limit(value) == expected


def test_normalize_language():
    assert normalize_language("tr-TR") == "tr"
    assert normalize_language("de") == "en"
    assert normalize_language(None) == "en"


def test_entitlement_without_subscription_is_free(db, plans, test_user):
    entitlement = resolve_entitlement(db, test_user.id)

    assert isinstance(entitlement, NoSubscription)
    assert entitlement.plan.name == "free"


def test_entitlement_with_subscription(db, plans, test_user):
    create_user_subscription(db, test_user.id, "starter")

    entitlement = resolve_entitlement(db, test_user.id)

    assert isinstance(entitlement, ActivePlan)
    assert entitlement.plan.name == "starter"
    assert entitlement.subscription.status == "active"


def test_subscription_lookup_failure_does_not_fall_back(db, plans, test_user, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT user_subscriptions", {}, Exception("timeout"))

    monkeypatch.setattr(db, "query", broken_query)

    with pytest.raises(TransientStoreError):
        resolve_entitlement(db, test_user.id)


def test_new_subscription_replaces_active_one(db, plans, test_user):
    create_user_subscription(db, test_user.id, "starter")
    create_user_subscription(db, test_user.id, "pro", billing_cycle="annual")

    rows = db.query(UserSubscription).filter(UserSubscription.user_id == test_user.id).all()
    statuses = sorted(row.status for row in rows)

    assert statuses == ["active", "cancelled"]
    assert get_active_subscription(db, test_user.id).plan.name == "pro"


def test_subscription_period(db, plans, test_user):
    start = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)

    subscription = create_user_subscription(db, test_user.id, "pro", now=start)

    assert subscription.billing_cycle == "monthly"
    assert subscription.current_period_end.month == 2
    assert subscription.current_period_end.day == 28


def test_subscription_unknown_plan(db, plans, test_user):
    with pytest.raises(NotFoundError):
        create_user_subscription(db, test_user.id, "enterprise")


def test_subscription_invalid_billing_cycle(db, plans, test_user):
    with pytest.raises(ValueError):
        create_user_subscription(db, test_user.id, "pro", billing_cycle="weekly")


def test_add_months_clamps_day():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2026, 11, 15), 12) == datetime(2027, 11, 15)
    assert add_months(datetime(2026, 12, 5), 1) == datetime(2027, 1, 5)
