"""
Subscription lookup and entitlement resolution.

A user's entitlement is either the plan of their active subscription or,
when they have none, the free plan. A failed lookup is never treated as
"no subscription".
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import FREE_PLAN_NAME
from app.core.exceptions import ConfigurationError, NotFoundError, TransientStoreError
from app.db.models.subscription import UserSubscription
from app.db.models.subscription_plan import SubscriptionPlan
from app.services.plan_catalog import get_plan_by_name

logger = logging.getLogger(__name__)

BILLING_CYCLES = ("monthly", "annual")


@dataclass(frozen=True)
class ActivePlan:
    plan: SubscriptionPlan
    subscription: UserSubscription


@dataclass(frozen=True)
class NoSubscription:
    fallback_plan: SubscriptionPlan

    @property
    def plan(self) -> SubscriptionPlan:
        return self.fallback_plan


Entitlement = Union[ActivePlan, NoSubscription]


def get_active_subscription(db: Session, user_id: str) -> Optional[UserSubscription]:
    """
    Get the user's active subscription (with its plan loaded), or None.

    Raises:
        TransientStoreError: the lookup itself failed
    """
    try:
        return (
            db.query(UserSubscription)
            .filter(
                UserSubscription.user_id == user_id,
                UserSubscription.status == "active",
            )
            .order_by(UserSubscription.current_period_start.desc())
            .first()
        )
    except SQLAlchemyError as e:
        logger.error(f"Subscription lookup failed: user_id={user_id}, error={e}")
        raise TransientStoreError("Subscription lookup failed") from e


def resolve_entitlement(db: Session, user_id: str) -> Entitlement:
    """
    Resolve which plan governs the user's credits this month.

    Raises:
        TransientStoreError: subscription lookup failed
        ConfigurationError: no subscription and the free plan cannot be resolved
    """
    subscription = get_active_subscription(db, user_id)
    if subscription is not None:
        return ActivePlan(plan=subscription.plan, subscription=subscription)

    try:
        free_plan = get_plan_by_name(db, FREE_PLAN_NAME)
    except NotFoundError as e:
        logger.error(f"Free plan '{FREE_PLAN_NAME}' missing from catalog")
        raise ConfigurationError(f"Free plan '{FREE_PLAN_NAME}' is not configured") from e
    return NoSubscription(fallback_plan=free_plan)


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def cancel_active_subscriptions(db: Session, user_id: str, now: datetime = None) -> int:
    """Mark every active subscription of the user cancelled. Caller commits."""
    now = now or datetime.now(timezone.utc)
    active = (
        db.query(UserSubscription)
        .filter(UserSubscription.user_id == user_id, UserSubscription.status == "active")
        .all()
    )
    for subscription in active:
        subscription.status = "cancelled"
        subscription.cancelled_at = now
        subscription.auto_renew = False
    return len(active)


def create_user_subscription(
    db: Session,
    user_id: str,
    plan_name: str,
    billing_cycle: str = "monthly",
    now: datetime = None,
) -> UserSubscription:
    """
    Subscribe the user to a plan, replacing any active subscription.

    Raises:
        NotFoundError: unknown plan
        ValueError: unsupported billing cycle
        TransientStoreError: the write failed
    """
    if billing_cycle not in BILLING_CYCLES:
        raise ValueError(f"Unsupported billing cycle: {billing_cycle}")

    plan = get_plan_by_name(db, plan_name)
    now = now or datetime.now(timezone.utc)
    period_end = add_months(now, 1 if billing_cycle == "monthly" else 12)

    try:
        replaced = cancel_active_subscriptions(db, user_id, now)
        subscription = UserSubscription(
            user_id=user_id,
            plan_id=plan.id,
            status="active",
            billing_cycle=billing_cycle,
            current_period_start=now,
            current_period_end=period_end,
        )
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Subscription creation failed: user_id={user_id}, plan={plan_name}, error={e}")
        raise TransientStoreError("Subscription could not be created") from e

    logger.info(
        f"Subscription created: user_id={user_id}, plan={plan_name}, "
        f"cycle={billing_cycle}, replaced={replaced}"
    )
    return subscription
