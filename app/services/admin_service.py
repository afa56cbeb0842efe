"""
Admin back-office operations: user listing, stats and credit administration.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import FREE_PLAN_NAME
from app.core.exceptions import ConfigurationError, NotFoundError, TransientStoreError
from app.db.models.subscription import UserSubscription
from app.db.models.subscription_plan import SubscriptionPlan
from app.db.models.usage import UserUsage
from app.db.models.user import User
from app.services.limit_policy import compute_credit_standing, get_usage_summary
from app.services.plan_catalog import get_plan_by_name
from app.services.subscription_service import (
    cancel_active_subscriptions,
    create_user_subscription,
    get_active_subscription,
    resolve_entitlement,
)

logger = logging.getLogger(__name__)


def get_user_or_raise(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError(f"User not found: {user_id}")
    return user


def _free_plan(db: Session) -> SubscriptionPlan:
    try:
        return get_plan_by_name(db, FREE_PLAN_NAME)
    except NotFoundError as e:
        raise ConfigurationError(f"Free plan '{FREE_PLAN_NAME}' is not configured") from e


def list_users_for_admin(db: Session, now: datetime = None) -> List[Dict[str, Any]]:
    """All users with their current plan and this month's credit standing."""
    month_year = UserUsage.get_month_key(now)
    free_plan = _free_plan(db)

    users = db.query(User).order_by(User.created_at.desc()).all()
    plans_by_user = {
        sub.user_id: sub.plan
        for sub in db.query(UserSubscription).filter(UserSubscription.status == "active").all()
    }
    usage_by_user = {
        row.user_id: row
        for row in db.query(UserUsage).filter(UserUsage.month_year == month_year).all()
    }

    result = []
    for user in users:
        plan = plans_by_user.get(user.id, free_plan)
        standing = compute_credit_standing(plan, usage_by_user.get(user.id))
        result.append({
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "is_blocked": user.is_blocked,
            "created_at": user.created_at,
            "plan": plan.name,
            "pdfs_processed": standing.pdfs_processed,
            "animations_created": standing.animations_created,
            "current_usage": standing.current_usage,
            "limit": standing.limit,
        })
    return result


def get_user_detail(db: Session, user_id: str, now: datetime = None) -> Dict[str, Any]:
    """Profile, active subscription, current standing and monthly history for one user."""
    user = get_user_or_raise(db, user_id)
    subscription = get_active_subscription(db, user_id)
    history = (
        db.query(UserUsage)
        .filter(UserUsage.user_id == user_id)
        .order_by(UserUsage.month_year.desc())
        .all()
    )

    return {
        "user": {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "preferred_language": user.preferred_language,
            "is_blocked": user.is_blocked,
            "created_at": user.created_at,
        },
        "subscription": None if subscription is None else {
            "id": subscription.id,
            "plan": subscription.plan.name,
            "status": subscription.status,
            "billing_cycle": subscription.billing_cycle,
            "current_period_start": subscription.current_period_start,
            "current_period_end": subscription.current_period_end,
        },
        "usage": get_usage_summary(db, user_id, lang=user.preferred_language, now=now),
        "history": [
            {
                "month_year": row.month_year,
                "pdfs_processed": row.pdfs_processed,
                "animations_created": row.animations_created,
            }
            for row in history
        ],
    }


def get_admin_stats(db: Session, now: datetime = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    month_year = UserUsage.get_month_key(now)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    total_users = db.query(func.count(User.id)).scalar() or 0
    blocked_users = db.query(func.count(User.id)).filter(User.is_blocked.is_(True)).scalar() or 0
    new_users = db.query(func.count(User.id)).filter(User.created_at >= month_start).scalar() or 0

    pdfs, animations = db.query(
        func.coalesce(func.sum(UserUsage.pdfs_processed), 0),
        func.coalesce(func.sum(UserUsage.animations_created), 0),
    ).filter(UserUsage.month_year == month_year).one()

    distribution = dict(
        db.query(SubscriptionPlan.name, func.count(UserSubscription.id))
        .join(UserSubscription, UserSubscription.plan_id == SubscriptionPlan.id)
        .filter(UserSubscription.status == "active")
        .group_by(SubscriptionPlan.name)
        .all()
    )
    subscribed = sum(distribution.values())
    distribution[FREE_PLAN_NAME] = distribution.get(FREE_PLAN_NAME, 0) + max(0, total_users - subscribed)

    return {
        "month_year": month_year,
        "total_users": total_users,
        "blocked_users": blocked_users,
        "new_users_this_month": new_users,
        "pdfs_processed_this_month": int(pdfs),
        "animations_created_this_month": int(animations),
        "plan_distribution": distribution,
    }


def change_user_plan(db: Session, user_id: str, plan_name: str) -> str:
    """
    Move a user to another plan. Moving to the free plan just cancels the
    active subscription.

    Raises:
        NotFoundError: unknown user or plan
    """
    get_user_or_raise(db, user_id)
    plan = get_plan_by_name(db, plan_name)

    if plan.name == FREE_PLAN_NAME:
        try:
            cancelled = cancel_active_subscriptions(db, user_id)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Plan change failed: user_id={user_id}, plan={plan_name}, error={e}")
            raise TransientStoreError("Plan could not be changed") from e
        logger.info(f"Admin moved user to free plan: user_id={user_id}, cancelled={cancelled}")
    else:
        create_user_subscription(db, user_id, plan.name)
        logger.info(f"Admin changed plan: user_id={user_id}, plan={plan.name}")

    return resolve_entitlement(db, user_id).plan.name


def set_user_blocked(db: Session, user_id: str, blocked: bool) -> User:
    user = get_user_or_raise(db, user_id)
    try:
        user.is_blocked = blocked
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Block update failed: user_id={user_id}, blocked={blocked}, error={e}")
        raise TransientStoreError("User could not be updated") from e
    logger.info(f"Admin set blocked={blocked}: user_id={user_id}")
    return user
