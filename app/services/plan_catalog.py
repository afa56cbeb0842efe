"""
Plan catalog access.

Read-only lookups over subscription_plans plus idempotent seeding of the
default free/starter/pro tiers.
"""
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConfigurationError, NotFoundError
from app.core.plan_defaults import DEFAULT_PLANS
from app.db.models.subscription_plan import SubscriptionPlan

logger = logging.getLogger(__name__)


def list_active_plans(db: Session) -> List[SubscriptionPlan]:
    """
    Get all active plans ordered for display.

    Raises:
        ConfigurationError: if the catalog cannot be read
    """
    try:
        return (
            db.query(SubscriptionPlan)
            .filter(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.sort_order.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Plan catalog read failed: {e}")
        raise ConfigurationError("Subscription plan catalog could not be read") from e


def get_plan_by_name(db: Session, name: str) -> SubscriptionPlan:
    """
    Resolve a plan by its unique name.

    Raises:
        NotFoundError: no plan with that name
        ConfigurationError: the catalog cannot be read
    """
    try:
        plan = db.query(SubscriptionPlan).filter(SubscriptionPlan.name == name).first()
    except SQLAlchemyError as e:
        logger.error(f"Plan lookup failed: name={name}, error={e}")
        raise ConfigurationError("Subscription plan catalog could not be read") from e

    if plan is None:
        raise NotFoundError(f"Plan not found: {name}")
    return plan


def seed_default_plans(db: Session) -> int:
    """Insert any default plan that is missing. Returns the number inserted."""
    existing = {name for (name,) in db.query(SubscriptionPlan.name).all()}
    created = 0
    for definition in DEFAULT_PLANS:
        if definition["name"] in existing:
            continue
        db.add(SubscriptionPlan(**definition))
        created += 1

    if created:
        db.commit()
        logger.info(f"Seeded {created} subscription plan(s)")
    return created
