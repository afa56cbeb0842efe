"""
Credit limit policy.

Decides whether a user may spend one more credit this month. PDFs and
animations share a single pooled monthly budget taken from the user's plan.
This module only reads; recording happens in usage_service.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from app.core.plan_defaults import resolve_credit_limit, normalize_language
from app.db.models.subscription_plan import SubscriptionPlan
from app.db.models.usage import UserUsage
from app.services.subscription_service import resolve_entitlement, ActivePlan
from app.services.usage_service import get_current_usage

logger = logging.getLogger(__name__)

LIMIT_MESSAGES: Dict[str, str] = {
    "tr": "Bu ay {used}/{limit} kredi kullandınız. Limitinizi aştınız, lütfen planınızı yükseltin.",
    "en": "You have used {used}/{limit} credits this month. Please upgrade your plan to continue.",
}


@dataclass(frozen=True)
class CreditStanding:
    pdfs_processed: int
    animations_created: int
    current_usage: int
    limit: int
    remaining: int
    can_process: bool


@dataclass(frozen=True)
class CreditCheck:
    can_process: bool
    current_usage: int
    limit: int
    remaining: int
    plan_name: str
    month_year: str
    message: Optional[str] = None


def compute_credit_standing(plan: SubscriptionPlan, usage: Optional[UserUsage]) -> CreditStanding:
    """Pure credit arithmetic over a plan and an optional usage row."""
    pdfs = (usage.pdfs_processed or 0) if usage is not None else 0
    animations = (usage.animations_created or 0) if usage is not None else 0
    current_usage = pdfs + animations
    limit = resolve_credit_limit(plan.monthly_credit_limit)

    return CreditStanding(
        pdfs_processed=pdfs,
        animations_created=animations,
        current_usage=current_usage,
        limit=limit,
        remaining=max(0, limit - current_usage),
        can_process=current_usage < limit,
    )


def limit_message(used: int, limit: int, lang: str = "en") -> str:
    return LIMIT_MESSAGES[normalize_language(lang)].format(used=used, limit=limit)


def check_limit(db: Session, user_id: str, lang: str = "en", now: datetime = None) -> CreditCheck:
    """
    Check whether the user can process one more PDF or animation this month.

    Raises:
        ConfigurationError: the free plan fallback cannot be resolved
        TransientStoreError: the subscription or usage read failed
    """
    now = now or datetime.now(timezone.utc)
    entitlement = resolve_entitlement(db, user_id)
    usage = get_current_usage(db, user_id, now)
    standing = compute_credit_standing(entitlement.plan, usage)

    message = None
    if not standing.can_process:
        message = limit_message(standing.current_usage, standing.limit, lang)
        logger.warning(
            f"Credit limit reached: user_id={user_id}, plan={entitlement.plan.name}, "
            f"used={standing.current_usage}/{standing.limit}"
        )

    return CreditCheck(
        can_process=standing.can_process,
        current_usage=standing.current_usage,
        limit=standing.limit,
        remaining=standing.remaining,
        plan_name=entitlement.plan.name,
        month_year=UserUsage.get_month_key(now),
        message=message,
    )


def get_usage_summary(db: Session, user_id: str, lang: str = "en", now: datetime = None) -> Dict[str, Any]:
    """
    Get usage data formatted for GET /me/usage.

    Returns:
        Dictionary with plan details, month, per-kind counts and pooled credit standing
    """
    lang = normalize_language(lang)
    now = now or datetime.now(timezone.utc)
    entitlement = resolve_entitlement(db, user_id)
    usage = get_current_usage(db, user_id, now)
    standing = compute_credit_standing(entitlement.plan, usage)

    percentage = round(min(100.0, standing.current_usage / standing.limit * 100), 1)

    return {
        "plan": entitlement.plan.name,
        "plan_display_name": entitlement.plan.display_name(lang),
        "has_subscription": isinstance(entitlement, ActivePlan),
        "month_year": UserUsage.get_month_key(now),
        "pdfs_processed": standing.pdfs_processed,
        "animations_created": standing.animations_created,
        "current_usage": standing.current_usage,
        "limit": standing.limit,
        "remaining": standing.remaining,
        "usage_percentage": percentage,
        "can_process": standing.can_process,
        "message": None if standing.can_process else limit_message(standing.current_usage, standing.limit, lang),
    }
