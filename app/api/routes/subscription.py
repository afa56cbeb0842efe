"""
Subscription endpoints for the authenticated user.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user
from app.db.session import get_db
from app.db.models.user import User
from app.schemas.subscription import (
    CreateSubscriptionRequest,
    CurrentSubscriptionResponse,
    SubscriptionResponse,
)
from app.services.subscription_service import (
    ActivePlan,
    create_user_subscription,
    resolve_entitlement,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me/subscription", tags=["Subscription"])


@router.get("", response_model=CurrentSubscriptionResponse)
def get_subscription(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current plan; subscription is null for users on the implicit free plan."""
    entitlement = resolve_entitlement(db, user.id)
    subscription = entitlement.subscription if isinstance(entitlement, ActivePlan) else None
    return {"plan": entitlement.plan, "subscription": subscription}


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: CreateSubscriptionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Start a subscription, replacing the active one if any."""
    return create_user_subscription(db, user.id, payload.plan, payload.billing_cycle)
