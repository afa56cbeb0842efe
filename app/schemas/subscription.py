"""
Pydantic schemas for user subscriptions.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.plan import PlanResponse


class CreateSubscriptionRequest(BaseModel):
    plan: str = Field(..., description="Plan name (starter, pro)")
    billing_cycle: str = Field(default="monthly", pattern="^(monthly|annual)$")

    class Config:
        json_schema_extra = {
            "example": {"plan": "pro", "billing_cycle": "monthly"}
        }


class SubscriptionResponse(BaseModel):
    id: str
    status: str
    billing_cycle: str
    current_period_start: datetime
    current_period_end: datetime
    auto_renew: bool
    plan: PlanResponse

    class Config:
        from_attributes = True


class CurrentSubscriptionResponse(BaseModel):
    """Active subscription, or null when the user is on the implicit free plan."""
    plan: PlanResponse
    subscription: Optional[SubscriptionResponse] = None
