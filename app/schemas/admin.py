"""
Pydantic schemas for the admin back-office.
"""
from datetime import datetime
from typing import Optional, Dict
from pydantic import BaseModel, Field


class AdminUserInfo(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    is_blocked: bool
    created_at: Optional[datetime] = None
    plan: str
    pdfs_processed: int
    animations_created: int
    current_usage: int
    limit: int


class AdminStatsResponse(BaseModel):
    month_year: str
    total_users: int
    blocked_users: int
    new_users_this_month: int
    pdfs_processed_this_month: int
    animations_created_this_month: int
    plan_distribution: Dict[str, int]


class GrantCreditsRequest(BaseModel):
    credits: int = Field(..., gt=0, le=10000, description="Credits to give back this month")


class ChangePlanRequest(BaseModel):
    plan: str = Field(..., description="Target plan name (free, starter, pro)")


class BlockUserRequest(BaseModel):
    blocked: bool


class UsageCountersResponse(BaseModel):
    user_id: str
    month_year: str
    pdfs_processed: int
    animations_created: int

    class Config:
        from_attributes = True
