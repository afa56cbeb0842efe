"""
Pydantic schemas for usage endpoints.
"""
from typing import Optional
from pydantic import BaseModel, Field


class CreditCheckResponse(BaseModel):
    """Response schema for POST /me/usage/check."""
    can_process: bool = Field(..., description="Whether one more PDF or animation may be processed")
    current_usage: int = Field(..., description="Credits used this month (PDFs + animations)")
    limit: int = Field(..., description="Monthly credit limit of the user's plan")
    remaining: int = Field(..., description="Credits left this month, never negative")
    plan: str = Field(..., description="Plan the limit comes from")
    month_year: str = Field(..., description="Current month in YYYY-MM format")
    message: Optional[str] = Field(None, description="Localized upgrade prompt when can_process is false")

    class Config:
        json_schema_extra = {
            "example": {
                "can_process": False,
                "current_usage": 5,
                "limit": 5,
                "remaining": 0,
                "plan": "free",
                "month_year": "2026-10",
                "message": "You have used 5/5 credits this month. Please upgrade your plan to continue."
            }
        }


class RecordUsageRequest(BaseModel):
    kind: str = Field(..., pattern="^(pdf|animation)$", description="Unit of work completed")

    class Config:
        json_schema_extra = {"example": {"kind": "pdf"}}


class RecordUsageResponse(BaseModel):
    success: bool
    error: Optional[str] = None


class UsageSummaryResponse(BaseModel):
    """Response schema for GET /me/usage."""
    plan: str
    plan_display_name: str
    has_subscription: bool
    month_year: str
    pdfs_processed: int
    animations_created: int
    current_usage: int
    limit: int
    remaining: int
    usage_percentage: float
    can_process: bool
    message: Optional[str] = None
