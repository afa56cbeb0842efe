"""
Pydantic schemas for the plan catalog.
"""
from typing import Optional, List
from pydantic import BaseModel, Field


class PlanFeature(BaseModel):
    tr: str
    en: str


class PlanResponse(BaseModel):
    """A subscription plan as shown on the pricing page."""
    id: str
    name: str = Field(..., description="Plan key (free, starter, pro)")
    display_name_tr: str
    display_name_en: str
    description_tr: Optional[str] = None
    description_en: Optional[str] = None
    monthly_price_usd: float
    annual_price_usd: Optional[float] = None
    monthly_credit_limit: int = Field(..., description="Pooled monthly credits (PDFs + animations)")
    features: List[PlanFeature] = Field(default_factory=list)
    sort_order: int

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "5f0c3a52-7a4e-4c55-9d0a-3f7c8e1f9b11",
                "name": "starter",
                "display_name_tr": "Başlangıç Planı",
                "display_name_en": "Starter Plan",
                "monthly_price_usd": 14,
                "annual_price_usd": 140,
                "monthly_credit_limit": 30,
                "features": [{"tr": "Ayda 30 kredi", "en": "30 credits per month"}],
                "sort_order": 1
            }
        }
