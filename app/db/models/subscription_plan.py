from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, JSON
from sqlalchemy.sql import func
from app.db.base import Base
from app.db.models.user import generate_uuid


class SubscriptionPlan(Base):
    """
    A named subscription tier (free | starter | pro).

    monthly_credit_limit is the pooled budget for PDFs and animations;
    0 or NULL means the default fallback limit applies.
    """
    __tablename__ = "subscription_plans"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(32), unique=True, nullable=False, index=True)

    display_name_tr = Column(String, nullable=False)
    display_name_en = Column(String, nullable=False)
    description_tr = Column(String, nullable=True)
    description_en = Column(String, nullable=True)

    monthly_price_usd = Column(Numeric(10, 2, asdecimal=False), default=0, nullable=False)
    annual_price_usd = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    monthly_credit_limit = Column(Integer, default=0, nullable=False)
    features = Column(JSON, default=list, nullable=False)  # [{"tr": ..., "en": ...}]

    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def display_name(self, lang: str) -> str:
        return self.display_name_tr if lang == "tr" else self.display_name_en
