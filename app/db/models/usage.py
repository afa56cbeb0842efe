from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.db.base import Base
from app.db.models.user import generate_uuid


class UserUsage(Base):
    """
    Per-user, per-month credit ledger.

    PDFs and animations draw from one pooled monthly budget. Rows are created
    lazily on the first recorded unit of the month and never deleted.
    """
    __tablename__ = "user_usage"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    month_year = Column(String(7), nullable=False, index=True)  # "YYYY-MM"

    pdfs_processed = Column(Integer, default=0, server_default="0", nullable=False)
    animations_created = Column(Integer, default=0, server_default="0", nullable=False)
    storage_used_mb = Column(Float, default=0, server_default="0", nullable=False)

    last_reset_at = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # One record per user per month
    __table_args__ = (
        UniqueConstraint("user_id", "month_year", name="uq_user_usage_user_month"),
    )

    @property
    def credits_used(self) -> int:
        return (self.pdfs_processed or 0) + (self.animations_created or 0)

    @staticmethod
    def get_month_key(date: datetime = None) -> str:
        """Generate month_year string in YYYY-MM format (UTC)."""
        if date is None:
            date = datetime.now(timezone.utc)
        elif date.tzinfo is not None:
            date = date.astimezone(timezone.utc)
        return date.strftime("%Y-%m")
