"""
Usage tracking endpoints.

Credit check before paid work, usage record after it, and the monthly
summary shown on the profile page.
"""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user
from app.db.session import get_db
from app.db.models.user import User
from app.schemas.usage import (
    CreditCheckResponse,
    RecordUsageRequest,
    RecordUsageResponse,
    UsageSummaryResponse,
)
from app.services.limit_policy import check_limit, get_usage_summary
from app.services.usage_service import record_usage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me/usage", tags=["Usage"])


@router.get("", response_model=UsageSummaryResponse, status_code=status.HTTP_200_OK)
def get_usage(
    lang: str = Query(None, pattern="^(tr|en)$"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Current month usage for the authenticated user.

    PDFs and animations are reported separately but share one credit pool.
    """
    summary = get_usage_summary(db, user.id, lang=lang or user.preferred_language)
    logger.debug(f"Usage summary requested: user_id={user.id}, plan={summary['plan']}")
    return summary


@router.post("/check", response_model=CreditCheckResponse)
def check_usage_limit(
    lang: str = Query(None, pattern="^(tr|en)$"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Call before starting a PDF analysis or animation."""
    check = check_limit(db, user.id, lang=lang or user.preferred_language)
    return {
        "can_process": check.can_process,
        "current_usage": check.current_usage,
        "limit": check.limit,
        "remaining": check.remaining,
        "plan": check.plan_name,
        "month_year": check.month_year,
        "message": check.message,
    }


@router.post("/record", response_model=RecordUsageResponse)
def record_completed_work(
    payload: RecordUsageRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Call after a PDF analysis or animation completed.

    Always answers 200: a failed record is reported in the body but the
    delivered work stands.
    """
    result = record_usage(db, user.id, payload.kind)
    return {"success": result.success, "error": result.error}
