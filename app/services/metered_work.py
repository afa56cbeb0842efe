"""
Run a unit of paid work between the credit check and the usage record.

In-process entry point for workers and scripts that generate PDFs or
animations with a database session of their own (HTTP callers go through
require_credit or the /me/usage endpoints):

    summary = run_metered_work(db, user.id, UsageKind.PDF, lambda: analyze(pdf))
"""
import logging
from typing import Callable, TypeVar

from sqlalchemy.orm import Session

from app.core.exceptions import CreditLimitExceeded
from app.services.limit_policy import check_limit
from app.services.usage_service import UsageKind, record_usage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_metered_work(
    db: Session,
    user_id: str,
    kind,
    work: Callable[[], T],
    lang: str = "en",
) -> T:
    """
    Check the user's credits, run `work`, then record one unit of usage.

    If `work` raises, nothing is recorded and the exception propagates.
    A failed usage record is logged but does not fail the call.

    Raises:
        CreditLimitExceeded: the user has no credits left this month
    """
    kind = UsageKind(kind)
    check = check_limit(db, user_id, lang=lang)
    if not check.can_process:
        raise CreditLimitExceeded(check)

    result = work()

    recorded = record_usage(db, user_id, kind)
    if not recorded.success:
        logger.warning(
            f"Work delivered but usage not recorded: user_id={user_id}, "
            f"kind={kind.value}, error={recorded.error}"
        )
    return result
