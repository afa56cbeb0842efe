"""
Credit enforcement dependency for PDF and animation endpoints.

require_credit() authenticates the user and checks this month's pooled
credits before the endpoint does any paid work. It does not record usage;
the endpoint calls record_usage() once its work has succeeded.

This service hosts no generation endpoints itself. Services that mount
PDF analysis or animation routes on this app attach it as
`user: User = Depends(require_credit())`; clients running the work
elsewhere use POST /me/usage/check and /me/usage/record instead.
"""
import logging
from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user
from app.core.exceptions import CreditLimitExceeded
from app.db.session import get_db
from app.db.models.user import User
from app.services.limit_policy import check_limit

logger = logging.getLogger(__name__)


def require_credit():
    """
    Dependency that blocks the request when the user has no credits left.

    Returns:
        User object if a credit is available

    Raises:
        CreditLimitExceeded: rendered as 402 with the paywall payload by app.main
    """
    def credit_checker(
        lang: str = Query(None, pattern="^(tr|en)$"),
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
    ) -> User:
        check = check_limit(db, user.id, lang=lang or user.preferred_language)

        if not check.can_process:
            raise CreditLimitExceeded(check)

        logger.debug(
            f"Credit check passed: user_id={user.id}, plan={check.plan_name}, "
            f"remaining={check.remaining}"
        )
        return user

    return credit_checker
