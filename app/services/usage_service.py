"""
Usage ledger access and the usage recorder.

The ledger holds one user_usage row per user per calendar month. Rows are
created lazily and counters are advanced with a storage-level increment
(INSERT ... ON CONFLICT DO NOTHING followed by UPDATE counter = counter + 1),
so concurrent requests never lose updates.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import TransientStoreError
from app.db.models.usage import UserUsage
from app.db.models.user import generate_uuid

logger = logging.getLogger(__name__)


class UsageKind(str, enum.Enum):
    PDF = "pdf"
    ANIMATION = "animation"


_COUNTERS = {
    UsageKind.PDF: UserUsage.pdfs_processed,
    UsageKind.ANIMATION: UserUsage.animations_created,
}


@dataclass(frozen=True)
class RecordResult:
    success: bool
    error: Optional[str] = None


def get_current_usage(db: Session, user_id: str, now: datetime = None) -> Optional[UserUsage]:
    """
    Get this month's usage row for the user, or None if nothing was recorded yet.

    Raises:
        TransientStoreError: the read failed
    """
    month_year = UserUsage.get_month_key(now)
    try:
        return (
            db.query(UserUsage)
            .filter(UserUsage.user_id == user_id, UserUsage.month_year == month_year)
            .first()
        )
    except SQLAlchemyError as e:
        logger.error(f"Usage read failed: user_id={user_id}, month={month_year}, error={e}")
        raise TransientStoreError("Usage could not be read") from e


def _ensure_row_statement(db: Session, user_id: str, month_year: str):
    """INSERT of a zeroed row that is a no-op when the (user, month) row exists."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Usage ledger does not support dialect '{dialect}'")

    return insert(UserUsage.__table__).values(
        id=generate_uuid(),
        user_id=user_id,
        month_year=month_year,
        pdfs_processed=0,
        animations_created=0,
        storage_used_mb=0,
    ).on_conflict_do_nothing(index_elements=["user_id", "month_year"])


def record_usage(db: Session, user_id: str, kind, now: datetime = None) -> RecordResult:
    """
    Record one completed unit of work for the current month.

    Storage failures are logged and reported through the result, never
    raised: the work has already been delivered to the user.

    Args:
        db: Database session
        user_id: User ID
        kind: "pdf" or "animation" (or a UsageKind)
        now: Override for the current time

    Raises:
        ValueError: kind is not a known usage kind
    """
    kind = UsageKind(kind)
    counter = _COUNTERS[kind]
    month_year = UserUsage.get_month_key(now)

    try:
        db.execute(_ensure_row_statement(db, user_id, month_year))
        db.execute(
            update(UserUsage)
            .where(UserUsage.user_id == user_id, UserUsage.month_year == month_year)
            .values({counter: counter + 1, UserUsage.updated_at: func.now()})
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Usage record failed: user_id={user_id}, kind={kind.value}, "
            f"month={month_year}, error={e}"
        )
        return RecordResult(success=False, error="Usage could not be recorded")

    logger.info(f"Usage recorded: user_id={user_id}, kind={kind.value}, month={month_year}")
    return RecordResult(success=True)


def _lock_current_row(db: Session, user_id: str, month_year: str) -> UserUsage:
    db.execute(_ensure_row_statement(db, user_id, month_year))
    return (
        db.query(UserUsage)
        .filter(UserUsage.user_id == user_id, UserUsage.month_year == month_year)
        .with_for_update()
        .populate_existing()
        .one()
    )


def reset_usage(db: Session, user_id: str, now: datetime = None) -> UserUsage:
    """Administrative reset of this month's counters to zero."""
    now = now or datetime.now(timezone.utc)
    month_year = UserUsage.get_month_key(now)
    try:
        usage = _lock_current_row(db, user_id, month_year)
        usage.pdfs_processed = 0
        usage.animations_created = 0
        usage.last_reset_at = now
        db.commit()
        db.refresh(usage)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Usage reset failed: user_id={user_id}, month={month_year}, error={e}")
        raise TransientStoreError("Usage could not be reset") from e

    logger.info(f"Usage reset: user_id={user_id}, month={month_year}")
    return usage


def grant_credits(db: Session, user_id: str, credits: int, now: datetime = None) -> UserUsage:
    """
    Give back `credits` units of this month's pooled usage.

    PDF usage is reduced first, then animations; neither goes below zero.
    The total given back is at most `credits`. Subtracting `credits` from
    each counter would return up to twice the grant, since both counters
    draw from one pool, so the grant is split across them instead.
    """
    if credits <= 0:
        raise ValueError("credits must be positive")

    now = now or datetime.now(timezone.utc)
    month_year = UserUsage.get_month_key(now)
    try:
        usage = _lock_current_row(db, user_id, month_year)
        from_pdfs = min(credits, usage.pdfs_processed)
        from_animations = min(credits - from_pdfs, usage.animations_created)
        usage.pdfs_processed -= from_pdfs
        usage.animations_created -= from_animations
        db.commit()
        db.refresh(usage)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Credit grant failed: user_id={user_id}, credits={credits}, error={e}")
        raise TransientStoreError("Credits could not be granted") from e

    logger.info(
        f"Credits granted: user_id={user_id}, credits={credits}, "
        f"applied={from_pdfs + from_animations}, month={month_year}"
    )
    return usage
