"""
Support tickets: opened by users from the contact form, handled by admins.

Replies are stored with the ticket; delivering them to the sender by e-mail
is left to the caller.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, TransientStoreError
from app.db.models.support_ticket import SupportTicket, SupportTicketReply

logger = logging.getLogger(__name__)

TICKET_STATUSES = ("open", "replied", "closed")


def _get_ticket_or_raise(db: Session, ticket_id: str) -> SupportTicket:
    ticket = db.query(SupportTicket).filter(SupportTicket.id == ticket_id).first()
    if ticket is None:
        raise NotFoundError(f"Support ticket not found: {ticket_id}")
    return ticket


def create_support_ticket(
    db: Session,
    email: str,
    subject: str,
    message: str,
    user_id: Optional[str] = None,
) -> SupportTicket:
    ticket = SupportTicket(
        user_id=user_id,
        email=email.lower(),
        subject=subject,
        message=message,
        status="open",
    )
    try:
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Support ticket creation failed: user_id={user_id}, error={e}")
        raise TransientStoreError("Support ticket could not be saved") from e

    logger.info(f"Support ticket opened: ticket_id={ticket.id}, user_id={user_id}")
    return ticket


def list_support_tickets(db: Session, status: Optional[str] = None) -> List[SupportTicket]:
    """Tickets newest first, optionally only those with the given status."""
    query = db.query(SupportTicket)
    if status:
        query = query.filter(SupportTicket.status == status)
    return query.order_by(SupportTicket.created_at.desc()).all()


def get_support_ticket_detail(db: Session, ticket_id: str) -> Dict[str, Any]:
    ticket = _get_ticket_or_raise(db, ticket_id)
    return {"ticket": ticket, "replies": list(ticket.replies)}


def update_support_ticket_status(db: Session, ticket_id: str, status: str) -> SupportTicket:
    """
    Raises:
        ValueError: unknown status
        NotFoundError: unknown ticket
        TransientStoreError: the write failed
    """
    if status not in TICKET_STATUSES:
        raise ValueError(f"Unsupported ticket status: {status}")

    ticket = _get_ticket_or_raise(db, ticket_id)
    try:
        ticket.status = status
        db.commit()
        db.refresh(ticket)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Ticket status update failed: ticket_id={ticket_id}, error={e}")
        raise TransientStoreError("Support ticket could not be updated") from e

    logger.info(f"Ticket status changed: ticket_id={ticket_id}, status={status}")
    return ticket


def add_support_ticket_reply(
    db: Session,
    ticket_id: str,
    reply: str,
    admin_id: str,
    now: datetime = None,
) -> SupportTicketReply:
    """Store an admin reply and mark the ticket replied."""
    ticket = _get_ticket_or_raise(db, ticket_id)
    now = now or datetime.now(timezone.utc)
    entry = SupportTicketReply(ticket_id=ticket.id, admin_id=admin_id, reply_text=reply, created_at=now)
    try:
        db.add(entry)
        ticket.status = "replied"
        ticket.replied_at = now
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Ticket reply failed: ticket_id={ticket_id}, error={e}")
        raise TransientStoreError("Support ticket reply could not be saved") from e

    logger.info(f"Ticket replied: ticket_id={ticket_id}, admin={admin_id}")
    return entry
