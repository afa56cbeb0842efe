"""
Contact form endpoint. Signed-in users get the ticket linked to their account.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_optional_user_id
from app.db.session import get_db
from app.db.models.user import User
from app.schemas.support import CreateSupportTicketRequest, SupportTicketResponse
from app.services.support_service import create_support_ticket

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/support-tickets", tags=["Support"])


@router.post("", response_model=SupportTicketResponse, status_code=status.HTTP_201_CREATED)
def open_ticket(
    payload: CreateSupportTicketRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: Session = Depends(get_db)
):
    if user_id and db.query(User.id).filter(User.id == user_id).first() is None:
        user_id = None

    return create_support_ticket(
        db,
        email=payload.email,
        subject=payload.subject,
        message=payload.message,
        user_id=user_id,
    )
