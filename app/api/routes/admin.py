"""
Admin back-office endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth_dependency import require_admin
from app.db.session import get_db
from app.schemas.admin import (
    AdminStatsResponse,
    AdminUserInfo,
    BlockUserRequest,
    ChangePlanRequest,
    GrantCreditsRequest,
    UsageCountersResponse,
)
from app.schemas.support import (
    SupportTicketDetailResponse,
    SupportTicketReplyResponse,
    SupportTicketResponse,
    TicketReplyRequest,
    UpdateTicketStatusRequest,
)
from app.services import admin_service, support_service
from app.services.usage_service import grant_credits, reset_usage

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=List[AdminUserInfo])
def list_users(db: Session = Depends(get_db)):
    return admin_service.list_users_for_admin(db)


@router.get("/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    return admin_service.get_user_detail(db, user_id)


@router.get("/stats", response_model=AdminStatsResponse)
def get_stats(db: Session = Depends(get_db)):
    return admin_service.get_admin_stats(db)


@router.post("/users/{user_id}/credits", response_model=UsageCountersResponse)
def add_credits(user_id: str, payload: GrantCreditsRequest, db: Session = Depends(get_db)):
    admin_service.get_user_or_raise(db, user_id)
    return grant_credits(db, user_id, payload.credits)


@router.post("/users/{user_id}/reset-usage", response_model=UsageCountersResponse)
def reset_user_usage(user_id: str, db: Session = Depends(get_db)):
    admin_service.get_user_or_raise(db, user_id)
    return reset_usage(db, user_id)


@router.post("/users/{user_id}/plan")
def change_plan(user_id: str, payload: ChangePlanRequest, db: Session = Depends(get_db)):
    plan = admin_service.change_user_plan(db, user_id, payload.plan)
    return {"success": True, "user_id": user_id, "plan": plan}


@router.post("/users/{user_id}/block")
def block_user(user_id: str, payload: BlockUserRequest, db: Session = Depends(get_db)):
    user = admin_service.set_user_blocked(db, user_id, payload.blocked)
    return {"success": True, "user_id": user.id, "is_blocked": user.is_blocked}


@router.get("/tickets", response_model=List[SupportTicketResponse])
def list_tickets(
    status: Optional[str] = Query(None, pattern="^(open|replied|closed)$"),
    db: Session = Depends(get_db)
):
    return support_service.list_support_tickets(db, status)


@router.get("/tickets/{ticket_id}", response_model=SupportTicketDetailResponse)
def get_ticket(ticket_id: str, db: Session = Depends(get_db)):
    return support_service.get_support_ticket_detail(db, ticket_id)


@router.post("/tickets/{ticket_id}/status", response_model=SupportTicketResponse)
def update_ticket_status(ticket_id: str, payload: UpdateTicketStatusRequest, db: Session = Depends(get_db)):
    return support_service.update_support_ticket_status(db, ticket_id, payload.status)


@router.post("/tickets/{ticket_id}/reply", response_model=SupportTicketReplyResponse)
def reply_to_ticket(
    ticket_id: str,
    payload: TicketReplyRequest,
    admin_id: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return support_service.add_support_ticket_reply(db, ticket_id, payload.reply, admin_id)
