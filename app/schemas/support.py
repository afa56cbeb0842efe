"""
Pydantic schemas for support tickets.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field


class CreateSupportTicketRequest(BaseModel):
    email: EmailStr = Field(..., description="Address the answer goes to")
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ayse@example.com",
                "subject": "Animasyon indirilemiyor",
                "message": "Oluşturduğum animasyonu indirirken hata alıyorum."
            }
        }


class SupportTicketResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    email: str
    subject: str
    message: str
    status: str
    created_at: Optional[datetime] = None
    replied_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupportTicketReplyResponse(BaseModel):
    id: str
    ticket_id: str
    admin_id: str
    reply_text: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupportTicketDetailResponse(BaseModel):
    ticket: SupportTicketResponse
    replies: List[SupportTicketReplyResponse]


class UpdateTicketStatusRequest(BaseModel):
    status: str = Field(..., pattern="^(open|replied|closed)$")


class TicketReplyRequest(BaseModel):
    reply: str = Field(..., min_length=1, max_length=5000)
