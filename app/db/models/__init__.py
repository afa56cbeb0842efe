"""
Database models module.

Imports every model so they are registered with Base.metadata before table
creation and migrations.
"""
from app.db.models.user import User
from app.db.models.subscription_plan import SubscriptionPlan
from app.db.models.subscription import UserSubscription
from app.db.models.usage import UserUsage
from app.db.models.support_ticket import SupportTicket, SupportTicketReply

__all__ = [
    "User",
    "SubscriptionPlan",
    "UserSubscription",
    "UserUsage",
    "SupportTicket",
    "SupportTicketReply",
]
