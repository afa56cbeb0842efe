from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.plan import PlanResponse
from app.services.plan_catalog import list_active_plans

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=List[PlanResponse])
def get_plans(db: Session = Depends(get_db)):
    """Active subscription plans in display order."""
    return list_active_plans(db)
