from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storelink.dependencies import get_db
from storelink.schemas.dashboard import DashboardSummary
from storelink.services.dashboard_service import dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def get_summary(include_disabled: bool = True, db: Session = Depends(get_db)):
    return dashboard_summary(db, include_disabled=include_disabled)
