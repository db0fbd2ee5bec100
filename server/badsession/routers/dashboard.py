from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.dashboard import DashboardResponse
from badsession.services.dashboard import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> DashboardResponse:
    return build_dashboard(db)
