"""Admin-only table reads."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AnalyticsDataset
from ..services import load_analytics_dataset, require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dataset", response_model=AnalyticsDataset)
async def analytics_dataset_endpoint(
    db: Session = Depends(get_session),
    _admin: User = Depends(require_admin()),
) -> AnalyticsDataset:
    """Unaggregated rows for the dashboard; grouping and trends are computed by the client."""

    return load_analytics_dataset(db)
