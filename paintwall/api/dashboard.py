# paintwall/api/dashboard.py

from typing import Optional

from fastapi import APIRouter, Query

from paintwall.core.config import business_today
from paintwall.db.engine import get_engine
from paintwall.db.operations import get_project_metrics_by_year_json
from paintwall.models.finance import DashboardMetricsOut

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardMetricsOut)
def dashboard_metrics(
    year: Optional[int] = Query(default=None, ge=1900, le=9999, description="Defaults to the current year"),
    company_id: Optional[int] = Query(default=None),
) -> DashboardMetricsOut:
    """
    Year-at-a-glance cards: jobs completed, money earned, customers served,
    open work, labor and taxes.
    """
    year = year or business_today().year
    engine = get_engine()
    with engine.connect() as conn:
        metrics = get_project_metrics_by_year_json(conn, year, company_id)
    return DashboardMetricsOut(**metrics)
