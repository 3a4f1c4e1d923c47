"""
Report API endpoints for Braintrader

This module provides the period report: summary statistics, equity curve and
maximum drawdown over a rolling window.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from braintrader.analytics import ReportPeriod, build_report
from braintrader.api.deps import get_current_user, get_record_feed
from braintrader.core.config import settings
from braintrader.models.user import User
from braintrader.schemas.report import Report
from braintrader.services.record_feed import RecordFeed
from braintrader.services.session import now_ms

router = APIRouter()


@router.get("", response_model=Report)
def get_report(
    period: ReportPeriod = Query(ReportPeriod(settings.default_report_period)),
    feed: RecordFeed = Depends(get_record_feed),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get the report for the current user over a rolling period.
    """
    records = feed.snapshot(current_user.id)
    return Report.model_validate(build_report(records, period, now_ms()))
