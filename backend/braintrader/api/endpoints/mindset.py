"""
Mindset API endpoints for Braintrader
"""

from typing import Any

from fastapi import APIRouter

from braintrader.core.config import settings
from braintrader.schemas.report import MindsetTip
from braintrader.services.mindset import DAILY_MANTRA, current_tip
from braintrader.services.session import now_ms

router = APIRouter()


@router.get("", response_model=MindsetTip)
def get_mindset_tip() -> Any:
    """
    Get the psychology tip currently in rotation and the daily mantra.
    """
    tip = current_tip(now_ms(), settings.tip_rotation_seconds)
    return MindsetTip(title=tip.title, body=tip.body, mantra=DAILY_MANTRA)
