"""
API Router for Braintrader

This module combines all API endpoints into a single router.
"""

from fastapi import APIRouter

from braintrader.api.endpoints import auth, journal, mindset, reports

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(journal.router, prefix="/journal", tags=["journal"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(mindset.router, prefix="/mindset", tags=["mindset"])
