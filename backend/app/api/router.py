"""
API Router - Aggregates all API endpoints.
"""
from fastapi import APIRouter

from app.api import events, periods, stats, subperiods

api_router = APIRouter()

# Collections
api_router.include_router(periods.router, prefix="/periods", tags=["Periods"])
api_router.include_router(subperiods.router, prefix="/subperiods", tags=["Sub-periods"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])

# Diagnostics
api_router.include_router(stats.router, tags=["Diagnostics"])
