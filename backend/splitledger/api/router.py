"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from splitledger.api.routes import (
    transactions, groups, invites, stats, profile, exports, events
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(transactions.router)
api_router.include_router(groups.router)
api_router.include_router(invites.router)
api_router.include_router(stats.router)
api_router.include_router(profile.router)
api_router.include_router(exports.router)
api_router.include_router(events.router)
