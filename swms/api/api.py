"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from swms.api.endpoints import attendance, auth, tasks, users

api_router = APIRouter()

# Auth (register, login, password reset) — public
api_router.include_router(auth.router)

# Own profile and account management
api_router.include_router(users.profile_router)
api_router.include_router(users.router)

# Business resources
api_router.include_router(tasks.router)
api_router.include_router(attendance.router)
