from fastapi import APIRouter
from app.routers import employees, analysis, actions

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(employees.router, tags=["Employees"])
api_router.include_router(analysis.router, tags=["Analysis"])
api_router.include_router(actions.router, tags=["Actions"])
