"""
Shared FastAPI dependencies.

The decision orchestrator is built once from settings; tests and alternative
deployments swap it through app.dependency_overrides[get_orchestrator].
"""
from functools import lru_cache

from app.core.config import settings
from app.services.decision_engine import DecisionOrchestrator, build_orchestrator


@lru_cache(maxsize=1)
def get_orchestrator() -> DecisionOrchestrator:
    return build_orchestrator(settings.ai)


__all__ = [
    "get_orchestrator",
]
