from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from app.models.action import CompensationAction

Performance = Union[float, str, None]

class EmployeeProfile(BaseModel):
    """Read-only view of the employee attributes the decision engine consumes."""
    ssid: str
    name: Optional[str] = None
    role: Optional[str] = None
    performance: Performance = None
    experience: Optional[float] = None
    salary: Optional[float] = None
    revenue: Optional[float] = None
    status: str = "ACTIVE"

    model_config = ConfigDict(from_attributes=True)

class MarketBand(BaseModel):
    min: int
    mid: int
    max: int

    model_config = ConfigDict(frozen=True)

class SalaryFactors(BaseModel):
    base_salary: int
    perf_multiplier: float
    revenue_based_salary: int
    budget_factor: float

class Suggestion(BaseModel):
    """
    Recommendation snapshot for one employee. Created only by the decision
    orchestrator and replaced wholesale on each analysis run.
    """
    action: CompensationAction
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    recommended_change_percent: int
    current_salary: float
    suggested_salary: int
    salary_difference: float
    salary_difference_percent: int
    salary_reason: Optional[str] = None
    market_salary_range: MarketBand
    salary_factors: Optional[SalaryFactors] = None
    estimated_revenue: Optional[float] = None
    profit: Optional[float] = None
    using: str = "heuristic"

class EmployeeAnalysis(BaseModel):
    ssid: str
    name: Optional[str] = None
    role: Optional[str] = None
    current_salary: Optional[float] = None
    suggestion: Suggestion

class ActionBreakdown(BaseModel):
    FIRE: int = 0
    PROMOTE: int = 0
    DECREASE_SALARY: int = 0
    NO_CHANGE: int = 0

class BatchSummary(BaseModel):
    total_employees: int
    company_budget: Optional[float] = None
    total_current_salaries: float
    total_suggested_salaries: float
    total_revenue: float
    action_breakdown: ActionBreakdown
    # Positive = savings, negative = net suggested increase
    projected_savings: float
    # Integer percentages of (1 - salaries / revenue); 0 when revenue is 0
    current_profit_margin: int
    projected_profit_margin: int

class BatchAnalysis(BaseModel):
    results: List[EmployeeAnalysis]
    summary: BatchSummary

# --- Request bodies ---

class EmployeeUpsert(BaseModel):
    ssid: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    performance: Performance = None
    experience: Optional[float] = Field(default=None, allow_inf_nan=False)
    salary: Optional[float] = Field(default=None, allow_inf_nan=False)
    revenue: Optional[float] = Field(default=None, allow_inf_nan=False)
    status: Optional[str] = None

class AnalyzeRequest(BaseModel):
    budget: Optional[float] = Field(default=None, allow_inf_nan=False)
    ssids: Optional[List[str]] = None

class ApplyActionRequest(BaseModel):
    ssid: Optional[str] = None
    action: Optional[str] = None
    note: Optional[str] = None
    change_percent: Optional[float] = None

# --- Responses ---

class EmployeeResponse(BaseModel):
    ssid: str
    name: Optional[str] = None
    role: Optional[str] = None
    performance: Performance = None
    experience: Optional[float] = None
    salary: Optional[float] = None
    revenue: Optional[float] = None
    status: str
    suggestion: Optional[Dict[str, Any]] = None
    last_analyzed: Optional[datetime] = None
    last_promoted_at: Optional[datetime] = None
    terminated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ActionRecordResponse(BaseModel):
    id: int
    ssid: str
    action: str
    note: Optional[str] = None
    details: Dict[str, Any]
    applied_at: datetime

    model_config = ConfigDict(from_attributes=True)
