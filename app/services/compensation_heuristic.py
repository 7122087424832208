"""
Heuristic compensation scorer.

Deterministic, dependency-free scoring of one employee against the market
band for their role, their attributed revenue and the company budget.
Always produces a complete Suggestion; it is both the default path and the
fallback whenever the external reasoning service cannot be used.
"""
import math
from typing import NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel

from app.models.action import CompensationAction
from app.schemas.compensation import EmployeeProfile, MarketBand, SalaryFactors, Suggestion
from app.services.formatting import format_rs
from app.services.market_bands import expected_role_revenue, get_market_band

HEURISTIC_PATH = "heuristic"

DEFAULT_PERFORMANCE_SCORE = 5.0

# Ordered: the first matching group wins ("excellent" must not fall through to "low")
QUALITATIVE_PERFORMANCE_SCORES: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("excel", "ex"), 9.0),
    (("good",), 7.0),
    (("avg", "average"), 5.0),
    (("poor", "low"), 2.0),
)

PROFIT_MARGIN_TARGET = 0.4
MARKET_WEIGHT = 0.4
REVENUE_WEIGHT = 0.6
TIGHT_BUDGET_RATIO = 0.8
GENEROUS_BUDGET_RATIO = 1.5
TIGHT_BUDGET_FACTOR = 0.85
GENEROUS_BUDGET_FACTOR = 1.1
BAND_FLOOR_RATIO = 0.9
BAND_CEILING_RATIO = 1.2
SALARY_ROUNDING = 1000

POLICY_CHANGE_PERCENT = {
    CompensationAction.PROMOTE: 10,
    CompensationAction.DECREASE_SALARY: -10,
}


class NumericPerformance(BaseModel):
    score: float


class QualitativePerformance(BaseModel):
    label: str


PerformanceRating = Union[NumericPerformance, QualitativePerformance]


class SalaryAnalysis(NamedTuple):
    suggested_salary: int
    salary_difference: float
    salary_difference_percent: int
    market_band: MarketBand
    factors: SalaryFactors


def round_half_up(value: float) -> int:
    """Round .5 towards +inf, independent of Python's banker's rounding."""
    return int(math.floor(value + 0.5))


def parse_performance(raw) -> Optional[PerformanceRating]:
    """Resolve the loosely-typed performance field into a tagged rating."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        if math.isnan(raw):
            return None
        return NumericPerformance(score=float(raw))
    if isinstance(raw, str):
        text = raw.strip()
        try:
            value = float(text)
        except ValueError:
            return QualitativePerformance(label=text)
        return NumericPerformance(score=value) if math.isfinite(value) else None
    return None


def performance_score(raw) -> float:
    """Canonical 0-10 score for a numeric or qualitative performance value."""
    rating = parse_performance(raw)
    if isinstance(rating, NumericPerformance):
        return max(0.0, min(10.0, rating.score))
    if isinstance(rating, QualitativePerformance):
        label = rating.label.lower()
        for needles, score in QUALITATIVE_PERFORMANCE_SCORES:
            if any(needle in label for needle in needles):
                return score
    return DEFAULT_PERFORMANCE_SCORE


def salary_difference(suggested_salary: float, current_salary: Optional[float]) -> Tuple[float, int]:
    """Absolute and percent difference; both 0 when there is no current salary."""
    if not current_salary or current_salary <= 0:
        return 0, 0
    difference = suggested_salary - current_salary
    return difference, round_half_up(difference / current_salary * 100)


def _experience_years(profile: EmployeeProfile) -> float:
    if profile.experience is None or math.isnan(profile.experience):
        return 0.0
    return max(0.0, profile.experience)


def _base_salary(band: MarketBand, experience: float) -> float:
    if experience <= 2:
        return band.min + (band.mid - band.min) * (experience / 2)
    if experience <= 5:
        return band.mid + (band.max - band.mid) * ((experience - 2) / 3) * 0.5
    return band.mid + (band.max - band.mid) * min(1.0, (experience - 2) / 8)


def _budget_factor(budget: Optional[float], total_employees: int, base_salary: float) -> float:
    if not budget or total_employees <= 0:
        return 1.0
    per_employee = budget / total_employees
    if per_employee < base_salary * TIGHT_BUDGET_RATIO:
        return TIGHT_BUDGET_FACTOR
    if per_employee > base_salary * GENEROUS_BUDGET_RATIO:
        return GENEROUS_BUDGET_FACTOR
    return 1.0


def calculate_suggested_salary(
    profile: EmployeeProfile,
    budget: Optional[float],
    total_employees: int = 1,
) -> SalaryAnalysis:
    """Market band, performance, revenue and budget blended into a salary target."""
    band = get_market_band(profile.role)
    perf_score = performance_score(profile.performance)
    experience = _experience_years(profile)
    revenue = profile.revenue or 0

    base_salary = _base_salary(band, experience)
    perf_multiplier = 0.8 + (perf_score / 10) * 0.4

    revenue_based_salary = 0.0
    if revenue > 0:
        revenue_based_salary = revenue * (1 - PROFIT_MARGIN_TARGET)

    budget_factor = _budget_factor(budget, total_employees, base_salary)

    market_salary = base_salary * perf_multiplier
    if revenue_based_salary > 0:
        suggested = market_salary * MARKET_WEIGHT + revenue_based_salary * REVENUE_WEIGHT
    else:
        suggested = market_salary
    suggested *= budget_factor

    suggested = round_half_up(suggested / SALARY_ROUNDING) * SALARY_ROUNDING
    suggested = max(band.min * BAND_FLOOR_RATIO, min(band.max * BAND_CEILING_RATIO, suggested))
    suggested_salary = round_half_up(suggested)

    difference, difference_percent = salary_difference(suggested_salary, profile.salary)

    return SalaryAnalysis(
        suggested_salary=suggested_salary,
        salary_difference=difference,
        salary_difference_percent=difference_percent,
        market_band=band,
        factors=SalaryFactors(
            base_salary=round_half_up(base_salary),
            perf_multiplier=round(perf_multiplier, 2),
            revenue_based_salary=round_half_up(revenue_based_salary),
            budget_factor=round(budget_factor, 2),
        ),
    )


def _decide(
    perf_score: float,
    profit: float,
    estimated_salary: float,
    budget: Optional[float],
) -> CompensationAction:
    if perf_score <= 3 or profit < -0.2 * estimated_salary:
        return CompensationAction.FIRE
    if (
        perf_score >= 8
        and profit > 0.2 * estimated_salary
        and (not budget or budget > estimated_salary * 0.1)
    ):
        return CompensationAction.PROMOTE
    if profit < 0.05 * estimated_salary or (budget and budget < 0):
        return CompensationAction.DECREASE_SALARY
    return CompensationAction.NO_CHANGE


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def heuristic_analysis(
    profile: EmployeeProfile,
    budget: Optional[float],
    total_employees: int = 1,
) -> Suggestion:
    """Score one employee. Pure: identical inputs always yield an identical Suggestion."""
    band = get_market_band(profile.role)
    perf_score = performance_score(profile.performance)
    experience = _experience_years(profile)
    current_salary = profile.salary or 0

    estimated_salary = current_salary or band.mid
    estimated_revenue = profile.revenue or expected_role_revenue(profile.role)

    profit = estimated_revenue - estimated_salary
    profit_per_salary = profit / max(1, estimated_salary)

    budget_sign = (1.0 if budget > 0 else 0.5) if budget else 1.0
    score = (
        profit_per_salary * 5
        + (perf_score - 5) * 0.5
        + min(experience, 10) * 0.1
    ) * budget_sign

    action = _decide(perf_score, profit, estimated_salary, budget)
    confidence = min(0.95, max(0.2, 0.5 + abs(score) / 10))

    salary = calculate_suggested_salary(profile, budget, total_employees)

    reason = (
        f"Heuristic: revenue={format_rs(estimated_revenue)}, salary={format_rs(estimated_salary)}, "
        f"profit={format_rs(profit)}, perf={_plain_number(perf_score)}/10, "
        f"exp={_plain_number(experience)} yrs, budget={format_rs(budget) if budget else 'N/A'}"
    )

    return Suggestion(
        action=action,
        confidence=round(confidence, 2),
        reason=reason,
        recommended_change_percent=POLICY_CHANGE_PERCENT.get(action, 0),
        current_salary=estimated_salary,
        suggested_salary=salary.suggested_salary,
        salary_difference=salary.salary_difference,
        salary_difference_percent=salary.salary_difference_percent,
        market_salary_range=salary.market_band,
        salary_factors=salary.factors,
        estimated_revenue=estimated_revenue,
        profit=profit,
        using=HEURISTIC_PATH,
    )
