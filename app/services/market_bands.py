"""
Market salary bands and role revenue expectations (annual, INR).

Policy data: read-only at runtime and shared freely across requests.
"""
from types import MappingProxyType
from typing import Mapping, Optional

from app.schemas.compensation import MarketBand

UNKNOWN_ROLE = "unknown"

MARKET_SALARY_RANGES: Mapping[str, MarketBand] = MappingProxyType({
    "intern": MarketBand(min=180000, mid=300000, max=480000),
    "junior": MarketBand(min=360000, mid=500000, max=700000),
    "developer": MarketBand(min=600000, mid=1000000, max=1800000),
    "engineer": MarketBand(min=600000, mid=1000000, max=1800000),
    "senior developer": MarketBand(min=1200000, mid=1800000, max=2800000),
    "senior engineer": MarketBand(min=1200000, mid=1800000, max=2800000),
    "lead": MarketBand(min=1500000, mid=2200000, max=3500000),
    "manager": MarketBand(min=1200000, mid=1800000, max=3000000),
    "senior manager": MarketBand(min=1800000, mid=2500000, max=4000000),
    "director": MarketBand(min=2500000, mid=4000000, max=6000000),
    "sales": MarketBand(min=400000, mid=800000, max=1500000),
    UNKNOWN_ROLE: MarketBand(min=400000, mid=700000, max=1200000),
})

# Expected yearly revenue contribution when an employee has none attributed
ROLE_REVENUE: Mapping[str, int] = MappingProxyType({
    "engineer": 2000000,
    "developer": 2000000,
    "senior developer": 3500000,
    "manager": 4000000,
    "sales": 5000000,
    "intern": 200000,
    UNKNOWN_ROLE: 1200000,
})


def normalize_role(role: Optional[str]) -> str:
    return (role or UNKNOWN_ROLE).strip().lower() or UNKNOWN_ROLE


def get_market_band(role: Optional[str]) -> MarketBand:
    return MARKET_SALARY_RANGES.get(normalize_role(role), MARKET_SALARY_RANGES[UNKNOWN_ROLE])


def expected_role_revenue(role: Optional[str]) -> int:
    return ROLE_REVENUE.get(normalize_role(role), ROLE_REVENUE[UNKNOWN_ROLE])
