import pytest

from app.services.formatting import format_inr, format_rs, suggestion_view


@pytest.mark.parametrize("amount, expected", [
    (0, "0"),
    (999, "999"),
    (1000, "1,000"),
    (100000, "1,00,000"),
    (1234567, "12,34,567"),
    (1000000.0, "10,00,000"),
    (-250000, "-2,50,000"),
    (1234.5, "1,234.5"),
])
def test_format_inr_uses_indian_grouping(amount, expected):
    assert format_inr(amount) == expected


def test_format_rs():
    assert format_rs(1200000) == "Rs 12,00,000"
    assert format_rs(None) is None


def test_suggestion_view_adds_display_fields():
    view = suggestion_view({
        "suggested_salary": 1100000,
        "current_salary": 1000000,
        "salary_difference": -50000,
        "market_salary_range": {"min": 600000, "mid": 1000000, "max": 1800000},
    })
    assert view["suggested_salary_formatted"] == "Rs 11,00,000"
    assert view["salary_difference_formatted"] == "Rs 50,000"
    assert view["salary_change_type"] == "decrease"
    assert view["market_salary_range_formatted"]["max"] == "Rs 18,00,000"
