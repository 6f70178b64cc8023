"""
Shared pytest fixtures.
"""

import pytest

from bazi_intake.bazi import Gender
from bazi_intake.form import BirthChartInput


@pytest.fixture
def valid_fields() -> dict:
    """Raw field values for a complete, valid male chart."""
    return {
        "birth_year": "1990",
        "year_pillar": "甲子",
        "month_pillar": "丙寅",
        "day_pillar": "戊辰",
        "hour_pillar": "壬戌",
        "start_age": "3",
        "first_da_yun": "丁卯",
    }


@pytest.fixture
def valid_record(valid_fields) -> BirthChartInput:
    return BirthChartInput(name="Alex", gender=Gender.MALE, **valid_fields)
