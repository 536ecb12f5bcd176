"""
Pytest configuration and fixtures.
"""

from typing import List

import pytest

from uncontrib.config import Config
from uncontrib.model import ContributionRecord


@pytest.fixture
def sample_config() -> Config:
    """Return a sample configuration."""
    return Config()


@pytest.fixture
def lines_2015_2018() -> List[str]:
    """Return pdftotext -layout lines of a 2015-2018 report."""
    return [
        "                     UN Mission's Summary detailed by Country",
        "                         Month of Report : 31-Mar-16",
        "",
        "Country        UN Mission      Description                    M      F    Totals",
        "Bangladesh",
        "               MINUSMA         Individual Police              10      2      12",
        "               UNMISS          Contingent Troop              400     20     420",
        "               UNMISS          Experts on Mission              5      0       5",
        "                                                    Total    415     22     437",
        "                                  Page 1 of 10",
        "Ghana",
        "               UNIFIL          Staff Officer                   3      1       4",
    ]


@pytest.fixture
def lines_2019_2022() -> List[str]:
    """Return pdftotext -layout lines of a 2019-2022 report."""
    return [
        "        Summary of Contributions to UN Peacekeeping by Country, Mission and Post",
        "                                 30/04/2020",
        "   Country Name      POST                     MALE    FEMALE    TOTAL",
        "1    Bangladesh",
        "       MINUSCA     Contingent Troops          1200        30     1230",
        "                   Individual Police            50        10       60",
        "       UNMISS      Experts on Mission            8         2       10",
        "                                  Page 2 of 12",
        "2    Ethiopia",
        "       UNISFA      Contingent Troops          3000       150     3150",
    ]


@pytest.fixture
def lines_2023_plus() -> List[str]:
    """Return pdftotext -layout lines of a 2023+ report."""
    return [
        "  Contribution of Uniformed Personnel to UN Peacekeeping Operations by Mission, Country",
        "Mission     Country          Personnel Type           Male   Female   Total",
        "UNMISS",
        "    Bangladesh",
        "                 Individual Police        20     5     25",
        "                 Troops                  500    40    540",
        "    Nepal",
        "                 Staff Officer             6     1      7",
        "  Rwanda Formed Police Units  130  20  150",
        "                                  Page 3 of 10",
        "UNIFIL",
        "    India",
        "                 Experts on Mission         3     0      3",
        "Total UNIFIL                               3     0      3",
        "Report Generated: 15/01/2023",
    ]


def make_record(year=2020, month=1, mission="UNMISS", country="Bangladesh",
                personnel_type="Individual Police", male=10, female=2, total=12) -> ContributionRecord:
    """Create a record for use in tests."""
    return {
        "year": year,
        "month": month,
        "mission": mission,
        "country": country,
        "personnel_type": personnel_type,
        "male": male,
        "female": female,
        "total": total,
    }


@pytest.fixture
def sample_record() -> ContributionRecord:
    """Return a sample record."""
    return make_record()


@pytest.fixture
def sample_records() -> List[ContributionRecord]:
    """Return a list of unsorted sample records."""
    return [
        make_record(year=2021, month=2, mission="UNIFIL", country="Ghana", male=3, female=1, total=4),
        make_record(year=2020, month=5, mission="UNMISS", country="Nepal", personnel_type="Troops",
                    male=500, female=40, total=540),
        make_record(year=2020, month=5, mission="MINUSCA", country="Rwanda",
                    personnel_type="Formed Police Units", male=130, female=20, total=150),
        make_record(year=2020, month=1, mission="UNMISS", country="Bangladesh"),
    ]


@pytest.fixture
def record_factory():
    """Return a factory creating records."""
    return make_record
