import math

import pytest

from apps.goals.domain.entities import PeriodStatus, ProgressLabel
from apps.goals.domain.errors import InvalidInput
from apps.goals.domain.services.status import (
    classify_status,
    progress_label,
    progress_percent,
    validate_amount,
)


@pytest.mark.parametrize('completed, target, expected', [
    (100, 100, PeriodStatus.COMPLETED),
    (150, 100, PeriodStatus.COMPLETED),
    (75, 100, PeriodStatus.IN_PROGRESS),
    (70, 100, PeriodStatus.IN_PROGRESS),
    (69.9, 100, PeriodStatus.AT_RISK),
    (20, 100, PeriodStatus.AT_RISK),
    (0, 100, PeriodStatus.AT_RISK),
    (10, 0, PeriodStatus.AT_RISK),
])
def test_classify_status(completed, target, expected):
    assert classify_status(completed, target) == expected


def test_status_values_match_reporting_contract():
    assert {s.value for s in PeriodStatus} == {'completed', 'in_progress', 'at_risk'}


@pytest.mark.parametrize('completed, target, percent, label', [
    (50, 50, 100, ProgressLabel.COMPLETED),
    (35, 50, 70, ProgressLabel.ON_TRACK),
    (15, 50, 30, ProgressLabel.NEEDS_IMPROVEMENT),
    (5, 50, 10, ProgressLabel.JUST_STARTED),
    (5, 0, 0, ProgressLabel.JUST_STARTED),
])
def test_progress_display(completed, target, percent, label):
    assert progress_percent(completed, target) == percent
    assert progress_label(completed, target) == label


def test_validate_amount_accepts_numbers_and_numeric_strings():
    assert validate_amount(0) == 0
    assert validate_amount(12.5) == 12.5
    assert validate_amount("7") == 7.0


@pytest.mark.parametrize('value', [-1, "abc", None, True, math.nan, math.inf, [1]])
def test_validate_amount_rejects(value):
    with pytest.raises(InvalidInput):
        validate_amount(value)
