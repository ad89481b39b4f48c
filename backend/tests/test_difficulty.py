"""Tests for the difficulty level table."""

import pytest

from numberquest.problems.difficulty import DifficultyLevel, clamp_level

TABLE = {
    1: (5, 3, 15.0, 2),
    2: (10, 5, 15.0, 2),
    3: (15, 8, 12.0, 2),
    4: (20, 10, 12.0, 3),
    5: (25, 12, 10.0, 3),
    6: (50, 15, 10.0, 3),
    7: (75, 20, 8.0, 4),
    8: (100, 25, 8.0, 4),
    9: (150, 30, 6.0, 4),
    10: (200, 50, 6.0, 4),
}


@pytest.mark.parametrize("level", sorted(TABLE))
def test_table_values(level):
    max_first, max_second, time_limit, distractors = TABLE[level]
    d = DifficultyLevel(level)
    assert d.max_first_operand == max_first
    assert d.max_second_operand == max_second
    assert d.time_limit == time_limit
    assert d.number_of_distractors == distractors
    assert d.points_awarded == level * 10


@pytest.mark.parametrize("raw, expected", [(-3, 1), (0, 1), (1, 1), (10, 10), (11, 10), (999, 10)])
def test_level_is_clamped(raw, expected):
    assert DifficultyLevel(raw).level == expected
    assert clamp_level(raw) == expected


def test_derived_values_are_monotonic():
    levels = [DifficultyLevel(i) for i in range(1, 11)]
    for lower, higher in zip(levels, levels[1:]):
        assert higher.max_first_operand >= lower.max_first_operand
        assert higher.max_second_operand >= lower.max_second_operand
        assert higher.number_of_distractors >= lower.number_of_distractors
        assert higher.points_awarded >= lower.points_awarded
        assert higher.time_limit <= lower.time_limit


def test_recommended_age():
    assert DifficultyLevel(1).recommended_age == (5, 6)
    assert DifficultyLevel(4).recommended_age == (6, 7)
    assert DifficultyLevel(6).recommended_age == (7, 8)
    assert DifficultyLevel(7).recommended_age == (8, 9)
    assert DifficultyLevel(10).recommended_age == (9, 10)


def test_harder_and_easier_stay_in_range():
    assert DifficultyLevel(10).harder().level == 10
    assert DifficultyLevel(1).easier().level == 1
    assert DifficultyLevel(4).harder(2).level == 6


def test_levels_compare_by_value():
    assert DifficultyLevel(3) == DifficultyLevel(3)
    assert DifficultyLevel(12) == DifficultyLevel(10)


def test_to_dict():
    data = DifficultyLevel(7).to_dict()
    assert data["level"] == 7
    assert data["maxFirstOperand"] == 75
    assert data["timeLimit"] == 8.0
    assert data["recommendedAge"] == [8, 9]
