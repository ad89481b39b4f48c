"""
Difficulty levels for NumberQuest.

A level is an integer 1-10. Everything else (operand ranges, time pressure,
number of multiple choice distractors, points) is derived from it:

- 1-2: tiny numbers, plenty of time (ages 5-6)
- 3-4: up to 20 (ages 6-7)
- 5-6: up to 50, multiplication unlocks (ages 7-8)
- 7-8: up to 100 (ages 8-9)
- 9-10: up to 200, quick thinking (ages 9-10)
"""

from dataclasses import dataclass

MIN_LEVEL = 1
MAX_LEVEL = 10

# level: (max_first_operand, max_second_operand)
OPERAND_RANGES: dict[int, tuple[int, int]] = {
    1: (5, 3),
    2: (10, 5),
    3: (15, 8),
    4: (20, 10),
    5: (25, 12),
    6: (50, 15),
    7: (75, 20),
    8: (100, 25),
    9: (150, 30),
    10: (200, 50),
}


def clamp_level(level: int) -> int:
    """Clamp level to the allowed 1-10 range."""
    if level < MIN_LEVEL:
        return MIN_LEVEL
    if level > MAX_LEVEL:
        return MAX_LEVEL
    return level


@dataclass(frozen=True)
class DifficultyLevel:
    """Gameplay parameters derived from a difficulty level."""

    level: int = MIN_LEVEL

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", clamp_level(int(self.level)))

    @property
    def max_first_operand(self) -> int:
        return OPERAND_RANGES[self.level][0]

    @property
    def max_second_operand(self) -> int:
        return OPERAND_RANGES[self.level][1]

    @property
    def time_limit(self) -> float:
        """Seconds allowed to solve a problem."""
        if self.level <= 2:
            return 15.0
        elif self.level <= 4:
            return 12.0
        elif self.level <= 6:
            return 10.0
        elif self.level <= 8:
            return 8.0
        return 6.0

    @property
    def number_of_distractors(self) -> int:
        """Wrong answer choices shown alongside the correct one."""
        if self.level <= 3:
            return 2
        elif self.level <= 6:
            return 3
        return 4

    @property
    def points_awarded(self) -> int:
        return self.level * 10

    @property
    def recommended_age(self) -> tuple[int, int]:
        if self.level <= 2:
            return (5, 6)
        elif self.level <= 4:
            return (6, 7)
        elif self.level <= 6:
            return (7, 8)
        elif self.level <= 8:
            return (8, 9)
        return (9, 10)

    def harder(self, steps: int = 1) -> "DifficultyLevel":
        return DifficultyLevel(self.level + steps)

    def easier(self, steps: int = 1) -> "DifficultyLevel":
        return DifficultyLevel(self.level - steps)

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level,
            "maxFirstOperand": self.max_first_operand,
            "maxSecondOperand": self.max_second_operand,
            "timeLimit": self.time_limit,
            "numberOfDistractors": self.number_of_distractors,
            "pointsAwarded": self.points_awarded,
            "recommendedAge": list(self.recommended_age),
        }
