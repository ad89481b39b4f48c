"""
Problem generator for NumberQuest - age-appropriate arithmetic with variety.

Operation mix is weighted (mostly addition) and gated by difficulty:
- Addition from level 1
- Subtraction from level 2
- Multiplication from level 5, operands capped at 12 x 10

Recently used operand pairs are avoided and every problem ships with
plausible wrong answers for multiple choice.
"""

import logging
import random
from collections import deque

import numpy as np

from numberquest.config import Settings, get_settings
from numberquest.problems.difficulty import DifficultyLevel, clamp_level
from numberquest.problems.models import (
    PerformanceObservation,
    Problem,
    ProblemKind,
    problem_key,
)

logger = logging.getLogger(__name__)


def operation_weights(settings: Settings) -> dict[ProblemKind, float]:
    return {
        ProblemKind.ADDITION: settings.addition_weight,
        ProblemKind.SUBTRACTION: settings.subtraction_weight,
        ProblemKind.MULTIPLICATION: settings.multiplication_weight,
    }


def unlock_levels(settings: Settings) -> dict[ProblemKind, int]:
    return {
        ProblemKind.ADDITION: settings.addition_min_level,
        ProblemKind.SUBTRACTION: settings.subtraction_min_level,
        ProblemKind.MULTIPLICATION: settings.multiplication_min_level,
    }


def _mistakes(kind: ProblemKind, answer: int, rng: random.Random) -> list[int]:
    """Common wrong answers children give for this kind of problem."""
    if kind is ProblemKind.ADDITION:
        return [
            answer + 1,
            answer - 1,
            answer + 2,
            answer - 2,
            max(0, answer - rng.randint(1, 3)),
        ]
    if kind is ProblemKind.SUBTRACTION:
        return [
            answer + 1,
            answer - 1,
            answer + 2,
            max(0, answer + rng.randint(1, 5)),
        ]
    return [
        answer + rng.randint(1, 5),
        answer - rng.randint(1, 5),
        max(1, answer // 2),
        answer * 2,
    ]


def generate_distractors(
    answer: int,
    count: int,
    kind: ProblemKind,
    rng: random.Random,
) -> tuple[int, ...]:
    """
    Generate unique, non-negative wrong answers.

    Args:
        answer: The correct answer
        count: Number of distractors required
        kind: Operation, selects the mistake patterns
        rng: Random source

    Returns:
        Exactly ``count`` distinct values, none equal to ``answer``
    """
    distractors: list[int] = []

    for _ in range(count):
        candidate = max(0, rng.choice(_mistakes(kind, answer, rng)))
        if candidate != answer and candidate not in distractors:
            distractors.append(candidate)

    # Fill remaining slots near the answer
    while len(distractors) < count:
        candidate = max(0, answer + rng.randint(-5, 5))
        if candidate != answer and candidate not in distractors:
            distractors.append(candidate)

    return tuple(distractors[:count])


class ProblemGenerator:
    """Generates arithmetic problems at the current difficulty level."""

    def __init__(
        self,
        initial_difficulty: int = 1,
        rng: random.Random | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._current = DifficultyLevel(initial_difficulty)
        self._weights = operation_weights(self.settings)
        self._unlock_levels = unlock_levels(self.settings)

        # Operand pair keys of the most recent problems
        self._recent_keys: deque[str] = deque(maxlen=self.settings.recent_problems_limit)
        self._performance: deque[PerformanceObservation] = deque(
            maxlen=self.settings.generator_history_limit
        )

    @property
    def difficulty(self) -> int:
        """Get current difficulty level."""
        return self._current.level

    @property
    def current_difficulty(self) -> DifficultyLevel:
        return self._current

    @property
    def recent_keys(self) -> list[str]:
        return list(self._recent_keys)

    @property
    def performance_window(self) -> list[PerformanceObservation]:
        return list(self._performance)

    def generate_problem(self) -> Problem:
        """Generate a new problem at the current difficulty level."""
        kind = self._select_kind()
        first, second = self._generate_operands(kind)
        answer = kind.apply(first, second)
        distractors = generate_distractors(
            answer, self._current.number_of_distractors, kind, self._rng
        )
        problem = Problem.create(kind, first, second, self._current, distractors)

        self._recent_keys.append(problem.key)
        return problem

    def generate_problems(self, count: int) -> list[Problem]:
        """Generate a batch of problems for a level or session."""
        return [self.generate_problem() for _ in range(max(0, count))]

    def set_difficulty(self, level: int) -> None:
        """Set difficulty directly (clamped to 1-10)."""
        new_level = DifficultyLevel(level)
        if new_level != self._current:
            logger.debug(f"Difficulty {self._current.level} -> {new_level.level}: set explicitly")
        self._current = new_level

    def update_difficulty(self, observation: PerformanceObservation) -> int:
        """
        Record a result and self-adjust difficulty from recent performance.

        Looks at the last few results once enough are available: fast and
        accurate play moves up a level, slow or inaccurate play moves down.

        Returns:
            New difficulty level
        """
        self._performance.append(observation)

        sample_size = self.settings.generator_sample_size
        if len(self._performance) < sample_size:
            return self.difficulty

        recent = list(self._performance)[-sample_size:]
        accuracy = float(np.mean([o.accuracy for o in recent]))
        avg_time = float(np.mean([o.response_time for o in recent]))
        time_limit = self._current.time_limit
        target_time = time_limit * self.settings.generator_target_time_ratio

        if accuracy >= self.settings.generator_increase_accuracy and avg_time <= target_time:
            self._adjust(1, "High accuracy and fast responses")
        elif accuracy < self.settings.generator_decrease_accuracy or avg_time > time_limit:
            self._adjust(-1, "Low accuracy or slow responses")

        return self.difficulty

    def reset(self) -> None:
        """Reset to a fresh level 1 generator."""
        self._recent_keys.clear()
        self._performance.clear()
        self._current = DifficultyLevel(1)

    def _adjust(self, delta: int, reason: str) -> None:
        """Adjust difficulty with bounds checking."""
        new_level = clamp_level(self._current.level + delta)
        if new_level != self._current.level:
            logger.info(f"Difficulty {self._current.level} -> {new_level}: {reason}")
            self._current = DifficultyLevel(new_level)

    def _select_kind(self) -> ProblemKind:
        """Weighted random choice among operations unlocked at this level."""
        available = [
            kind for kind in ProblemKind
            if self._unlock_levels[kind] <= self._current.level
        ]
        weights = [self._weights[kind] for kind in available]
        total = sum(weights)
        if not available or total <= 0:
            return ProblemKind.ADDITION

        draw = self._rng.random() * total
        cumulative = 0.0
        for kind, weight in zip(available, weights):
            cumulative += weight
            if draw < cumulative:
                return kind

        # Floating point leftovers
        return ProblemKind.ADDITION

    def _generate_operands(self, kind: ProblemKind) -> tuple[int, int]:
        """Draw operands for ``kind``, avoiding recently used pairs."""
        max_first = self._current.max_first_operand
        max_second = self._current.max_second_operand
        max_attempts = self.settings.max_operand_attempts

        for attempt in range(1, max_attempts + 1):
            if kind is ProblemKind.ADDITION:
                first = self._rng.randint(1, max_first)
                second = self._rng.randint(1, max_second)
            elif kind is ProblemKind.SUBTRACTION:
                # Keep results non-negative
                first = self._rng.randint(1, max_first)
                second = self._rng.randint(1, min(first, max_second))
            else:
                first = self._rng.randint(1, min(max_first, self.settings.multiplication_max_first))
                second = self._rng.randint(1, min(max_second, self.settings.multiplication_max_second))

            if problem_key(kind, first, second) not in self._recent_keys:
                break
            logger.debug(f"Operand pair {first}{kind.symbol}{second} used recently (attempt {attempt})")

        return first, second
