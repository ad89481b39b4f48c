"""Shared fixtures for NumberQuest tests."""

from __future__ import annotations

import random
import uuid

import pytest

from numberquest.config import Settings
from numberquest.problems.models import PerformanceObservation, ProblemKind


class FixedRandom(random.Random):
    """Random source with a fixed ``random()`` draw.

    With ``pin_ranges`` every ``randint`` returns the low end and ``choice``
    the first element.
    """

    def __init__(self, value: float = 0.0, pin_ranges: bool = False) -> None:
        super().__init__(0)
        self.value = value
        self.pin_ranges = pin_ranges

    def random(self) -> float:
        return self.value

    def getrandbits(self, k: int) -> int:
        # Keeps integer draws on the real generator
        return super().getrandbits(k)

    def randint(self, a: int, b: int) -> int:
        if self.pin_ranges:
            return a
        return super().randint(a, b)

    def choice(self, seq):
        if self.pin_ranges:
            return seq[0]
        return super().choice(seq)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fixed_rng():
    return FixedRandom


@pytest.fixture
def observe():
    """Factory for performance observations."""

    def _observe(
        correct: bool = True,
        time: float = 2.0,
        hints: int = 0,
        kind: ProblemKind | None = None,
    ) -> PerformanceObservation:
        return PerformanceObservation(
            problem_id=str(uuid.uuid4()),
            correct=correct,
            response_time=time,
            hints_used=hints,
            kind=kind,
        )

    return _observe
