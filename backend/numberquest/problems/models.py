import random
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from numberquest.problems.difficulty import DifficultyLevel


class ProblemKind(str, Enum):
    """Arithmetic operations a problem can use."""
    ADDITION = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "×"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def recommended_age_range(self) -> tuple[int, int]:
        return {
            ProblemKind.ADDITION: (5, 10),
            ProblemKind.SUBTRACTION: (6, 10),
            ProblemKind.MULTIPLICATION: (8, 10),
        }[self]

    def apply(self, first: int, second: int) -> int:
        if self is ProblemKind.ADDITION:
            return first + second
        if self is ProblemKind.SUBTRACTION:
            return first - second
        return first * second


@dataclass(frozen=True)
class Problem:
    """A single multiple choice arithmetic problem."""
    id: str
    kind: ProblemKind
    first_operand: int
    second_operand: int
    correct_answer: int
    difficulty: DifficultyLevel
    time_limit: float
    distractors: tuple[int, ...]
    created_at: float = field(default_factory=time.time)

    @classmethod
    def create(
        cls,
        kind: ProblemKind,
        first: int,
        second: int,
        difficulty: DifficultyLevel,
        distractors: tuple[int, ...] = (),
    ) -> "Problem":
        return cls(
            id=str(uuid.uuid4()),
            kind=kind,
            first_operand=first,
            second_operand=second,
            correct_answer=kind.apply(first, second),
            difficulty=difficulty,
            time_limit=difficulty.time_limit,
            distractors=tuple(distractors),
        )

    @property
    def key(self) -> str:
        """Operand pair key used to avoid recent repeats, e.g. ``5+3``."""
        return problem_key(self.kind, self.first_operand, self.second_operand)

    @property
    def formatted(self) -> str:
        return f"{self.first_operand} {self.kind.symbol} {self.second_operand} = ?"

    def answer_choices(self, rng: random.Random | None = None) -> list[int]:
        """Distractors plus the correct answer in random order."""
        choices = list(self.distractors) + [self.correct_answer]
        (rng or random).shuffle(choices)
        return choices

    def is_correct(self, answer: int) -> bool:
        return answer == self.correct_answer

    @property
    def hint(self) -> str:
        a, b = self.first_operand, self.second_operand
        if self.kind is ProblemKind.ADDITION:
            if a <= 5 and b <= 5:
                return f"Try counting up from {a}!"
            return f"Break it down: {a} + {b}"
        if self.kind is ProblemKind.SUBTRACTION:
            if a <= 10:
                return f"Count backwards from {a}!"
            return f"Think: What do I add to {b} to get {a}?"
        if b <= 5:
            return f"Add {a} to itself {b} times!"
        return "Remember your times tables!"


def problem_key(kind: ProblemKind, first: int, second: int) -> str:
    return f"{first}{kind.symbol}{second}"


@dataclass(frozen=True)
class PerformanceObservation:
    """Outcome of one answered problem."""
    problem_id: str
    correct: bool
    response_time: float
    hints_used: int = 0
    kind: ProblemKind | None = None
    timestamp: float = field(default_factory=time.time)

    @property
    def accuracy(self) -> float:
        return 1.0 if self.correct else 0.0

    @classmethod
    def for_problem(
        cls,
        problem: Problem,
        correct: bool,
        response_time: float,
        hints: int = 0,
    ) -> "PerformanceObservation":
        return cls(
            problem_id=problem.id,
            correct=correct,
            response_time=response_time,
            hints_used=hints,
            kind=problem.kind,
        )
