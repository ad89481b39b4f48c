from dataclasses import dataclass, field
from enum import Enum

from numberquest.problems.difficulty import clamp_level
from numberquest.problems.models import ProblemKind


class PerformanceTrend(str, Enum):
    """Direction of recent accuracy."""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"
    FLUCTUATING = "fluctuating"


class ChangeKind(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"
    ADAPTIVE_INCREASE = "adaptive_increase"
    ADAPTIVE_DECREASE = "adaptive_decrease"


@dataclass(frozen=True)
class DifficultyChange:
    """Recommended move of the difficulty level."""
    kind: ChangeKind
    amount: int = 0

    @classmethod
    def increase(cls, by: int = 1) -> "DifficultyChange":
        return cls(ChangeKind.INCREASE, by)

    @classmethod
    def decrease(cls, by: int = 1) -> "DifficultyChange":
        return cls(ChangeKind.DECREASE, by)

    @classmethod
    def maintain(cls) -> "DifficultyChange":
        return cls(ChangeKind.MAINTAIN)

    @classmethod
    def adaptive_increase(cls) -> "DifficultyChange":
        return cls(ChangeKind.ADAPTIVE_INCREASE, 1)

    @classmethod
    def adaptive_decrease(cls) -> "DifficultyChange":
        return cls(ChangeKind.ADAPTIVE_DECREASE, 1)

    @property
    def delta(self) -> int:
        if self.kind in (ChangeKind.INCREASE, ChangeKind.ADAPTIVE_INCREASE):
            return self.amount
        if self.kind in (ChangeKind.DECREASE, ChangeKind.ADAPTIVE_DECREASE):
            return -self.amount
        return 0

    def apply(self, level: int) -> int:
        """Return ``level`` moved by this change, clamped to 1-10."""
        return clamp_level(level + self.delta)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "amount": self.amount}


class HelpKind(str, Enum):
    SHOW_HINT = "show_hint"
    SIMPLIFY_PROBLEM = "simplify_problem"
    PROVIDE_PRACTICE = "provide_practice"
    SLOW_DOWN = "slow_down"
    ENCOURAGEMENT = "encouragement"
    BREAK_TIME = "break_time"


@dataclass(frozen=True)
class HelpSuggestion:
    """Qualitative help for the player. Practice carries the operation."""
    kind: HelpKind
    problem_kind: ProblemKind | None = None

    @classmethod
    def show_hint(cls) -> "HelpSuggestion":
        return cls(HelpKind.SHOW_HINT)

    @classmethod
    def simplify_problem(cls) -> "HelpSuggestion":
        return cls(HelpKind.SIMPLIFY_PROBLEM)

    @classmethod
    def provide_practice(cls, problem_kind: ProblemKind) -> "HelpSuggestion":
        return cls(HelpKind.PROVIDE_PRACTICE, problem_kind)

    @classmethod
    def slow_down(cls) -> "HelpSuggestion":
        return cls(HelpKind.SLOW_DOWN)

    @classmethod
    def encouragement(cls) -> "HelpSuggestion":
        return cls(HelpKind.ENCOURAGEMENT)

    @classmethod
    def break_time(cls) -> "HelpSuggestion":
        return cls(HelpKind.BREAK_TIME)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"kind": self.kind.value}
        if self.problem_kind is not None:
            data["problemKind"] = self.problem_kind.name.lower()
        return data


@dataclass(frozen=True)
class PerformanceMetrics:
    """Snapshot of recent performance."""
    average_response_time: float
    accuracy: float
    current_streak: int
    longest_streak: int
    problem_kind_accuracy: dict[ProblemKind, float]
    trend: PerformanceTrend
    struggling_areas: list[ProblemKind]
    mastered_areas: list[ProblemKind]

    def to_dict(self) -> dict[str, object]:
        return {
            "averageResponseTime": round(self.average_response_time, 3),
            "accuracy": round(self.accuracy, 3),
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "problemKindAccuracy": {
                kind.name.lower(): round(value, 3)
                for kind, value in self.problem_kind_accuracy.items()
            },
            "trend": self.trend.value,
            "strugglingAreas": [kind.name.lower() for kind in self.struggling_areas],
            "masteredAreas": [kind.name.lower() for kind in self.mastered_areas],
        }


@dataclass(frozen=True)
class DifficultyAdjustment:
    """A single difficulty recommendation."""
    change: DifficultyChange
    confidence: float
    reason: str
    help_suggestions: tuple[HelpSuggestion, ...] = ()

    def __post_init__(self) -> None:
        # Set semantics, first occurrence wins
        object.__setattr__(
            self, "help_suggestions", tuple(dict.fromkeys(self.help_suggestions))
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "change": self.change.to_dict(),
            "confidence": self.confidence,
            "reason": self.reason,
            "helpSuggestions": [s.to_dict() for s in self.help_suggestions],
        }


@dataclass(frozen=True)
class SessionSummary:
    """End-of-session report."""
    total_problems: int
    correct_answers: int
    accuracy: float
    average_time: float
    help_used: int
    duration: float
    difficulty_progression: list[int] = field(default_factory=list)
    achievements: list[str] = field(default_factory=list)
    areas_for_improvement: list[ProblemKind] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "totalProblems": self.total_problems,
            "correctAnswers": self.correct_answers,
            "accuracy": round(self.accuracy, 3),
            "averageTime": round(self.average_time, 3),
            "helpUsed": self.help_used,
            "duration": round(self.duration, 1),
            "difficultyProgression": list(self.difficulty_progression),
            "achievements": list(self.achievements),
            "areasForImprovement": [k.name.lower() for k in self.areas_for_improvement],
        }
