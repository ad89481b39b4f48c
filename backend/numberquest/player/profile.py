"""Player profile: lifetime statistics, experience and skill progression."""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from numberquest.config import Settings, get_settings
from numberquest.problems.models import Problem, ProblemKind

BASE_XP = 100
STARS_PER_LEVEL = 5

FIRST_ANSWER = "First Answer"
PERFECT_10 = "Perfect 10"
MATH_MASTER = "Math Master"
ACCURACY_EXPERT = "Accuracy Expert"


class MathSkill(str, Enum):
    BASIC_ADDITION = "basic_addition"
    BASIC_SUBTRACTION = "basic_subtraction"
    BASIC_MULTIPLICATION = "basic_multiplication"

    @classmethod
    def from_problem_kind(cls, kind: ProblemKind) -> "MathSkill":
        return {
            ProblemKind.ADDITION: cls.BASIC_ADDITION,
            ProblemKind.SUBTRACTION: cls.BASIC_SUBTRACTION,
            ProblemKind.MULTIPLICATION: cls.BASIC_MULTIPLICATION,
        }[kind]


@dataclass
class ProblemKindStats:
    attempts: int = 0
    correct: int = 0
    total_response_time: float = 0.0

    @property
    def accuracy(self) -> float:
        """Accuracy in percent."""
        if self.attempts == 0:
            return 0.0
        return self.correct / self.attempts * 100.0

    @property
    def average_response_time(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.total_response_time / self.attempts

    def record_attempt(self, correct: bool, response_time: float) -> None:
        self.attempts += 1
        self.total_response_time += response_time
        if correct:
            self.correct += 1


def level_for_experience(experience: int) -> int:
    """Player level for an XP total: 200 XP for level 2, 500 for 3, 900 for 4."""
    required = 0
    level = 1
    while required <= experience:
        level += 1
        required += BASE_XP * level
    return max(1, level - 1)


def speed_bonus(response_time: float) -> int:
    if response_time < 3.0:
        return 5
    if response_time < 5.0:
        return 3
    return 0


@dataclass
class PlayerProfile:
    """Tracks a player's progress across sessions."""
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    experience_points: int = 0
    total_attempted: int = 0
    total_correct: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    best_response_time: float | None = None
    earned_stars: int = 0
    session_response_times: list[float] = field(default_factory=list)
    kind_stats: dict[ProblemKind, ProblemKindStats] = field(
        default_factory=lambda: {kind: ProblemKindStats() for kind in ProblemKind}
    )
    mastered_skills: set[MathSkill] = field(default_factory=set)
    struggling_skills: set[MathSkill] = field(default_factory=set)
    badges: set[str] = field(default_factory=set)
    last_played_at: float = field(default_factory=time.time)
    settings: Settings = field(default_factory=get_settings, repr=False)

    @property
    def current_level(self) -> int:
        return level_for_experience(self.experience_points)

    @property
    def experience_to_next_level(self) -> int:
        total_required = sum(BASE_XP * i for i in range(2, self.current_level + 2))
        return total_required - self.experience_points

    @property
    def overall_accuracy(self) -> float:
        """Accuracy in percent."""
        if self.total_attempted == 0:
            return 0.0
        return self.total_correct / self.total_attempted * 100.0

    @property
    def average_response_time(self) -> float:
        if not self.session_response_times:
            return self.best_response_time or 0.0
        return sum(self.session_response_times) / len(self.session_response_times)

    def record_problem_attempt(self, problem: Problem, correct: bool, response_time: float) -> int:
        """
        Record an answered problem.

        Returns:
            Experience points awarded
        """
        self.total_attempted += 1
        self.last_played_at = time.time()
        self.session_response_times.append(response_time)
        if self.best_response_time is None or response_time < self.best_response_time:
            self.best_response_time = response_time

        awarded = 0
        if correct:
            self.total_correct += 1
            self.current_streak += 1
            self.longest_streak = max(self.longest_streak, self.current_streak)
            awarded = problem.difficulty.points_awarded + speed_bonus(response_time)
            self.award_experience(awarded)
        else:
            self.current_streak = 0

        self.kind_stats[problem.kind].record_attempt(correct, response_time)
        self._update_skill(problem.kind, correct)
        self._check_badges()
        return awarded

    def award_experience(self, points: int) -> None:
        previous = self.current_level
        self.experience_points += points
        gained = self.current_level - previous
        if gained > 0:
            self.award_stars(gained * STARS_PER_LEVEL)

    def award_stars(self, stars: int) -> None:
        self.earned_stars += stars
        self._check_badges()

    def start_new_session(self) -> None:
        self.session_response_times = []
        self.last_played_at = time.time()

    def _check_badges(self) -> None:
        if self.total_attempted >= 1:
            self.badges.add(FIRST_ANSWER)
        if self.longest_streak >= 10:
            self.badges.add(PERFECT_10)
        if self.earned_stars >= 100:
            self.badges.add(MATH_MASTER)
        if self.overall_accuracy >= 90 and self.total_attempted >= 50:
            self.badges.add(ACCURACY_EXPERT)

    def _update_skill(self, kind: ProblemKind, correct: bool) -> None:
        s = self.settings
        skill = MathSkill.from_problem_kind(kind)
        stats = self.kind_stats[kind]

        if correct:
            if stats.accuracy >= s.mastery_accuracy * 100 and stats.attempts >= s.mastery_min_attempts:
                self.mastered_skills.add(skill)
                self.struggling_skills.discard(skill)
        elif stats.accuracy < s.struggle_accuracy * 100 and stats.attempts >= s.struggle_min_attempts:
            self.struggling_skills.add(skill)
            self.mastered_skills.discard(skill)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.current_level,
            "experiencePoints": self.experience_points,
            "experienceToNextLevel": self.experience_to_next_level,
            "totalAttempted": self.total_attempted,
            "totalCorrect": self.total_correct,
            "overallAccuracy": round(self.overall_accuracy, 1),
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "earnedStars": self.earned_stars,
            "masteredSkills": sorted(skill.value for skill in self.mastered_skills),
            "strugglingSkills": sorted(skill.value for skill in self.struggling_skills),
            "badges": sorted(self.badges),
        }
