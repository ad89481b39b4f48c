"""
Adaptive difficulty engine.

Keeps a rolling history of answered problems and recommends how the
difficulty should move, together with help suggestions for the player
(hints, slowing down, encouragement, a break).

Signals, in priority order:
- Excellent: high accuracy, fast answers and a streak -> step up
- Struggling: low accuracy or slow answers -> step down or help
- Sweet spot: on target accuracy and time -> stay
- Mixed: follow the accuracy trend
"""

import logging
import time
from collections import deque
from typing import Sequence

import numpy as np

from numberquest.adaptive.analytics import (
    DifficultyAdjustment,
    DifficultyChange,
    HelpSuggestion,
    PerformanceMetrics,
    PerformanceTrend,
    SessionSummary,
)
from numberquest.config import Settings, get_settings
from numberquest.problems.difficulty import clamp_level
from numberquest.problems.models import PerformanceObservation, ProblemKind

logger = logging.getLogger(__name__)


def average_response_time(data: Sequence[PerformanceObservation]) -> float:
    if not data:
        return 0.0
    return float(np.mean([o.response_time for o in data]))


def accuracy(data: Sequence[PerformanceObservation]) -> float:
    if not data:
        return 0.0
    return float(np.mean([o.accuracy for o in data]))


def current_streak(data: Sequence[PerformanceObservation]) -> int:
    """Consecutive correct answers ending at the latest one."""
    streak = 0
    for observation in reversed(data):
        if not observation.correct:
            break
        streak += 1
    return streak


def longest_streak(data: Sequence[PerformanceObservation]) -> int:
    longest = 0
    streak = 0
    for observation in data:
        if observation.correct:
            streak += 1
            longest = max(longest, streak)
        else:
            streak = 0
    return longest


def accuracy_by_kind(data: Sequence[PerformanceObservation]) -> dict[ProblemKind, tuple[float, int]]:
    """Accuracy and attempt count per operation, for observations that carry one."""
    grouped: dict[ProblemKind, list[float]] = {}
    for observation in data:
        if observation.kind is not None:
            grouped.setdefault(observation.kind, []).append(observation.accuracy)
    return {
        kind: (float(np.mean(values)), len(values))
        for kind, values in grouped.items()
    }


class DifficultyEngine:
    """Analyzes player performance and recommends difficulty changes."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._history: deque[PerformanceObservation] = deque(
            maxlen=self.settings.engine_history_limit
        )
        self._session: list[PerformanceObservation] = []
        self._difficulty_progression: list[int] = []
        self.session_start = time.time()

    @property
    def history(self) -> list[PerformanceObservation]:
        return list(self._history)

    @property
    def session_observations(self) -> list[PerformanceObservation]:
        return list(self._session)

    @property
    def difficulty_progression(self) -> list[int]:
        return list(self._difficulty_progression)

    def record_performance(self, observation: PerformanceObservation) -> None:
        """Record a new performance data point."""
        self._history.append(observation)
        self._session.append(observation)

    def record_difficulty(self, level: int) -> None:
        """Note the difficulty the player is on for the session summary."""
        self._difficulty_progression.append(clamp_level(level))

    def start_new_session(self) -> None:
        """Reset session data. The rolling history is kept."""
        self._session.clear()
        self._difficulty_progression.clear()
        self.session_start = time.time()

    def analyze_performance(self) -> PerformanceMetrics:
        """Summarize the recent performance window."""
        recent = self._recent()
        history = list(self._history)

        return PerformanceMetrics(
            average_response_time=average_response_time(recent),
            accuracy=accuracy(recent),
            current_streak=current_streak(history),
            longest_streak=longest_streak(history),
            problem_kind_accuracy={
                kind: value for kind, (value, _) in accuracy_by_kind(recent).items()
            },
            trend=self._trend(recent),
            struggling_areas=self._struggling_areas(history),
            mastered_areas=self._mastered_areas(history),
        )

    def recommend_difficulty_adjustment(self, current_difficulty: int) -> DifficultyAdjustment:
        """
        Recommend a difficulty change based on current performance.

        Args:
            current_difficulty: Level the player is on (1-10)

        Returns:
            DifficultyAdjustment with change, confidence, reason and help
        """
        s = self.settings

        if len(self._history) < s.minimum_sample_size:
            return DifficultyAdjustment(
                change=DifficultyChange.maintain(),
                confidence=0.3,
                reason="Insufficient data for analysis",
            )

        metrics = self.analyze_performance()
        recent = self._recent()
        acc = metrics.accuracy
        avg_time = metrics.average_response_time

        help_suggestions: list[HelpSuggestion] = []
        change = DifficultyChange.maintain()
        confidence = 0.5

        if (
            acc >= s.increase_threshold
            and avg_time <= s.fast_response_threshold
            and metrics.current_streak >= s.streak_threshold
        ):
            if current_difficulty >= 8:
                change = DifficultyChange.adaptive_increase()
            else:
                change = DifficultyChange.increase(1)
            confidence = 0.9
            reason = f"Excellent performance: high accuracy ({int(acc * 100)}%) and fast responses"

        elif acc <= s.decrease_threshold or avg_time >= s.slow_response_threshold:
            if current_difficulty > 1:
                change = DifficultyChange.decrease(1)
                confidence = 0.8
                reason = "Performance indicates need for easier problems"
            else:
                help_suggestions.append(HelpSuggestion.show_hint())
                help_suggestions.append(HelpSuggestion.slow_down())
                reason = "Struggling at the easiest level, offering help"

            if avg_time >= s.slow_response_threshold:
                help_suggestions.append(HelpSuggestion.slow_down())
                reason += " - slow response times detected"

        elif acc >= s.target_accuracy and avg_time <= s.target_response_time:
            confidence = 0.7
            reason = "Performance is optimal for current difficulty level"

        elif metrics.trend is PerformanceTrend.IMPROVING:
            change = DifficultyChange.adaptive_increase()
            confidence = 0.6
            reason = "Performance trend is improving"

        elif metrics.trend is PerformanceTrend.DECLINING:
            change = DifficultyChange.adaptive_decrease()
            confidence = 0.6
            reason = "Performance trend is declining"
            help_suggestions.append(HelpSuggestion.encouragement())

        elif metrics.trend is PerformanceTrend.FLUCTUATING:
            confidence = 0.4
            reason = "Performance is inconsistent"
            help_suggestions.append(HelpSuggestion.provide_practice(self._weakest_kind(recent)))

        else:
            confidence = 0.8
            reason = "Performance is stable at current difficulty"

        for area in metrics.struggling_areas:
            help_suggestions.append(HelpSuggestion.provide_practice(area))

        if self._detect_fatigue(recent):
            help_suggestions.append(HelpSuggestion.break_time())
            # Never push a tired player
            if change == DifficultyChange.increase(1):
                change = DifficultyChange.maintain()
                reason += " - holding steady, signs of fatigue"

        adjustment = DifficultyAdjustment(
            change=change,
            confidence=confidence,
            reason=reason,
            help_suggestions=tuple(help_suggestions),
        )
        logger.debug(
            {
                "event": "difficulty_recommendation",
                "level": current_difficulty,
                "accuracy": round(acc, 3),
                "avg_time": round(avg_time, 3),
                "streak": metrics.current_streak,
                "trend": metrics.trend.value,
                "change": change.kind.value,
                "confidence": confidence,
            }
        )
        return adjustment

    def generate_session_summary(self) -> SessionSummary:
        """Summarize the current session."""
        data = self._session
        correct = sum(1 for o in data if o.correct)

        return SessionSummary(
            total_problems=len(data),
            correct_answers=correct,
            accuracy=accuracy(data),
            average_time=average_response_time(data),
            help_used=sum(o.hints_used for o in data),
            duration=time.time() - self.session_start,
            difficulty_progression=list(self._difficulty_progression),
            achievements=self._achievements(data),
            areas_for_improvement=self._struggling_areas(data),
        )

    def _recent(self) -> list[PerformanceObservation]:
        window = self.settings.performance_window_size
        return list(self._history)[-window:]

    def _trend(self, data: Sequence[PerformanceObservation]) -> PerformanceTrend:
        if len(data) < self.settings.minimum_sample_size:
            return PerformanceTrend.STABLE

        half = len(data) // 2
        first_half = data[:half]
        second_half = data[len(data) - half:]
        difference = accuracy(second_half) - accuracy(first_half)

        if difference > 0.1:
            return PerformanceTrend.IMPROVING
        elif difference < -0.1:
            return PerformanceTrend.DECLINING
        elif abs(difference) <= 0.05:
            return PerformanceTrend.STABLE
        return PerformanceTrend.FLUCTUATING

    def _struggling_areas(self, data: Sequence[PerformanceObservation]) -> list[ProblemKind]:
        s = self.settings
        return [
            kind
            for kind, (value, attempts) in accuracy_by_kind(data).items()
            if attempts >= s.struggle_min_attempts and value < s.struggle_accuracy
        ]

    def _mastered_areas(self, data: Sequence[PerformanceObservation]) -> list[ProblemKind]:
        s = self.settings
        return [
            kind
            for kind, (value, attempts) in accuracy_by_kind(data).items()
            if attempts >= s.mastery_min_attempts and value >= s.mastery_accuracy
        ]

    def _weakest_kind(self, data: Sequence[PerformanceObservation]) -> ProblemKind:
        by_kind = accuracy_by_kind(data)
        if not by_kind:
            return ProblemKind.ADDITION
        return min(by_kind, key=lambda kind: by_kind[kind][0])

    def _detect_fatigue(self, data: Sequence[PerformanceObservation]) -> bool:
        """Answers getting markedly slower than the window average."""
        sample = self.settings.fatigue_sample_size
        if len(data) < sample:
            return False
        recent_time = average_response_time(data[-sample:])
        return recent_time > average_response_time(data) * self.settings.fatigue_factor

    def _achievements(self, data: Sequence[PerformanceObservation]) -> list[str]:
        if not data:
            return []

        achievements = []
        correct = sum(1 for o in data if o.correct)
        acc = accuracy(data)

        if correct >= 10:
            achievements.append("Problem Solver: Solved 10+ problems!")
        if acc >= 0.9:
            achievements.append("Math Master: 90%+ accuracy!")
        if current_streak(self._history) >= 5:
            achievements.append("Hot Streak: 5 correct in a row!")
        if average_response_time(data) <= 3.0 and acc >= 0.8:
            achievements.append("Speed Demon: Fast and accurate!")

        return achievements
