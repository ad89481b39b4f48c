"""
Play session - one player's problem/answer loop.

Wires the problem generator, the difficulty engine and the player profile
together. Exactly one component owns the difficulty level per session,
chosen by ``Settings.difficulty_authority``:

- "engine": the difficulty engine recommends, the session applies the
  change through ``ProblemGenerator.set_difficulty``
- "generator": the generator self-adjusts from its short window
"""

import logging
import random
from dataclasses import dataclass

from numberquest.adaptive.analytics import DifficultyAdjustment, SessionSummary
from numberquest.adaptive.engine import DifficultyEngine
from numberquest.config import Settings, get_settings
from numberquest.errors import SessionNotStartedError, UnknownProblemError
from numberquest.player.profile import PlayerProfile
from numberquest.problems.generator import ProblemGenerator
from numberquest.problems.models import PerformanceObservation, Problem

logger = logging.getLogger(__name__)


def quick_play_score(response_time: float, streak: int) -> int:
    """Points for a correct answer: speed bonus, multiplied up by the streak."""
    base_score = 10
    speed = max(0, int((5.0 - response_time) * 2))
    multiplier = min(5, 1 + streak // 3)
    return (base_score + speed) * multiplier


def session_stars(accuracy: float, streak: int) -> int:
    """Star rating for a finished session, 0-3."""
    if accuracy >= 0.9 and streak >= 5:
        return 3
    if accuracy >= 0.8:
        return 2
    if accuracy >= 0.6:
        return 1
    return 0


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of a submitted answer."""
    problem: Problem
    answer: int
    correct: bool
    response_time: float
    points: int
    experience: int
    previous_difficulty: int
    new_difficulty: int
    adjustment: DifficultyAdjustment | None = None

    @property
    def difficulty_changed(self) -> bool:
        return self.new_difficulty != self.previous_difficulty


class PlaySession:
    """Track state for one player's session."""

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        player_name: str | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.generator = ProblemGenerator(
            initial_difficulty=self.settings.initial_difficulty,
            rng=rng,
            settings=self.settings,
        )
        self.engine = DifficultyEngine(settings=self.settings)
        self.player = PlayerProfile(name=player_name or "Player", settings=self.settings)

        self.current_problem: Problem | None = None
        self.score = 0
        self.streak = 0
        self.stars_earned = 0
        self.started = False

    @property
    def difficulty(self) -> int:
        return self.generator.difficulty

    def start(self, initial_difficulty: int | None = None) -> Problem:
        """Reset per-session state and return the first problem."""
        self.generator.reset()
        self.generator.set_difficulty(
            initial_difficulty if initial_difficulty is not None else self.settings.initial_difficulty
        )
        self.engine.start_new_session()
        self.engine.record_difficulty(self.generator.difficulty)
        self.player.start_new_session()
        self.score = 0
        self.streak = 0
        self.stars_earned = 0
        self.started = True
        logger.info(
            f"Session started at difficulty {self.generator.difficulty} "
            f"(authority: {self.settings.difficulty_authority})"
        )
        return self.next_problem()

    def next_problem(self) -> Problem:
        """Generate and remember the next problem."""
        if not self.started:
            raise SessionNotStartedError()
        self.current_problem = self.generator.generate_problem()
        return self.current_problem

    def submit_answer(
        self,
        problem_id: str,
        answer: int,
        response_time: float,
        hints_used: int = 0,
    ) -> AnswerResult:
        """
        Check an answer and let the difficulty authority react.

        Args:
            problem_id: Id of the problem being answered
            answer: The player's answer
            response_time: Seconds taken
            hints_used: Hints revealed before answering

        Returns:
            AnswerResult with scoring and the (possibly new) difficulty

        Raises:
            SessionNotStartedError: No session is running
            UnknownProblemError: ``problem_id`` is not the current problem
        """
        if not self.started:
            raise SessionNotStartedError()
        problem = self.current_problem
        if problem is None or problem.id != problem_id:
            raise UnknownProblemError(problem_id)

        response_time = max(0.0, response_time)
        correct = problem.is_correct(answer)
        points = 0
        if correct:
            self.streak += 1
            points = quick_play_score(response_time, self.streak)
            self.score += points
        else:
            self.streak = 0

        experience = self.player.record_problem_attempt(problem, correct, response_time)
        observation = PerformanceObservation.for_problem(
            problem, correct, response_time, hints=hints_used
        )

        previous = self.generator.difficulty
        adjustment = self._adjust_difficulty(observation)
        new_difficulty = self.generator.difficulty
        if new_difficulty != previous:
            self.engine.record_difficulty(new_difficulty)

        self.current_problem = None
        return AnswerResult(
            problem=problem,
            answer=answer,
            correct=correct,
            response_time=response_time,
            points=points,
            experience=experience,
            previous_difficulty=previous,
            new_difficulty=new_difficulty,
            adjustment=adjustment,
        )

    def summary(self) -> SessionSummary:
        return self.engine.generate_session_summary()

    def end(self) -> SessionSummary:
        summary = self.summary()
        self.stars_earned = session_stars(summary.accuracy, self.streak)
        self.player.award_stars(self.stars_earned)
        self.started = False
        self.current_problem = None
        logger.info(
            f"Session ended: {summary.correct_answers}/{summary.total_problems} correct, "
            f"score {self.score}, {self.stars_earned} stars"
        )
        return summary

    def _adjust_difficulty(self, observation: PerformanceObservation) -> DifficultyAdjustment | None:
        self.engine.record_performance(observation)

        if self.settings.difficulty_authority == "generator":
            self.generator.update_difficulty(observation)
            return None

        adjustment = self.engine.recommend_difficulty_adjustment(self.generator.difficulty)
        new_level = adjustment.change.apply(self.generator.difficulty)
        if new_level != self.generator.difficulty:
            logger.info(f"Difficulty {self.generator.difficulty} -> {new_level}: {adjustment.reason}")
        self.generator.set_difficulty(new_level)
        return adjustment
