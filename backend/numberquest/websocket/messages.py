from typing import Any, Literal

from pydantic import BaseModel, Field


# =============================================================================
# Client -> Server Messages
# =============================================================================


class SessionStartData(BaseModel):
    """Data for session start."""

    player_name: str | None = Field(None, description="Optional player name")
    initial_difficulty: int | None = Field(
        None, description="Starting difficulty, clamped to 1-10"
    )


class SessionEndData(BaseModel):
    """Data for session end."""

    session_id: str | None = Field(None, description="Session identifier")


class TaskAnswerData(BaseModel):
    """Player's answer to a problem."""

    problem_id: str = Field(..., description="Problem identifier")
    answer: int = Field(..., description="Chosen answer")
    time_taken: float = Field(..., ge=0, description="Time taken in seconds")
    hints_used: int = Field(0, ge=0, description="Hints revealed before answering")


class ClientMessage(BaseModel):
    """Union of all client message types."""

    type: Literal["session_start", "session_end", "task_answer"]
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Server -> Client Messages
# =============================================================================


class ConnectedMessage(BaseModel):
    """Connection confirmation."""

    type: Literal["connected"] = "connected"
    session_id: str = Field(..., description="Assigned session identifier")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "sessionId": self.session_id,
            },
        }


class ProblemMessage(BaseModel):
    """New problem for the player to solve."""

    type: Literal["problem"] = "problem"
    problem_id: str = Field(..., description="Unique problem identifier")
    operation: str = Field(..., description="addition, subtraction or multiplication")
    question: str = Field(..., description="The question to display")
    choices: list[int] = Field(..., description="Shuffled answer choices")
    difficulty: int = Field(..., ge=1, le=10, description="Difficulty level")
    time_limit: float = Field(..., description="Time limit in seconds")
    hint: str = Field(..., description="Hint text for struggling players")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "problemId": self.problem_id,
                "operation": self.operation,
                "question": self.question,
                "choices": self.choices,
                "difficulty": self.difficulty,
                "timeLimit": self.time_limit,
                "hint": self.hint,
            },
        }


class AnswerResultMessage(BaseModel):
    """Result of an answered problem."""

    type: Literal["answer_result"] = "answer_result"
    problem_id: str = Field(..., description="Problem identifier")
    correct: bool = Field(..., description="Whether answer was correct")
    user_answer: int = Field(..., description="What the player answered")
    correct_answer: int = Field(..., description="The correct answer")
    time_taken: float = Field(..., description="Time taken in seconds")
    points: int = Field(..., ge=0, description="Points earned")
    score: int = Field(..., ge=0, description="Session score so far")
    streak: int = Field(..., ge=0, description="Current correct streak")
    new_difficulty: int = Field(..., ge=1, le=10, description="New difficulty level")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "problemId": self.problem_id,
                "correct": self.correct,
                "userAnswer": self.user_answer,
                "correctAnswer": self.correct_answer,
                "timeTaken": self.time_taken,
                "points": self.points,
                "score": self.score,
                "streak": self.streak,
                "newDifficulty": self.new_difficulty,
            },
        }


class DifficultyMessage(BaseModel):
    """Difficulty adjustment notification."""

    type: Literal["difficulty"] = "difficulty"
    level: int = Field(..., ge=1, le=10, description="Difficulty level 1-10")
    reason: str = Field(..., description="Reason for adjustment")
    confidence: float | None = Field(None, ge=0, le=1, description="Recommendation confidence")
    help_suggestions: list[dict[str, Any]] = Field(default_factory=list)

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "level": self.level,
                "reason": self.reason,
                "confidence": self.confidence,
                "helpSuggestions": self.help_suggestions,
            },
        }


class SessionSummaryMessage(BaseModel):
    """End of session report."""

    type: Literal["session_summary"] = "session_summary"
    summary: dict[str, Any] = Field(..., description="Serialized session summary")
    score: int = Field(..., ge=0, description="Final session score")
    stars: int = Field(0, ge=0, le=3, description="Session star rating")
    player: dict[str, Any] = Field(default_factory=dict, description="Player profile")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                **self.summary,
                "score": self.score,
                "stars": self.stars,
                "player": self.player,
            },
        }


class ErrorMessage(BaseModel):
    """Error notification."""

    type: Literal["error"] = "error"
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "code": self.code,
                "message": self.message,
            },
        }
