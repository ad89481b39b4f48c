class NumberQuestError(ValueError):
    """Base error for session-level misuse."""

    code = "NUMBERQUEST_ERROR"


class UnknownProblemError(NumberQuestError):
    """Answer submitted for a problem that is not the current one."""

    code = "UNKNOWN_PROBLEM"

    def __init__(self, problem_id: str) -> None:
        super().__init__(f"Unknown problem: {problem_id}")
        self.problem_id = problem_id


class SessionNotStartedError(NumberQuestError):
    """Operation requires a started session."""

    code = "NO_ACTIVE_SESSION"

    def __init__(self) -> None:
        super().__init__("No active session; send session_start first")
