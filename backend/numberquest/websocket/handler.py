import logging
import uuid
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from numberquest.config import get_settings
from numberquest.errors import NumberQuestError, SessionNotStartedError
from numberquest.problems.models import Problem
from numberquest.session.play_session import PlaySession
from numberquest.websocket.messages import (
    AnswerResultMessage,
    ClientMessage,
    ConnectedMessage,
    DifficultyMessage,
    ErrorMessage,
    ProblemMessage,
    SessionStartData,
    SessionSummaryMessage,
    TaskAnswerData,
)

logger = logging.getLogger(__name__)
router = APIRouter()


class ConnectionManager:
    """Manage active WebSocket connections."""

    def __init__(self) -> None:
        self.active_connections: dict[str, WebSocket] = {}
        self.sessions: dict[str, PlaySession] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept connection and return session ID."""
        await websocket.accept()
        session_id = str(uuid.uuid4())
        self.active_connections[session_id] = websocket
        self.sessions[session_id] = PlaySession(settings=get_settings())
        logger.info(f"Client connected: {session_id}")
        return session_id

    def disconnect(self, session_id: str) -> None:
        """Remove connection from active connections."""
        self.active_connections.pop(session_id, None)
        self.sessions.pop(session_id, None)
        logger.info(f"Client disconnected: {session_id}")

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send message to specific client."""
        if session_id in self.active_connections:
            await self.active_connections[session_id].send_json(message)

    def get_session(self, session_id: str) -> PlaySession | None:
        return self.sessions.get(session_id)


manager = ConnectionManager()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Main WebSocket endpoint for the play loop."""
    session_id = await manager.connect(websocket)

    try:
        connected_msg = ConnectedMessage(session_id=session_id)
        await manager.send_message(session_id, connected_msg.model_dump())

        while True:
            data = await websocket.receive_json()

            try:
                message = ClientMessage.model_validate(data)
                await handle_message(session_id, message)
            except ValidationError as e:
                logger.error(f"Invalid message from {session_id}: {e}")
                error_msg = ErrorMessage(code="INVALID_MESSAGE", message=str(e))
                await manager.send_message(session_id, error_msg.model_dump())
            except NumberQuestError as e:
                logger.error(f"Error processing message from {session_id}: {e}")
                error_msg = ErrorMessage(code=e.code, message=str(e))
                await manager.send_message(session_id, error_msg.model_dump())

    except WebSocketDisconnect:
        manager.disconnect(session_id)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        manager.disconnect(session_id)


async def handle_message(session_id: str, message: ClientMessage) -> None:
    """Route and handle incoming messages."""
    logger.debug(f"Handling message: {message.type} for {session_id}")
    if message.type == "session_start":
        await handle_session_start(session_id, message.data)
    elif message.type == "session_end":
        await handle_session_end(session_id, message.data)
    elif message.type == "task_answer":
        await handle_task_answer(session_id, message.data)


async def handle_session_start(session_id: str, data: dict[str, Any]) -> None:
    """Start (or restart) the play loop and send the first problem."""
    session = manager.get_session(session_id)
    if not session:
        return

    start_data = SessionStartData.model_validate(data)
    if start_data.player_name:
        session.player.name = start_data.player_name

    logger.info(f"Session started: {session_id}, config: {start_data.model_dump()}")
    problem = session.start(start_data.initial_difficulty)
    await send_problem(session_id, problem)


async def handle_task_answer(session_id: str, data: dict[str, Any]) -> None:
    """Handle player's answer to a problem."""
    session = manager.get_session(session_id)
    if not session:
        return
    if not session.started:
        raise SessionNotStartedError()

    answer_data = TaskAnswerData.model_validate(data)
    result = session.submit_answer(
        problem_id=answer_data.problem_id,
        answer=answer_data.answer,
        response_time=answer_data.time_taken,
        hints_used=answer_data.hints_used,
    )

    result_msg = AnswerResultMessage(
        problem_id=result.problem.id,
        correct=result.correct,
        user_answer=result.answer,
        correct_answer=result.problem.correct_answer,
        time_taken=result.response_time,
        points=result.points,
        score=session.score,
        streak=session.streak,
        new_difficulty=result.new_difficulty,
    )
    await manager.send_message(session_id, result_msg.model_dump())

    if result.difficulty_changed:
        adjustment = result.adjustment
        difficulty_msg = DifficultyMessage(
            level=result.new_difficulty,
            reason=adjustment.reason if adjustment else "Recent performance",
            confidence=adjustment.confidence if adjustment else None,
            help_suggestions=[s.to_dict() for s in adjustment.help_suggestions] if adjustment else [],
        )
        await manager.send_message(session_id, difficulty_msg.model_dump())

    await send_problem(session_id, session.next_problem())


async def send_problem(session_id: str, problem: Problem) -> None:
    """Send a problem to the client."""
    msg = ProblemMessage(
        problem_id=problem.id,
        operation=problem.kind.name.lower(),
        question=problem.formatted,
        choices=problem.answer_choices(),
        difficulty=problem.difficulty.level,
        time_limit=problem.time_limit,
        hint=problem.hint,
    )
    await manager.send_message(session_id, msg.model_dump())


async def handle_session_end(session_id: str, data: dict[str, Any]) -> None:
    """Handle session end event and report the summary."""
    session = manager.get_session(session_id)
    if not session:
        logger.info(f"Session ended: {session_id}")
        return

    summary = session.end()
    msg = SessionSummaryMessage(
        summary=summary.to_dict(),
        score=session.score,
        stars=session.stars_earned,
        player=session.player.to_dict(),
    )
    await manager.send_message(session_id, msg.model_dump())
