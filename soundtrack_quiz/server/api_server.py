"""FastAPI server that exposes the daily song and quiz endpoints."""

from __future__ import annotations

from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field
import uvicorn

from soundtrack_quiz.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from soundtrack_quiz.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    PLAYER_COOKIE_MAX_AGE_SECONDS,
    PLAYER_COOKIE_NAME,
)
from soundtrack_quiz.constants.quiz_constants import QUESTION_COUNT
from soundtrack_quiz.core.errors import NoOperationError
from soundtrack_quiz.core.formatting import extract_youtube_id, format_date_readable
from soundtrack_quiz.core.models import QuizMode, Song
from soundtrack_quiz.core.quiz_manager import QuizManager
from soundtrack_quiz.core.services.answer_round import GuessOutcome
from soundtrack_quiz.core.services.daily_game import DailyGame
from soundtrack_quiz.core.services.quiz_session import QuizSnapshot

_DAILY_UNAVAILABLE = "Error loading today's song. Please try again."
_QUIZ_UNAVAILABLE = "We couldn't generate any quiz questions. Please try again or choose a different mode."


def _ensure_player_id(request: Request, response: Response) -> str:
    player_id = request.cookies.get(PLAYER_COOKIE_NAME)
    if player_id:
        return player_id
    player_id = uuid4().hex
    response.set_cookie(
        key=PLAYER_COOKIE_NAME,
        value=player_id,
        max_age=PLAYER_COOKIE_MAX_AGE_SECONDS,
        samesite="lax",
        httponly=True,
    )
    return player_id


class GuessPayload(BaseModel):
    """Payload schema for a submitted guess."""

    option: str = Field(min_length=1)


class QuizRequestPayload(BaseModel):
    """Payload schema for starting a quiz."""

    mode: QuizMode = QuizMode.REGULAR
    question_count: int = Field(default=QUESTION_COUNT, ge=1, le=20)
    seed: int | None = None


def _song_summary(song: Song) -> dict[str, object]:
    return {
        "title": song.title,
        "artist": song.artist,
        "video_link": song.video_link,
        "video_id": extract_youtube_id(song.video_link) or None,
    }


def _outcome_payload(outcome: GuessOutcome) -> dict[str, object]:
    return {
        "state": outcome.state.value,
        "guessed": outcome.guessed,
        "is_correct": outcome.is_correct,
        "attempts": outcome.attempts,
        "message": outcome.message,
        "clear_after_seconds": outcome.clear_after_seconds,
        "revealed_answer": outcome.revealed_answer,
    }


def _daily_payload(game: DailyGame) -> dict[str, object]:
    return {
        "date": game.day.isoformat(),
        "date_readable": format_date_readable(game.day),
        "song": _song_summary(game.song),
        "options": game.options,
        "state": game.state.value,
        "attempts": game.attempts,
        "max_attempts": game.max_attempts,
        "wrong_guesses": game.wrong_guesses,
        "selected_answer": game.selected_answer,
        "is_correct": game.is_correct(),
        "game_complete": game.is_complete(),
        "hint_used": game.hint_used,
        "hint": game.hint(),
        "correct_answer": game.revealed_answer(),
    }


def _question_payload(snapshot: QuizSnapshot) -> dict[str, object]:
    payload: dict[str, object] = {
        "session_id": snapshot.session_id,
        "mode": snapshot.mode.value,
        "position": snapshot.position + 1,
        "question_count": snapshot.question_count,
        "complete": snapshot.complete,
        "question": None,
    }
    question = snapshot.question
    if question is not None and snapshot.state is not None:
        payload["question"] = {
            "song": _song_summary(question.song),
            "label_kind": question.label_kind.value,
            "options": list(question.options),
            "state": snapshot.state.value,
            "attempts": snapshot.attempts,
            "max_attempts": snapshot.max_attempts,
            "wrong_guesses": list(snapshot.wrong_guesses),
            "correct_answer": snapshot.revealed_answer,
        }
    return payload



def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/health")
    def health(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        catalogs = manager.get_catalogs()
        return {
            "status": "ok",
            "songs": len(catalogs.get_songs()),
            "labels": len(catalogs.get_labels()),
            "label_kind": catalogs.get_label_kind().value,
            "curated": catalogs.has_curated_catalog(),
            "rejected_records": catalogs.get_rejected_record_count(),
            "active_quiz_sessions": manager.get_active_session_count(),
        }

    @app.get("/daily")
    def get_daily(
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player_id(request, response)
        game = manager.get_daily_game(player_id)
        if game is None:
            raise HTTPException(status_code=503, detail=_DAILY_UNAVAILABLE)
        return _daily_payload(game)

    @app.post("/daily/guess")
    def submit_daily_guess(
        payload: GuessPayload,
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player_id(request, response)
        try:
            game, outcome = manager.submit_daily_guess(player_id, payload.option)
        except NoOperationError as exc:
            raise HTTPException(status_code=503, detail=_DAILY_UNAVAILABLE) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"outcome": _outcome_payload(outcome), "daily": _daily_payload(game)}

    @app.post("/daily/hint")
    def use_daily_hint(
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player_id(request, response)
        try:
            game = manager.use_daily_hint(player_id)
        except NoOperationError as exc:
            raise HTTPException(status_code=503, detail=_DAILY_UNAVAILABLE) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _daily_payload(game)

    @app.get("/daily/share")
    def get_daily_share(
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player_id(request, response)
        try:
            text = manager.get_daily_share_text(player_id)
        except NoOperationError as exc:
            raise HTTPException(status_code=503, detail=_DAILY_UNAVAILABLE) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"text": text}

    @app.get("/daily/yesterday")
    def get_yesterday(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        song = manager.get_yesterday_song()
        if song is None:
            raise HTTPException(status_code=404, detail="No song was available yesterday.")
        return {"song": _song_summary(song)}

    @app.post("/quiz", status_code=201)
    def create_quiz(
        payload: QuizRequestPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        snapshot, batch = manager.create_quiz_session(payload.mode, payload.question_count, payload.seed)
        if snapshot is None:
            raise HTTPException(status_code=503, detail=_QUIZ_UNAVAILABLE)
        body = _question_payload(snapshot)
        body["issue"] = batch.issue.value if batch.issue is not None else None
        return body

    @app.get("/quiz/{session_id}")
    def get_quiz_question(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.get_quiz_snapshot(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
        return _question_payload(snapshot)

    @app.post("/quiz/{session_id}/answer")
    def submit_quiz_answer(
        session_id: str,
        payload: GuessPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            outcome = manager.submit_quiz_answer(session_id, payload.option)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"outcome": _outcome_payload(outcome)}

    @app.post("/quiz/{session_id}/next")
    def next_quiz_question(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            snapshot = manager.move_to_next_question(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _question_payload(snapshot)

    @app.delete("/quiz/{session_id}", status_code=204)
    def discard_quiz(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        try:
            manager.discard_quiz_session(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
        return Response(status_code=204)

    @app.get("/quiz/{session_id}/results")
    def get_quiz_results(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.get_quiz_result(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
        return {
            "total_questions": result.total_questions,
            "correct_answers": result.correct_answers,
            "score": result.score,
            "questions": [
                {
                    "song_title": item.song_title,
                    "artist": item.artist,
                    "guessed": item.guessed,
                    "correct": item.correct,
                    "is_correct": item.is_correct,
                    "video_id": item.video_id,
                }
                for item in result.questions
            ],
        }

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Run the FastAPI server in the calling thread until it is stopped."""
    _build_server(quiz_manager, host, port).run()


def _build_server(quiz_manager: QuizManager, host: str, port: int) -> uvicorn.Server:
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    return uvicorn.Server(config)
