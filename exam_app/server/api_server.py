"""FastAPI server that exposes the exam endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from copy import deepcopy
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from exam_app.config import Settings
from exam_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from exam_app.core.errors import ErrorKind, ExamError
from exam_app.core.exam_manager import ExamManager
from exam_app.core.models import ActiveSession, Exam, LeaderboardEntry, to_iso

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INVALID: 422,
}


class ExamDefinitionPayload(BaseModel):
    """Exam definition as sent by the admin page. Unknown fields are kept verbatim."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    questions: list[dict[str, Any]]


class CreateExamPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str
    exam_data: ExamDefinitionPayload = Field(alias="examData")


class SubmitPayload(BaseModel):
    """Payload schema for submitted answers; ``null`` marks an unanswered question."""

    model_config = ConfigDict(populate_by_name=True)

    participant_name: str = Field(alias="participantName", min_length=1)
    exam_id: str = Field(alias="examId")
    answers: list[Any] | dict[int, Any] = Field(default_factory=list)


class ActiveUserPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    exam_id: str = Field(alias="examId")


def _exam_to_dict(exam: Exam) -> dict[str, Any]:
    return {
        "id": exam.id,
        **deepcopy(exam.definition),
        "createdAt": to_iso(exam.created_at),
    }


def _entry_to_dict(entry: LeaderboardEntry) -> dict[str, Any]:
    return {
        "name": entry.name,
        "score": entry.score,
        "submittedAt": to_iso(entry.submitted_at),
    }


def _session_to_dict(session: ActiveSession) -> dict[str, Any]:
    return {
        "name": session.name,
        "examId": session.exam_id,
        "startTime": to_iso(session.start_time),
    }


def _to_http_error(exc: ExamError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_KIND[exc.kind], detail=exc.to_detail())


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


def create_api_app(exam_manager: ExamManager, settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("%s API ready", APP_NAME)
        yield
        exam_manager.reset()
        logger.info("%s API stopped; in-memory exam state released", APP_NAME)

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    exam_manager_dep = _get_exam_manager_dependency(exam_manager)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": {"kind": "internal", "message": "Something went wrong!"}},
        )

    @app.get("/api/health")
    def health(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        return {"status": "ok", "exams": manager.get_exam_count()}

    @app.get("/api/exam")
    def get_current_exam(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, Any]:
        try:
            exam = manager.get_any_exam()
        except ExamError as exc:
            raise _to_http_error(exc) from exc
        return _exam_to_dict(exam)

    @app.get("/api/exams")
    def list_exams(manager: ExamManager = Depends(exam_manager_dep)) -> list[dict[str, Any]]:
        return [
            {
                "id": exam.id,
                "title": exam.title,
                "createdAt": to_iso(exam.created_at),
                "totalQuestions": exam.question_count,
            }
            for exam in manager.list_exams()
        ]

    @app.get("/api/exam/{exam_id}")
    def get_exam(exam_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, Any]:
        try:
            exam = manager.get_exam(exam_id)
        except ExamError as exc:
            raise _to_http_error(exc) from exc
        return _exam_to_dict(exam)

    @app.post("/api/exam")
    def create_exam(
        payload: CreateExamPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            exam = manager.create_exam(
                payload.exam_data.model_dump(exclude_unset=True),
                password=payload.password,
            )
        except ExamError as exc:
            raise _to_http_error(exc) from exc
        return {
            "success": True,
            "examId": exam.id,
            "message": "Exam created successfully",
        }

    @app.post("/api/exam/submit")
    def submit_exam(
        payload: SubmitPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            outcome = manager.submit_answers(payload.participant_name, payload.exam_id, payload.answers)
        except ExamError as exc:
            raise _to_http_error(exc) from exc

        breakdown = outcome.breakdown
        return {
            "success": True,
            "score": breakdown.score,
            "totalQuestions": breakdown.total_questions,
            "correctCount": breakdown.correct_count,
            "wrongCount": breakdown.wrong_count,
            "negativeMarks": breakdown.negative_marks,
        }

    @app.get("/api/leaderboard/{exam_id}")
    def get_leaderboard(
        exam_id: str,
        limit: int | None = Query(default=None, ge=1),
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, Any]]:
        try:
            entries = manager.get_leaderboard(exam_id, limit)
        except ExamError as exc:
            raise _to_http_error(exc) from exc
        return [_entry_to_dict(entry) for entry in entries]

    @app.get("/api/profile/{name}")
    def get_profile(name: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        profile = manager.get_profile(name)
        return {
            "name": profile.name,
            "exams": [
                {
                    "examId": item.exam_id,
                    "examTitle": item.exam_title,
                    "score": item.score,
                    "total": item.total_questions,
                    "date": to_iso(item.submitted_at),
                }
                for item in profile.exams
            ],
        }

    @app.post("/api/active-users")
    def add_active_user(
        payload: ActiveUserPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, bool]:
        manager.start_session(payload.name, payload.exam_id)
        return {"success": True}

    @app.delete("/api/active-users")
    def remove_active_user(
        payload: ActiveUserPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, bool]:
        manager.end_session(payload.name, payload.exam_id)
        return {"success": True}

    @app.get("/api/active-users/{exam_id}")
    def get_active_users(exam_id: str, manager: ExamManager = Depends(exam_manager_dep)) -> list[dict[str, Any]]:
        return [_session_to_dict(session) for session in manager.list_active_sessions(exam_id)]

    @app.get("/api/exam-taken/{exam_id}/{name}")
    def exam_taken(exam_id: str, name: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, bool]:
        return {"taken": manager.has_taken(exam_id, name)}

    return app


def run_api_server(exam_manager: ExamManager, settings: Settings) -> None:
    """Serve the API with uvicorn until interrupted."""
    app = create_api_app(exam_manager, settings)
    config = uvicorn.Config(app=app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    server.run()
