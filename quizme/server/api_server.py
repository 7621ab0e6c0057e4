"""FastAPI server exposing quiz authoring, quiz taking and results endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
import uvicorn

from quizme.constants.about import APP_LICENSE, APP_NAME, APP_VERSION
from quizme.constants.network_constants import (
    API_PREFIX,
    DEFAULT_HOST,
    DEFAULT_PORT,
    RESULTS_PAGE_PREFIX,
    SERVER_LOG_LEVEL,
)
from quizme.core.errors import QuizError
from quizme.core.quiz_manager import QuizManager
from quizme.server.payloads import (
    ChallengePayload,
    ParticipationPayload,
    QuestionPayload,
    QuestionUpdatePayload,
    QuizPayload,
    QuizUpdatePayload,
    ResponsePayload,
    SubmitPayload,
)
from quizme.server.results_page import render_results_page
from quizme.server.serializers import (
    participation_to_dict,
    question_to_dict,
    quiz_to_dict,
    quiz_with_questions,
    report_to_dict,
    response_to_dict,
    submit_result_to_dict,
)

logger = logging.getLogger(__name__)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _describe_validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizError)
    async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Quiz error on %s %s: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=exc.status_code, content={"message": "Internal server error"})
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _describe_validation_errors(exc)
        message = "; ".join(
            f"{error['field']}: {error['message']}" if error["field"] else error["message"]
            for error in errors
        )
        return JSONResponse(
            status_code=400,
            content={"message": message or "Invalid request", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        license_info={"name": APP_LICENSE},
    )
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    _register_exception_handlers(app)
    api = APIRouter(prefix=API_PREFIX)

    @api.get("/health")
    def health() -> dict[str, object]:
        return {"status": "ok"}

    # --- Quizzes ---

    @api.post("/quizzes", status_code=201)
    def create_quiz(
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        quiz, questions = manager.create_quiz(
            payload.title,
            questions=[question.model_dump() for question in payload.questions],
            description=payload.description,
            category=payload.category,
            duration=payload.duration,
            creator_id=payload.creator_id,
        )
        return quiz_with_questions(quiz, questions)

    @api.get("/quizzes")
    def list_quizzes(
        creator_id: int | None = Query(default=None, alias="creatorId"),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        return [quiz_to_dict(quiz) for quiz in manager.list_quizzes(creator_id=creator_id)]

    @api.get("/quizzes/code/{code}")
    def get_quiz_by_code(code: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quiz = manager.get_quiz_by_code(code)
        return quiz_with_questions(quiz, manager.get_questions(quiz.id), include_answers=False)

    @api.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quiz = manager.get_quiz(quiz_id)
        return quiz_with_questions(quiz, manager.get_questions(quiz_id))

    @api.put("/quizzes/{quiz_id}")
    def update_quiz(
        quiz_id: int,
        payload: QuizUpdatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        quiz = manager.update_quiz(quiz_id, payload.model_dump(exclude_unset=True))
        return quiz_to_dict(quiz)

    @api.delete("/quizzes/{quiz_id}", status_code=204)
    def delete_quiz(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        manager.delete_quiz(quiz_id)
        return Response(status_code=204)

    # --- Questions ---

    @api.get("/quizzes/{quiz_id}/questions")
    def list_questions(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [question_to_dict(question) for question in manager.get_questions(quiz_id)]

    @api.post("/quizzes/{quiz_id}/questions", status_code=201)
    def add_question(
        quiz_id: int,
        payload: QuestionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return question_to_dict(manager.add_question(quiz_id, payload.model_dump()))

    @api.put("/questions/{question_id}")
    def update_question(
        question_id: int,
        payload: QuestionUpdatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        question = manager.update_question(question_id, payload.model_dump(exclude_unset=True))
        return question_to_dict(question)

    @api.delete("/questions/{question_id}", status_code=204)
    def delete_question(question_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        manager.delete_question(question_id)
        return Response(status_code=204)

    # --- Participations ---

    @api.post("/participations", status_code=201)
    def start_participation(
        payload: ParticipationPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        participation = manager.start_participation(payload.quiz_id, payload.participant_name)
        return participation_to_dict(participation)

    @api.get("/quizzes/{quiz_id}/participations")
    def list_participations(
        quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> list[dict[str, object]]:
        return [participation_to_dict(p) for p in manager.list_participations(quiz_id)]

    @api.get("/quizzes/{quiz_id}/responses")
    def list_quiz_responses(
        quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> list[dict[str, object]]:
        return [response_to_dict(r) for r in manager.list_quiz_responses(quiz_id)]

    @api.get("/participations/{participation_id}")
    def get_participation(
        participation_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        return participation_to_dict(manager.get_participation(participation_id))

    @api.get("/participations/{participation_id}/responses")
    def list_responses(
        participation_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> list[dict[str, object]]:
        return [response_to_dict(r) for r in manager.list_responses(participation_id)]

    @api.post("/participations/{participation_id}/submit")
    def submit_participation(
        participation_id: int,
        payload: SubmitPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        report = manager.submit(participation_id, payload.time_spent)
        return submit_result_to_dict(report)

    @api.get("/participations/{participation_id}/report")
    def get_report(
        participation_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        return report_to_dict(manager.build_report(participation_id))

    @api.get("/participations/{participation_id}/pdf")
    def export_pdf(participation_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        report, document = manager.export_report_pdf(participation_id)
        return Response(
            content=document,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f"attachment; filename=quiz-{report.quiz.code}-results.pdf"
            },
        )

    # --- Responses ---

    @api.post("/responses", status_code=201)
    def record_answer(
        payload: ResponsePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        response = manager.record_answer(
            payload.participation_id,
            payload.question_id,
            payload.answer,
            is_marked_for_review=payload.is_marked_for_review,
        )
        return response_to_dict(response)

    @api.put("/responses/{response_id}/challenge")
    def challenge_response(
        response_id: int,
        payload: ChallengePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return response_to_dict(manager.challenge_response(response_id, payload.challenge_reason))

    app.include_router(api)

    @app.get(RESULTS_PAGE_PREFIX + "/{participation_id}", response_class=HTMLResponse)
    def serve_results_page(
        participation_id: int, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> str:
        return render_results_page(manager.build_report(participation_id))

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=SERVER_LOG_LEVEL)
    server = uvicorn.Server(config)
    server.run()
