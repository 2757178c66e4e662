from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.db.base import Base, engine
from app.core.db import schemas as db_schemas  # noqa: F401  registers tables
from app.core.logging import get_logger, setup_logging
from app.apis.auth.main import router as auth_router
from app.apis.flashcards.main import router as flashcards_router
from app.apis.quiz.main import router as quiz_router
from app.apis.tutors.main import router as tutors_router
from app.apis.usage.main import router as usage_router
from app.modules.generation.errors import GenerationError, InvalidPayload
from app.modules.generation.model_client import PydanticAIModelClient

import uvicorn
from fastapi.middleware.cors import CORSMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield
    finally:
        await engine.dispose()


def _error_response(err: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content={"error": err.to_dict()})


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Replaced in tests through app.state
    app.state.model_client = PydanticAIModelClient(
        max_stream_tokens=settings.generation.chat_max_output_tokens
    )

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            detail = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
        else:
            detail = None
        return _error_response(InvalidPayload(detail))

    app.include_router(auth_router)
    app.include_router(flashcards_router)
    app.include_router(quiz_router)
    app.include_router(tutors_router)
    app.include_router(usage_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
