"""FastAPI application exposing PDF ingestion and question answering."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdf_chat import __version__
from pdf_chat.config import Settings, settings
from pdf_chat.errors import ClientInputError, ConfigurationError, UpstreamError
from pdf_chat.ingestion.pipeline import IngestionPipeline
from pdf_chat.logging_config import configure_logging
from pdf_chat.qa.pipeline import QueryPipeline
from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.serving.dependencies import get_ingestion_pipeline, get_query_pipeline, get_settings, get_store
from pdf_chat.serving.schemas import ErrorResponse, QueryRequest, QueryResponse, UploadResponse

logger = logging.getLogger(__name__)

_FAILURE_MESSAGES = {
    "/upload/pdf": "Failed to process PDF",
    "/query": "Failed to process query",
}


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application; *config* decides how much error detail leaks."""
    app = FastAPI(
        title="PDF Chat API",
        version=__version__,
        description="Upload a PDF, then ask questions answered from its content.",
    )
    app.state.settings = config
    if config is not settings:
        app.dependency_overrides[get_settings] = lambda: config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    _register_routes(app)
    return app


# ── Error handling ────────────────────────────────────────────────────
def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClientInputError)
    async def client_input_error(request: Request, exc: ClientInputError) -> JSONResponse:
        return _error(400, ErrorResponse(error=str(exc)))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return _error(400, ErrorResponse(error=_validation_message(request.url.path, exc)))

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error("Error handling %s: %s", request.url.path, exc)
        details = None
        if app.state.settings.is_development:
            details = {
                "stage": exc.stage,
                "message": exc.message,
                "storedCount": exc.stored_count,
                "attemptedCount": exc.attempted_count,
            }
        error = _FAILURE_MESSAGES.get(request.url.path, "Upstream service failure")
        return _error(500, ErrorResponse(error=error, details=details))

    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        details = {"message": str(exc)} if app.state.settings.is_development else None
        return _error(500, ErrorResponse(error="Server is misconfigured", details=details))


def _validation_message(path: str, exc: RequestValidationError) -> str:
    """Name the missing input the way the route handlers do."""
    if path != "/query":
        return "Invalid request"
    fields = {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    if "namespace" in fields and "question" not in fields:
        return "Namespace is required"
    # No body, unparseable JSON and a non-string question all land here.
    return "Question is required"


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


# ── Routes ────────────────────────────────────────────────────────────
def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check."""
        return {"status": "All Good!"}

    @app.get("/health")
    async def health(store: VectorStoreBase = Depends(get_store)) -> JSONResponse:
        """Report whether the vector-store backend is reachable."""
        if await run_in_threadpool(store.health_check):
            return JSONResponse({"status": "ok", "index": store.index_name})
        logger.warning("Vector store %s failed its health check", store.index_name)
        return JSONResponse({"status": "unavailable", "index": store.index_name}, status_code=503)

    @app.post("/upload/pdf", response_model=UploadResponse)
    async def upload_pdf(
        pdf: UploadFile | None = File(default=None),
        pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
    ) -> UploadResponse:
        """Ingest an uploaded PDF into a fresh namespace."""
        if pdf is None:
            raise ClientInputError("No file uploaded")
        data = await pdf.read()
        report = await run_in_threadpool(pipeline.ingest_upload, data, pdf.filename or "upload.pdf")
        return UploadResponse.from_report(report)

    @app.post("/query", response_model=QueryResponse)
    async def query(
        request: QueryRequest,
        pipeline: QueryPipeline = Depends(get_query_pipeline),
    ) -> QueryResponse:
        """Answer a question from the chunks of one namespace."""
        answer = await run_in_threadpool(pipeline.answer, request.namespace, request.question)
        return QueryResponse.from_answer(answer)


app = create_app()


def main() -> None:
    """Run the API with uvicorn (``pdf-chat-serve``)."""
    import uvicorn

    configure_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
