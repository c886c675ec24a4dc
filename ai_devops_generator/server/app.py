"""
HTTP API for configuration generation.

Validates requests, runs prompt -> provider -> usage estimation, and maps
failures to user-safe messages. Full error detail goes to the log only.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel

from ai_devops_generator.config.loader import GeneratorConfig, load_config
from ai_devops_generator.core.exporter import build_filename, export
from ai_devops_generator.core.use_cases import USE_CASE_REGISTRY
from ai_devops_generator.exceptions import (
    DEFAULT_FAILURE_MESSAGE,
    GenerationError,
    InvalidInput,
    MissingCredentials,
)
from ai_devops_generator.sdk.generation_client import GenerationClient

logger = logging.getLogger(__name__)

PROMPT_PREVIEW_LENGTH = 50


class GenerateBody(BaseModel):
    prompt: Optional[str] = None
    useCase: Optional[str] = None


class ExportBody(BaseModel):
    content: Optional[str] = None
    useCase: Optional[str] = None


def create_app(config: GeneratorConfig, client: Optional[GenerationClient] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Runtime configuration
        client: Generation client to use; built lazily from config when
            omitted, so a missing credential surfaces per request instead of
            preventing startup

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title="AI DevOps Generator API", version="1.0.0")
    app.state.config = config
    app.state.generation_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "Generation error [%s %s]: %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc.detail,
        )
        content = {"error": exc.message}
        if exc.status_code >= 500:
            content["details"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Rejected request body [%s %s]: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": InvalidInput.user_message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error [%s %s]", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": DEFAULT_FAILURE_MESSAGE, "details": f"{type(exc).__name__}: {exc}"},
        )

    @app.get("/api/health")
    async def health():
        """Liveness check."""
        return {
            "status": "OK",
            "message": f"AI DevOps Generator API is running ({config.provider.value} provider)",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": config.mode.value,
        }

    @app.get("/api/use-cases")
    async def use_cases():
        return [
            {
                "key": definition.key,
                "description": definition.description,
                "fileExtension": definition.file_extension,
            }
            for definition in USE_CASE_REGISTRY.definitions.values()
        ]

    @app.post("/api/generate")
    async def generate(body: GenerateBody):
        """Generate a configuration.

        Received -> Validated -> Generating -> Succeeded | Failed.
        """
        if not body.prompt or not body.prompt.strip() or not body.useCase:
            raise InvalidInput(detail="prompt or useCase missing from request body")

        generation_client = _get_client(app)

        preview = body.prompt[:PROMPT_PREVIEW_LENGTH]
        logger.info("Generating %s for: %s...", body.useCase, preview)
        try:
            result = await generation_client.generate_result(body.prompt, body.useCase)
        except GenerationError as exc:
            logger.info("Generation of %s failed: %s", body.useCase, type(exc).__name__)
            raise

        logger.info("Successfully generated %s", body.useCase)
        return result.to_dict()

    @app.post("/api/export")
    async def export_artifact(body: ExportBody):
        """Return generated text as a downloadable attachment."""
        if body.content is None or not body.useCase:
            raise InvalidInput(
                detail="content or useCase missing from request body",
                message="Missing required fields: content and useCase",
            )
        exported = export(body.content, build_filename(body.useCase))
        return PlainTextResponse(
            exported.content,
            media_type=exported.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
        )

    if config.is_production and config.static_dir and Path(config.static_dir).is_dir():
        _mount_frontend(app, Path(config.static_dir))

    return app


def _get_client(app: FastAPI) -> GenerationClient:
    """Generation client for a validated request.

    Raises:
        MissingCredentials: If no credential is configured; no upstream call is made
    """
    config: GeneratorConfig = app.state.config
    if not config.has_credentials:
        raise MissingCredentials(detail=f"No credentials for provider '{config.provider.value}'")
    if app.state.generation_client is None:
        app.state.generation_client = GenerationClient(config)
    return app.state.generation_client


def _mount_frontend(app: FastAPI, static_dir: Path) -> None:
    """Serve the pre-built UI, falling back to index.html for client routes."""
    root = static_dir.resolve()
    index = root / "index.html"

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)

    logger.info("Serving frontend from %s", root)


def get_app() -> FastAPI:
    """Application factory configured from the environment.

    Usage: ``uvicorn --factory ai_devops_generator.server.app:get_app``
    """
    return create_app(load_config())
