"""FastAPI application for facial emotion recognition.

This module provides the main FastAPI application with endpoints for:
- GET /health: Service health check
- POST /predict: Emotion prediction for one grayscale face image

Example:
    Run with uvicorn:

    $ uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from faceio import ElementType, load_gray_image_bytes
from model.infer import predict_image
from model.postprocess import top_k as take_top_k

from .config import Settings, get_settings
from .deps import ModelManager, init_model_manager
from .errors import InvalidInputError, register_exception_handlers
from .logging import add_middleware, setup_logging
from .schemas import EmotionSchema, HealthResponse, PredictResponse


logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events.

    Startup:
        - Initialize logging
        - Preload the model to avoid cold start on first request

    Shutdown:
        - Log shutdown
    """
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info(
        "Starting %s v%s",
        settings.app_name,
        settings.app_version,
    )

    model_manager: ModelManager = app.state.model_manager
    model_manager.try_load()
    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown")


# =============================================================================
# Application Factory
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Facial Emotion Recognition API - Rank FER+ emotions for grayscale face images.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.model_manager = init_model_manager(settings)

    # Add CORS middleware (allow all in development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_middleware(app)
    register_exception_handlers(app)
    register_routes(app)

    return app


def register_routes(app: FastAPI) -> None:
    """Register all API routes on the application.

    Args:
        app: The FastAPI application.
    """

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
        description="Check service health and model status.",
    )
    async def health(request: Request) -> HealthResponse:
        """Health check endpoint.

        Returns:
            HealthResponse with status and model info.
        """
        settings: Settings = request.app.state.settings
        model_manager: ModelManager = request.app.state.model_manager

        return HealthResponse(
            status="ok" if model_manager.is_loaded else "loading",
            model_path=settings.model_path,
            backend=settings.backend,
        )

    @app.post(
        "/predict",
        response_model=PredictResponse,
        tags=["Prediction"],
        summary="Predict emotion from a face image",
        description="Rank the FER+ emotions for a single grayscale face image.",
    )
    async def predict(
        request: Request,
        file: Annotated[UploadFile, File(description="Grayscale image file (e.g. 64x64 PNG)")],
        include_scores: Annotated[
            bool | None,
            Form(description="Include per-label probability scores"),
        ] = None,
        top_k: Annotated[
            int | None,
            Form(description="Number of ranked emotions to return", ge=1),
        ] = None,
    ) -> PredictResponse:
        """Predict emotion from an uploaded image.

        Args:
            file: Grayscale image to analyze.
            include_scores: Whether to include per-label scores.
                If None, uses default from settings.
            top_k: Number of ranked emotions to return.
                If None, uses default from settings.

        Returns:
            PredictResponse with the ranked emotions.
        """
        settings: Settings = request.app.state.settings
        model_manager: ModelManager = request.app.state.model_manager

        if include_scores is None:
            include_scores = settings.include_scores_default
        if top_k is None:
            top_k = settings.top_k

        image_bytes = await file.read()

        if not image_bytes:
            raise InvalidInputError(
                message="Empty file uploaded",
                details={"filename": file.filename},
            )

        if len(image_bytes) > settings.max_upload_bytes:
            raise InvalidInputError(
                message=f"File too large: {len(image_bytes)} bytes > {settings.max_upload_bytes}",
                details={"filename": file.filename, "size": len(image_bytes)},
            )

        # Decode before touching the model so bad uploads fail fast
        image = load_gray_image_bytes(image_bytes)
        model = model_manager.model

        if top_k > len(model.labels):
            raise InvalidInputError(
                message=f"top_k ({top_k}) exceeds the number of labels ({len(model.labels)})",
                details={"top_k": top_k, "num_labels": len(model.labels)},
            )

        start_time = time.perf_counter()

        result = predict_image(
            image,
            height=settings.input_height,
            width=settings.input_width,
            element_type=ElementType(settings.element_type),
            model=model,
        )

        total_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Prediction complete: emotion=%s confidence=%.3f inference_ms=%.2f total_ms=%.2f",
            result.emotion,
            result.confidence,
            result.inference_ms,
            total_ms,
        )

        return PredictResponse(
            emotion=result.emotion,
            confidence=float(result.confidence),
            top=[
                EmotionSchema(label=entry.label, confidence=float(entry.weight))
                for entry in take_top_k(result.ranking, top_k)
            ],
            scores=dict(result.scores) if include_scores else None,
            model_name=result.model_name,
            inference_ms=float(result.inference_ms),
        )


# =============================================================================
# Application Instance
# =============================================================================


app = create_app()
