"""FastAPI relay in front of the generation provider.

Endpoints:
- GET  /health
- POST /api/translate                 { "text", "fromLang", "toLang" }
- POST /api/summarize                 { "text", "summaryType" }
- POST /api/analyze-image             { "imageData", "imageMimeType"? }
- POST /api/analyze-audio             { "audioData"? }
- POST /api/resume/generate-summary   { "existingSummary", "role", "experienceLevel" }
- POST /api/resume/optimize-skills    { "currentSkills", "jobDescriptionKeywords" }

Errors are rendered as ``{"error": ..., "details": ...}``.
"""
from __future__ import annotations
import base64
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ai_relay import __version__
from ai_relay.common.config import Settings, load_settings
from ai_relay.common.errors import ConfigError, GenerationError, ValidationError
from ai_relay.common.schema import Attachment, GenerationRequest, ModelClass
from ai_relay.common.templates import (
    IMAGE_DESCRIPTION_PROMPT,
    KEY_POINT_SUMMARY_TYPES,
    key_points_prompt,
    optimize_skills_prompt,
    resume_summary_prompt,
    summary_prompt,
    translate_prompt,
)
from ai_relay.common.validation import require_fields
from ai_relay.serve import audio
from ai_relay.serve.client import GenerationClient, build_client

LOGGER = logging.getLogger("ai_relay.serve.app")

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

class TranslateIn(BaseModel):
    text: Optional[str] = None
    fromLang: Optional[str] = None
    toLang: Optional[str] = None

class TranslateOut(BaseModel):
    translatedText: str

class SummarizeIn(BaseModel):
    text: Optional[str] = None
    summaryType: Optional[str] = None

class SummarizeOut(BaseModel):
    summary: str
    keyPoints: str

class AnalyzeImageIn(BaseModel):
    imageData: Optional[str] = None
    imageMimeType: Optional[str] = None

class AnalyzeImageOut(BaseModel):
    description: str

class AnalyzeAudioIn(BaseModel):
    audioData: Any = None

class AnalyzeAudioOut(BaseModel):
    transcription: str
    emotion: str

class ResumeSummaryIn(BaseModel):
    existingSummary: Any = None
    role: Any = None
    experienceLevel: Any = None

class ResumeSummaryOut(BaseModel):
    generatedSummary: str

class OptimizeSkillsIn(BaseModel):
    currentSkills: Any = None
    jobDescriptionKeywords: Any = None

class OptimizeSkillsOut(BaseModel):
    optimizedSkills: str


def _envelope(error: str, details: str | None = None) -> dict[str, str]:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return body


def _error_response(exc: Exception, failure_message: str) -> JSONResponse:
    """Map an exception raised inside a handler to the uniform envelope."""
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=400, content=_envelope(exc.message))
    if isinstance(exc, GenerationError):
        return JSONResponse(status_code=500, content=_envelope(failure_message, exc.message))
    LOGGER.exception("Unexpected error: %s", exc)
    return JSONResponse(status_code=500, content=_envelope(failure_message, str(exc)))


def _relay(failure_message: str, handler: Callable[[], dict[str, Any]]) -> dict[str, Any] | JSONResponse:
    try:
        return handler()
    except Exception as e:
        return _error_response(e, failure_message)


def get_client(request: Request) -> GenerationClient:
    client = request.app.state.client
    if client is None:
        raise ConfigError("Generation client is not initialised.")
    return client


def _decode_image(image_data: str) -> bytes:
    # Strict: a data-URI prefix or stray characters fail instead of being decoded as image bytes.
    try:
        return base64.b64decode(image_data, validate=True)
    except ValueError as e:
        raise GenerationError(f"Image data is not valid base64: {e}") from e


def create_app(client: GenerationClient | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the relay application.

    Args:
        client: Pre-built generation client; built from ``settings`` on startup when omitted.
        settings: Process settings; loaded from the environment when omitted.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.client is None:
            # ConfigError here aborts startup.
            app.state.client = build_client(settings)
        LOGGER.info(
            "Relay ready: provider=%s text_model=%s vision_model=%s",
            app.state.client.provider.name,
            app.state.client.text_model,
            app.state.client.vision_model,
        )
        yield

    app = FastAPI(title="AI Relay", version=__version__, lifespan=lifespan)
    app.state.client = client
    app.state.settings = settings

    @app.middleware("http")
    async def _limit_body_size(request: Request, call_next):  # noqa: ANN001
        length = request.headers.get("content-length")
        if length is not None and length.isdigit():
            size = int(length)
        else:
            # Chunked or undeclared body: count what actually arrives.
            size = len(await request.body())
        if size > settings.max_body_bytes:
            LOGGER.warning("Rejected %s body of %s bytes", request.url.path, size)
            return JSONResponse(status_code=413, content=_envelope("Request body too large."))
        return await call_next(request)

    # Outermost middleware; wraps the size check.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.info("Invalid body for %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content=_envelope("Invalid request body."))

    @app.exception_handler(ConfigError)
    async def _not_ready(request: Request, exc: ConfigError) -> JSONResponse:
        LOGGER.error("Request to %s before startup completed: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content=_envelope("Service unavailable.", exc.message))

    @app.get("/health")
    def health(client: GenerationClient = Depends(get_client)) -> dict[str, str]:
        return {
            "status": "ok",
            "provider": client.provider.name,
            "textModel": client.text_model,
            "visionModel": client.vision_model,
        }

    @app.post("/api/translate", response_model=TranslateOut)
    def translate(body: TranslateIn, client: GenerationClient = Depends(get_client)):
        def run() -> dict[str, Any]:
            require_fields(
                body.model_dump(),
                ("text", "fromLang", "toLang"),
                "Missing text, fromLang, or toLang in request.",
            )
            result = client.generate(GenerationRequest(translate_prompt(body.text, body.fromLang, body.toLang)))
            return {"translatedText": result.text}

        return _relay("Failed to translate text. Please check your API key and input.", run)

    @app.post("/api/summarize", response_model=SummarizeOut)
    def summarize(body: SummarizeIn, client: GenerationClient = Depends(get_client)):
        def run() -> dict[str, Any]:
            require_fields(body.model_dump(), ("text", "summaryType"), "Missing text or summaryType in request.")
            summary = client.generate(GenerationRequest(summary_prompt(body.text, body.summaryType))).text
            if body.summaryType in KEY_POINT_SUMMARY_TYPES:
                key_points = summary
            else:
                key_points = client.generate(GenerationRequest(key_points_prompt(body.text))).text
            return {"summary": summary, "keyPoints": key_points}

        return _relay("Failed to summarize text. Please check your API key and input.", run)

    @app.post("/api/analyze-image", response_model=AnalyzeImageOut)
    def analyze_image(body: AnalyzeImageIn, client: GenerationClient = Depends(get_client)):
        def run() -> dict[str, Any]:
            require_fields(body.model_dump(), ("imageData",), "Missing image data in request.")
            image = Attachment(
                data=_decode_image(body.imageData),
                mime_type=body.imageMimeType or DEFAULT_IMAGE_MIME_TYPE,
            )
            request = GenerationRequest(IMAGE_DESCRIPTION_PROMPT, attachments=(image,))
            return {"description": client.generate(request, ModelClass.VISION).text}

        return _relay(
            "Failed to analyze image. Please ensure your API key is correct and the image is valid.",
            run,
        )

    @app.post("/api/analyze-audio", response_model=AnalyzeAudioOut)
    async def analyze_audio(body: Optional[AnalyzeAudioIn] = None):
        try:
            return await audio.analyze_audio(body.audioData if body else None)
        except Exception as e:
            LOGGER.error("Error analyzing audio (simulated): %s", e)
            return _error_response(e, "Failed to analyze audio (simulated).")

    @app.post("/api/resume/generate-summary", response_model=ResumeSummaryOut)
    def generate_resume_summary(
        body: Optional[ResumeSummaryIn] = None,
        client: GenerationClient = Depends(get_client),
    ):
        body = body or ResumeSummaryIn()

        def run() -> dict[str, Any]:
            prompt = resume_summary_prompt(body.existingSummary, body.role, body.experienceLevel)
            return {"generatedSummary": client.generate(GenerationRequest(prompt)).text}

        return _relay("Failed to generate summary. Please check your API key.", run)

    @app.post("/api/resume/optimize-skills", response_model=OptimizeSkillsOut)
    def optimize_skills(
        body: Optional[OptimizeSkillsIn] = None,
        client: GenerationClient = Depends(get_client),
    ):
        body = body or OptimizeSkillsIn()

        def run() -> dict[str, Any]:
            prompt = optimize_skills_prompt(body.currentSkills, body.jobDescriptionKeywords)
            return {"optimizedSkills": client.generate(GenerationRequest(prompt)).text}

        return _relay("Failed to optimize skills. Please check your API key.", run)

    return app
