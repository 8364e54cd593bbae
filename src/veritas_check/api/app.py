"""FastAPI entrypoint."""

from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from veritas_check.domain.models import FinalResult
from veritas_check.orchestrator.build import create_pipeline
from veritas_check.orchestrator.pipeline import RiskPipeline

logger = logging.getLogger(__name__)

app = FastAPI(title="veritas-check")


class EmailCheckRequest(BaseModel):
    email: str = Field(min_length=1)


_URL_SYNTAX = TypeAdapter(AnyUrl)


class UrlCheckRequest(BaseModel):
    url: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        # The identifier is kept as typed; AnyUrl only gates the syntax.
        try:
            _URL_SYNTAX.validate_python(value.strip())
        except ValidationError as exc:
            raise ValueError("Invalid URL format") from exc
        return value.strip()


@lru_cache(maxsize=1)
def get_pipeline() -> RiskPipeline:
    pipeline, cfg = create_pipeline()
    logger.info("Pipeline ready (profile=%s provider=%s model=%s)", cfg.profile, cfg.provider, cfg.model)
    return pipeline


@app.exception_handler(RequestValidationError)
async def invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(item.get("loc", ())), "msg": str(item.get("msg", "")), "type": str(item.get("type", ""))}
        for item in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/check-email", response_model=FinalResult)
async def check_email(payload: EmailCheckRequest, pipeline: RiskPipeline = Depends(get_pipeline)):
    try:
        return await pipeline.evaluate_email(payload.email)
    except Exception as exc:
        logger.exception("Email check failed")
        return JSONResponse(status_code=500, content={"error": "Failed to check email", "message": str(exc)})


@app.post("/api/check-url", response_model=FinalResult)
async def check_url(payload: UrlCheckRequest, pipeline: RiskPipeline = Depends(get_pipeline)):
    try:
        return await pipeline.evaluate_url(payload.url)
    except Exception as exc:
        logger.exception("URL check failed")
        return JSONResponse(status_code=500, content={"error": "Failed to check URL", "message": str(exc)})
