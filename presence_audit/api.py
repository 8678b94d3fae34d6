"""
FastAPI REST API for the online presence scoring engine.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .audit_logging import get_logger
from .compliance_gate import ReviewStatus, check_export_gate
from .config import get_settings
from .engine import score_analysis
from .mock_data import generate_mock_findings
from .models import ManualOverrides, RawFindings
from .score_validator import validate_score_report

logger = get_logger(__name__)
settings = get_settings()

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)

# Create FastAPI app
app = FastAPI(
    title="Online Presence Audit API",
    description="Scores a business's online presence from automated findings and reviewer input",
    version="1.0.0",
)

app.state.limiter = limiter

# In production, NEVER use wildcard - use explicit origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Models
class ScoreRequest(BaseModel):
    raw: RawFindings
    manual: Optional[ManualOverrides] = None


class TestScoreRequest(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=200)
    manual: Optional[ManualOverrides] = None


def _score_response(raw: RawFindings, manual: Optional[ManualOverrides]) -> dict:
    report = score_analysis(raw, manual)
    validation = validate_score_report(report)
    if not validation.is_valid:
        logger.warning("score_report_invalid", errors=[e.message for e in validation.errors])
    payload = report.to_dict()
    payload["validation"] = validation.to_dict()
    return payload


# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/")
def healthcheck_root():
    return {"status": "ok"}


@app.post("/api/score")
@limiter.limit(settings.rate_limit)
async def create_score(request: Request, score_request: ScoreRequest):
    """
    Score one analysis from raw findings and optional reviewer overrides.

    Returns topic, category and overall scores plus validation warnings.
    """
    logger.info("score_requested", client=get_remote_address(request), business=score_request.raw.business_name)
    try:
        return _score_response(score_request.raw, score_request.manual)
    except Exception as e:
        logger.error("score_request_failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


# Test mode score endpoint (no crawler)
@app.post("/api/test-score")
@limiter.limit(settings.rate_limit)
async def create_test_score(request: Request, test_request: TestScoreRequest):
    """
    Score deterministic sample findings for a business name.
    Always available for testing logic flow.
    """
    try:
        raw = generate_mock_findings(test_request.business_name)
        payload = _score_response(raw, test_request.manual)
        payload["isTest"] = True
        return payload
    except Exception as e:
        logger.error("test_score_failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=f"Test score error: {str(e)}")


@app.post("/api/export/check")
async def check_export(review_status: ReviewStatus):
    """Refuse a customer-facing export while AI content is unreviewed."""
    result = check_export_gate(review_status)
    if not result.allowed:
        raise HTTPException(status_code=409, detail=result.to_dict())
    return result.to_dict()


# Error handlers
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "detail": f"Limit is {settings.rate_limit} per client.",
        },
    )
