"""
FastAPI Endpoints for SkillSwap Match Engine
============================================
RESTful API for match compatibility scoring.

Base URL: http://localhost:8000

Endpoints:
- GET  /                                   - API info
- GET  /api/health                         - Health check
- POST /api/match/score                    - Score a single candidate
- POST /api/match/score/quick              - Score only (no breakdown)
- POST /api/match/score/batch              - Score multiple candidates
- POST /api/match/rank                     - Rank target users for a requester
- POST /api/match/requests                 - Validate and prepare a match request
- POST /api/match/configure                - Create/update scoring config
- GET  /api/match/configure                - List scoring configs
- GET  /api/match/configure/{id}           - Get scoring config
- DELETE /api/match/configure/{id}         - Delete scoring config
- POST /api/skills/relevance/events        - Apply a relevance event
- GET  /api/skills/relevance               - Most relevant skills
- GET  /api/skills/relevance/{skill_id}    - Relevance of one skill
- GET  /api/stats                          - Get engine statistics
"""

import traceback
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional, Dict, List
from datetime import datetime
from dotenv import load_dotenv
import uuid

# Load environment variables
load_dotenv()

from ..models.schemas import (
    MatchCandidate,
    CompatibilityResult,
    ScoreRequest,
    BatchScoreRequest,
    BatchScoreResult,
    RankRequest,
    RankResult,
    CreateMatchRequest,
    PreparedMatchRequest,
    SkillRelevanceEvent,
    SkillRelevance,
    RelevanceUpdate,
)
from ..models.scoring_config import ScoringConfig
from ..engine import MatchmakingEngine
from ..relevance import SkillRelevanceProjector
from ..match_requests import MatchRequestValidator
from ..errors import MatchmakingError, ConfigNotFound
from ..config.settings import SERVICE_CONFIG
from ..logging_config import setup_logger

logger = setup_logger(__name__)


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="SkillSwap Match Engine API",
    description="""
## Match Compatibility Scoring

Scores how well two users fit for a skill swap, based on their ratings,
schedule preferences and whether the exchange is a clean two-way barter.

### Quick Start:
1. Use `/api/match/score/quick` for a bare score
2. Use `/api/match/score` for the full breakdown
3. Use `/api/match/rank` to rank candidate partners for a requester
    """,
    version=SERVICE_CONFIG["version"],
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Allow all origins for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Storage & Engine Initialization
# =============================================================================

# In-memory storage (replace with database in production)
scoring_configs: Dict[str, ScoringConfig] = {}
engines: Dict[str, MatchmakingEngine] = {}

default_engine = MatchmakingEngine()
relevance_projector = SkillRelevanceProjector()
request_validator = MatchRequestValidator()


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "SkillSwap Match Engine",
        "version": SERVICE_CONFIG["version"],
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "Quick Score": "POST /api/match/score/quick",
            "Full Score": "POST /api/match/score",
            "Batch Score": "POST /api/match/score/batch",
            "Rank": "POST /api/match/rank",
            "Match Request": "POST /api/match/requests",
            "Relevance": "POST /api/skills/relevance/events",
            "Health": "GET /api/health",
        }
    }


@app.get("/api/health", tags=["Info"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "SkillSwap Match Engine",
        "version": SERVICE_CONFIG["version"],
        "environment": SERVICE_CONFIG["environment"],
        "timestamp": datetime.utcnow().isoformat(),
    }


# =============================================================================
# Scoring Endpoints
# =============================================================================

@app.post("/api/match/score", response_model=CompatibilityResult, tags=["Scoring"])
async def score_match(request: ScoreRequest):
    """Score a single candidate with the full breakdown"""
    engine = _get_engine(request.config_id)
    return engine.score_match(request.candidate)


@app.post("/api/match/score/quick", tags=["Scoring"])
async def quick_score(candidate: MatchCandidate):
    """
    Score a candidate with the default configuration.

    Returns only the score and tier.
    """
    result = default_engine.score_match(candidate)
    return {"score": result.score, "tier": result.tier.value}


@app.post("/api/match/score/batch", response_model=BatchScoreResult, tags=["Scoring"])
async def score_batch(request: BatchScoreRequest):
    """Score multiple candidates; results keep the input order"""
    engine = _get_engine(request.config_id)
    return engine.score_batch(request.candidates)


@app.post("/api/match/rank", response_model=RankResult, tags=["Scoring"])
async def rank_candidates(request: RankRequest):
    """
    Rank target users for a requester

    - Targets that do not offer the skill are dropped
    - Unrated users are scored with the default rating
    - Results sorted by score, then user id
    """
    engine = _get_engine(request.config_id)
    return engine.rank_candidates(
        requester=request.requester,
        targets=request.targets,
        skill=request.skill,
        exchange_skill=request.exchange_skill,
        min_score=request.min_score,
        limit=request.limit,
    )


# =============================================================================
# Match Requests
# =============================================================================

@app.post(
    "/api/match/requests",
    response_model=PreparedMatchRequest,
    status_code=201,
    tags=["Match Requests"],
)
async def create_match_request(request: CreateMatchRequest):
    """
    Validate a match request and assign its thread id

    Include `requester` and `target` profiles to attach a compatibility score.
    """
    request_validator.validate(request.draft)
    request_validator.ensure_not_pending(request.draft)

    compatibility = None
    if request.requester and request.target:
        engine = _get_engine(request.config_id)
        candidate = MatchmakingEngine.build_candidate(
            requester=request.requester,
            target=request.target,
            skill=request.draft.skill_id,
            exchange_skill=(
                request.draft.exchange_skill_id if request.draft.is_skill_exchange else None
            ),
        )
        compatibility = engine.score_match(candidate)

    return request_validator.prepare(request.draft, compatibility=compatibility)


# =============================================================================
# Scoring Configuration Endpoints
# =============================================================================

@app.post("/api/match/configure", tags=["Configuration"])
async def create_scoring_config(config: ScoringConfig):
    """Create or update a scoring configuration"""
    if not config.config_id:
        config.config_id = str(uuid.uuid4())

    scoring_configs[config.config_id] = config
    engines[config.config_id] = MatchmakingEngine(scoring_config=config)
    logger.info(f"Saved scoring config {config.config_id} ({config.name})")

    return {
        "config_id": config.config_id,
        "status": "created",
        "message": "Scoring configuration saved successfully",
    }


@app.get("/api/match/configure", tags=["Configuration"])
async def list_configs():
    """List all scoring configurations"""
    return {
        "count": len(scoring_configs),
        "configs": [
            {"config_id": c.config_id, "name": c.name, "created_at": c.created_at.isoformat()}
            for c in scoring_configs.values()
        ],
    }


@app.get("/api/match/configure/{config_id}", tags=["Configuration"])
async def get_config(config_id: str):
    """Get a scoring configuration by ID"""
    if config_id not in scoring_configs:
        raise ConfigNotFound("Scoring config not found", operation="GetScoringConfig")
    return scoring_configs[config_id]


@app.delete("/api/match/configure/{config_id}", tags=["Configuration"])
async def delete_config(config_id: str):
    """Delete a scoring configuration"""
    if config_id not in scoring_configs:
        raise ConfigNotFound("Scoring config not found", operation="DeleteScoringConfig")
    del scoring_configs[config_id]
    engines.pop(config_id, None)
    return {"status": "deleted", "config_id": config_id}


# =============================================================================
# Skill Relevance
# =============================================================================

@app.post("/api/skills/relevance/events", response_model=RelevanceUpdate, tags=["Relevance"])
async def apply_relevance_event(event: SkillRelevanceEvent):
    """Apply a domain event to the skill relevance projection (idempotent per event_id)"""
    return relevance_projector.apply(event)


@app.get("/api/skills/relevance", response_model=List[SkillRelevance], tags=["Relevance"])
async def top_relevance(limit: int = Query(10, ge=1, le=100, description="Number of skills")):
    """Most relevant skills first"""
    return relevance_projector.top(limit)


@app.get("/api/skills/relevance/{skill_id}", response_model=SkillRelevance, tags=["Relevance"])
async def get_relevance(skill_id: str):
    """Current relevance of a skill (1.0 if no events seen)"""
    return relevance_projector.get(skill_id)


# =============================================================================
# Statistics
# =============================================================================

@app.get("/api/stats", tags=["Info"])
async def get_stats():
    """Get engine statistics"""
    return {
        "default_engine": default_engine.get_stats(),
        "custom_configs": len(scoring_configs),
    }


# =============================================================================
# Helper Functions
# =============================================================================

def _get_engine(config_id: Optional[str] = None) -> MatchmakingEngine:
    """Get engine by config ID, or the default engine when no ID is given"""
    if not config_id:
        return default_engine
    if config_id not in engines:
        raise ConfigNotFound(f"Scoring config '{config_id}' not found")
    return engines[config_id]


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(MatchmakingError)
async def matchmaking_exception_handler(request: Request, exc: MatchmakingError):
    logger.warning(f"[{exc.error_code}] {exc.detail} | Path={request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"[HTTPException] {exc.detail} | Path={request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"[ValidationError] Path={request.url.path} | {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request parameters", "details": jsonable_errors(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[UnhandledError] {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors can carry exception objects in `ctx`; keep them serializable"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors
