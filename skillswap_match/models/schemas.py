"""
Pydantic schemas for SkillSwap Match Engine
"""

from enum import Enum
from typing import List, Dict, Optional, Any, Set
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
import uuid


# =============================================================================
# ENUMS
# =============================================================================

class MatchTier(str, Enum):
    """Compatibility tier derived from the score"""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    INCOMPATIBLE = "INCOMPATIBLE"


class RelevanceTrigger(str, Enum):
    """Domain events that boost a skill's search relevance"""
    SKILL_VIEWED = "SKILL_VIEWED"
    SKILL_SEARCHED = "SKILL_SEARCHED"
    MATCH_REQUESTED = "MATCH_REQUESTED"
    SESSION_COMPLETED = "SESSION_COMPLETED"
    MATCH_ACCEPTED = "MATCH_ACCEPTED"
    POSITIVE_REVIEW = "POSITIVE_REVIEW"


class MatchRequestStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


# =============================================================================
# INPUT SCHEMAS
# =============================================================================

class MatchCandidate(BaseModel):
    """Input for the compatibility scorer. Defaults are the caller's job."""
    skills_match: bool
    requester_rating: float
    target_user_rating: float
    requester_preferred_days: Set[str] = Field(default_factory=set)
    target_user_preferred_days: Set[str] = Field(default_factory=set)
    requester_preferred_times: Set[str] = Field(default_factory=set)
    target_user_preferred_times: Set[str] = Field(default_factory=set)
    is_skill_exchange: bool = False
    exchange_skills_match: bool = False

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "skills_match": True,
                "requester_rating": 4.5,
                "target_user_rating": 4.0,
                "requester_preferred_days": ["monday", "wednesday"],
                "target_user_preferred_days": ["Montag"],
                "requester_preferred_times": ["evening"],
                "target_user_preferred_times": ["18:00-20:00"],
                "is_skill_exchange": True,
                "exchange_skills_match": True,
            }
        }
    )


class UserMatchProfile(BaseModel):
    """A user's matchmaking-relevant data, as fetched by the caller"""
    user_id: str
    display_name: Optional[str] = None
    rating: Optional[float] = Field(None, description="Average rating, None if unrated")
    offered_skills: List[str] = Field(default_factory=list)
    wanted_skills: List[str] = Field(default_factory=list)
    preferred_days: List[str] = Field(default_factory=list)
    preferred_times: List[str] = Field(default_factory=list)


# =============================================================================
# STAGE RESULT SCHEMAS
# =============================================================================

class GateResult(BaseModel):
    """Result from Stage 1: Skill Gate"""
    passed: bool
    reason: Optional[str] = None


class ScheduleResult(BaseModel):
    """Result from Stage 2: Schedule Overlap"""
    requester_days: List[str] = Field(default_factory=list)
    target_days: List[str] = Field(default_factory=list)
    requester_times: List[str] = Field(default_factory=list)
    target_times: List[str] = Field(default_factory=list)
    common_days: List[str] = Field(default_factory=list)
    common_times: List[str] = Field(default_factory=list)
    day_overlap: float = 1.0
    time_overlap: float = 1.0
    overlap: float = 1.0


class ComponentScore(BaseModel):
    """Score for a single component"""
    score: float
    weighted: float
    details: Dict[str, Any] = Field(default_factory=dict)


class CompatibilityBreakdown(BaseModel):
    """Breakdown of the compatibility score by component"""
    base: ComponentScore
    rating: ComponentScore
    schedule: ComponentScore
    exchange: ComponentScore


class CompatibilityResult(BaseModel):
    """Complete scorer output"""
    score: float
    tier: MatchTier
    gate: GateResult
    schedule: Optional[ScheduleResult] = None
    breakdown: CompatibilityBreakdown
    processing_time_ms: float = 0


class RankedCandidate(BaseModel):
    """A target user ranked for a requester"""
    rank: int
    user_id: str
    display_name: Optional[str] = None
    score: float
    tier: MatchTier
    is_skill_exchange: bool = False
    exchange_skills_match: bool = False
    common_days: List[str] = Field(default_factory=list)
    common_times: List[str] = Field(default_factory=list)


class BatchScoreResult(BaseModel):
    """Result from batch scoring"""
    processed: int
    compatible: int
    incompatible: int
    average_score: float
    processing_time_ms: float
    results: List[CompatibilityResult]


class RankResult(BaseModel):
    """Result from ranking target users for a requester"""
    requester_id: str
    skill: str
    exchange_skill: Optional[str] = None
    considered: int
    returned: int
    processing_time_ms: float
    candidates: List[RankedCandidate]


# =============================================================================
# SKILL RELEVANCE
# =============================================================================

class SkillRelevanceEvent(BaseModel):
    """Domain event that may boost a skill's relevance"""
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    skill_id: str
    trigger: RelevanceTrigger
    occurred_at: datetime = Field(default_factory=datetime.utcnow)


class SkillRelevance(BaseModel):
    """Projected relevance of a single skill"""
    skill_id: str
    relevance_score: float = 1.0
    applied_events: int = 0
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class RelevanceUpdate(BaseModel):
    """Outcome of applying one event"""
    event_id: str
    applied: bool
    factor: float
    relevance: SkillRelevance


# =============================================================================
# MATCH REQUESTS
# =============================================================================

class MatchRequestDraft(BaseModel):
    """An incoming match request before validation"""
    requester_id: str = ""
    target_user_id: str = ""
    skill_id: str = ""
    message: str = ""
    description: Optional[str] = None
    is_skill_exchange: bool = False
    exchange_skill_id: Optional[str] = None
    is_monetary: bool = False
    offered_amount: Optional[float] = None
    currency: Optional[str] = None
    session_duration_minutes: Optional[int] = None
    total_sessions: Optional[int] = None
    preferred_days: List[str] = Field(default_factory=list)
    preferred_times: List[str] = Field(default_factory=list)
    additional_notes: Optional[str] = None


class PreparedMatchRequest(BaseModel):
    """A validated match request, ready for persistence by the caller"""
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    thread_id: str
    requester_id: str
    target_user_id: str
    skill_id: str
    message: str
    description: str
    status: MatchRequestStatus = MatchRequestStatus.PENDING
    is_skill_exchange: bool = False
    exchange_skill_id: Optional[str] = None
    is_monetary: bool = False
    offered_amount: Optional[float] = None
    currency: str
    session_duration_minutes: int
    total_sessions: int
    preferred_days: List[str] = Field(default_factory=list)
    preferred_times: List[str] = Field(default_factory=list)
    additional_notes: Optional[str] = None
    compatibility: Optional[CompatibilityResult] = None
    created_at: datetime
    expires_at: datetime


# =============================================================================
# API REQUEST SCHEMAS
# =============================================================================

class ScoreRequest(BaseModel):
    """Request to score a single candidate"""
    config_id: Optional[str] = None
    candidate: MatchCandidate


class BatchScoreRequest(BaseModel):
    """Request to score multiple candidates"""
    config_id: Optional[str] = None
    candidates: List[MatchCandidate]


class RankRequest(BaseModel):
    """Request to rank target users for a requester"""
    config_id: Optional[str] = None
    requester: UserMatchProfile
    targets: List[UserMatchProfile]
    skill: str
    exchange_skill: Optional[str] = None
    min_score: float = 0
    limit: Optional[int] = Field(None, ge=1)


class CreateMatchRequest(BaseModel):
    """Request to validate and prepare a match request"""
    config_id: Optional[str] = None
    draft: MatchRequestDraft
    requester: Optional[UserMatchProfile] = None
    target: Optional[UserMatchProfile] = None
