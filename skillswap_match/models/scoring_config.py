"""
Scoring Configuration Models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
import uuid

from ..config.settings import (
    DEFAULT_WEIGHTS,
    DEFAULT_SCHEDULE_BLEND,
    DEFAULT_THRESHOLDS,
)


class ScoringWeights(BaseModel):
    """Weights for each compatibility component (fractions of the 0-100 scale)"""
    model_config = ConfigDict(validate_assignment=True)

    base: float = Field(DEFAULT_WEIGHTS["base"], ge=0, le=1)
    rating: float = Field(DEFAULT_WEIGHTS["rating"], ge=0, le=1)
    schedule: float = Field(DEFAULT_WEIGHTS["schedule"], ge=0, le=1)
    exchange_bonus: float = Field(DEFAULT_WEIGHTS["exchange_bonus"], ge=0, le=1)
    exchange_penalty: float = Field(DEFAULT_WEIGHTS["exchange_penalty"], ge=0, le=1)


class ScheduleBlend(BaseModel):
    """How day and time overlap are combined"""
    model_config = ConfigDict(validate_assignment=True)

    day_weight: float = Field(DEFAULT_SCHEDULE_BLEND["day_weight"], ge=0)
    time_weight: float = Field(DEFAULT_SCHEDULE_BLEND["time_weight"], ge=0)
    overlap_mode: str = Field(
        DEFAULT_SCHEDULE_BLEND["overlap_mode"],
        pattern="^(smaller|union)$",
        description="Divide the intersection by the smaller set or by the union",
    )


class ScoringThresholds(BaseModel):
    """Tier thresholds on the 0-100 scale"""
    model_config = ConfigDict(validate_assignment=True)

    excellent: int = DEFAULT_THRESHOLDS["excellent"]
    good: int = DEFAULT_THRESHOLDS["good"]
    fair: int = DEFAULT_THRESHOLDS["fair"]


class ScoringConfig(BaseModel):
    """Complete scoring configuration"""
    model_config = ConfigDict(validate_assignment=True)

    config_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Default Scoring"
    description: Optional[str] = None

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    schedule: ScheduleBlend = Field(default_factory=ScheduleBlend)
    thresholds: ScoringThresholds = Field(default_factory=ScoringThresholds)

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    is_active: bool = True

    def update(self, **kwargs):
        """Update configuration and set updated_at"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = datetime.utcnow()
        return self


def create_default_scoring_config(
    name: Optional[str] = None,
    rating_weight: Optional[float] = None,
    schedule_weight: Optional[float] = None,
    overlap_mode: Optional[str] = None,
) -> ScoringConfig:
    """
    Factory function to create a scoring config with sensible defaults
    """
    config = ScoringConfig()

    if name:
        config.name = name

    if rating_weight is not None:
        config.weights.rating = rating_weight

    if schedule_weight is not None:
        config.weights.schedule = schedule_weight

    if overlap_mode:
        config.schedule.overlap_mode = overlap_mode

    return config
