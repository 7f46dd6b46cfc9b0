"""
Stage 3: Weighted Scoring
=========================
Deterministic weighted compatibility score on a 0-100 scale.

Components (default weights):
- Base (50%): awarded to every valid skill pairing
- Rating (25%): average of both users' ratings, linear in 0-5
- Schedule (25%): blended day/time overlap from Stage 2
- Exchange (+/-10%): bonus for a clean two-way barter, penalty otherwise
"""

import math
import time
from typing import Optional, Dict, Any

from ..models.schemas import (
    MatchCandidate,
    GateResult,
    ScheduleResult,
    CompatibilityResult,
    CompatibilityBreakdown,
    ComponentScore,
    MatchTier,
)
from ..models.scoring_config import ScoringConfig, create_default_scoring_config
from ..config.settings import SCORE_MIN, SCORE_MAX, RATING_MIN, RATING_MAX


class CompatibilityScoringStage:
    """
    Stage 3: Calculate the weighted compatibility score.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or create_default_scoring_config()
        self.weights = self.config.weights
        self.thresholds = self.config.thresholds

    def process(
        self,
        candidate: MatchCandidate,
        gate: GateResult,
        schedule: Optional[ScheduleResult] = None,
    ) -> CompatibilityResult:
        """
        Calculate the compatibility score.

        Args:
            candidate: Scorer input
            gate: Result from Stage 1
            schedule: Result from Stage 2 (not needed when the gate failed)

        Returns:
            CompatibilityResult with score, tier and breakdown
        """
        start_time = time.time()

        if not gate.passed:
            return self._create_incompatible_result(gate, start_time)

        base = self._calculate_base_score()
        rating = self._calculate_rating_score(candidate)
        schedule_component = self._calculate_schedule_score(schedule)
        exchange = self._calculate_exchange_score(candidate)

        base_weighted = base["score"] * self.weights.base
        rating_weighted = rating["score"] * self.weights.rating
        schedule_weighted = schedule_component["score"] * self.weights.schedule
        exchange_weighted = exchange["weighted"]

        overall = base_weighted + rating_weighted + schedule_weighted + exchange_weighted
        overall = round(max(SCORE_MIN, min(SCORE_MAX, overall)), 2)

        processing_time = (time.time() - start_time) * 1000

        return CompatibilityResult(
            score=overall,
            tier=self._map_to_tier(overall),
            gate=gate,
            schedule=schedule,
            breakdown=CompatibilityBreakdown(
                base=ComponentScore(
                    score=base["score"],
                    weighted=round(base_weighted, 2),
                    details=base["details"],
                ),
                rating=ComponentScore(
                    score=rating["score"],
                    weighted=round(rating_weighted, 2),
                    details=rating["details"],
                ),
                schedule=ComponentScore(
                    score=schedule_component["score"],
                    weighted=round(schedule_weighted, 2),
                    details=schedule_component["details"],
                ),
                exchange=ComponentScore(
                    score=exchange["score"],
                    weighted=round(exchange_weighted, 2),
                    details=exchange["details"],
                ),
            ),
            processing_time_ms=round(processing_time, 2),
        )

    # =========================================================================
    # Component scores (each on a 0-100 scale before weighting)
    # =========================================================================

    def _calculate_base_score(self) -> Dict[str, Any]:
        return {"score": 100.0, "details": {"reason": "Valid skill pairing"}}

    def _calculate_rating_score(self, candidate: MatchCandidate) -> Dict[str, Any]:
        """Average of both ratings, clamped into the rating domain"""
        requester = self._clamp_rating(candidate.requester_rating)
        target = self._clamp_rating(candidate.target_user_rating)
        average = (requester + target) / 2

        score = (average - RATING_MIN) / (RATING_MAX - RATING_MIN) * 100
        return {
            "score": round(score, 2),
            "details": {
                "requester_rating": requester,
                "target_user_rating": target,
                "average_rating": round(average, 2),
            },
        }

    def _calculate_schedule_score(
        self, schedule: Optional[ScheduleResult]
    ) -> Dict[str, Any]:
        if schedule is None:
            return {"score": 100.0, "details": {"reason": "No schedule data"}}

        return {
            "score": round(schedule.overlap * 100, 2),
            "details": {
                "day_overlap": schedule.day_overlap,
                "time_overlap": schedule.time_overlap,
                "common_days": schedule.common_days,
                "common_times": schedule.common_times,
            },
        }

    def _calculate_exchange_score(self, candidate: MatchCandidate) -> Dict[str, Any]:
        """Bonus or penalty for two-way barters, nothing for one-way requests"""
        if not candidate.is_skill_exchange:
            return {
                "score": 0.0,
                "weighted": 0.0,
                "details": {"reason": "Not a skill exchange"},
            }

        if candidate.exchange_skills_match:
            return {
                "score": 100.0,
                "weighted": self.weights.exchange_bonus * 100,
                "details": {"reason": "Reciprocal skills match"},
            }

        return {
            "score": -100.0,
            "weighted": -self.weights.exchange_penalty * 100,
            "details": {"reason": "Reciprocal skills do not match"},
        }

    # =========================================================================
    # Helper functions
    # =========================================================================

    def _clamp_rating(self, rating: float) -> float:
        if math.isnan(rating):
            return RATING_MIN
        return max(RATING_MIN, min(RATING_MAX, rating))

    def _map_to_tier(self, score: float) -> MatchTier:
        if score >= self.thresholds.excellent:
            return MatchTier.EXCELLENT
        elif score >= self.thresholds.good:
            return MatchTier.GOOD
        elif score >= self.thresholds.fair:
            return MatchTier.FAIR
        return MatchTier.POOR

    def _create_incompatible_result(
        self, gate: GateResult, start_time: float
    ) -> CompatibilityResult:
        zero = ComponentScore(score=0, weighted=0, details={})
        processing_time = (time.time() - start_time) * 1000
        return CompatibilityResult(
            score=SCORE_MIN,
            tier=MatchTier.INCOMPATIBLE,
            gate=gate,
            schedule=None,
            breakdown=CompatibilityBreakdown(
                base=zero,
                rating=zero,
                schedule=zero,
                exchange=zero,
            ),
            processing_time_ms=round(processing_time, 2),
        )
