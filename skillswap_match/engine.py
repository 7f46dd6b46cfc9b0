"""
SkillSwap Match Engine - Main Orchestrator
==========================================
Orchestrates the three-stage pipeline:
  Stage 1: Skill Gate → Stage 2: Schedule Overlap → Stage 3: Weighted Scoring

Key properties:
- Invalid skill pairings are rejected at Stage 1 and score the minimum
- Every stage is stateless, so scoring is safe to run in parallel
- Batch scoring and candidate ranking run on a thread pool
"""

import threading
import time
from typing import Optional, List, Dict, Any, Iterable
from concurrent.futures import ThreadPoolExecutor

from .models.schemas import (
    MatchCandidate,
    UserMatchProfile,
    CompatibilityResult,
    BatchScoreResult,
    RankedCandidate,
    RankResult,
    MatchTier,
)
from .models.scoring_config import ScoringConfig, create_default_scoring_config
from .stages.stage1_gate import SkillGateStage, offers_skill
from .stages.stage2_schedule import ScheduleOverlapStage
from .stages.stage3_scoring import CompatibilityScoringStage
from .config.settings import DEFAULT_UNRATED_RATING, SERVICE_CONFIG
from .logging_config import setup_logger

logger = setup_logger(__name__)


def _run_pipeline(
    candidate: MatchCandidate,
    stage1: SkillGateStage,
    stage2: ScheduleOverlapStage,
    stage3: CompatibilityScoringStage,
) -> CompatibilityResult:
    gate = stage1.process(candidate)
    if not gate.passed:
        return stage3.process(candidate, gate)

    schedule = stage2.process(candidate)
    return stage3.process(candidate, gate, schedule)


class MatchmakingEngine:
    """
    Main match engine that orchestrates all three stages.
    """

    def __init__(self, scoring_config: Optional[ScoringConfig] = None):
        """
        Initialize the engine.

        Args:
            scoring_config: Scoring configuration (uses defaults if not provided)
        """
        self.config = scoring_config or create_default_scoring_config()

        self.stage1 = SkillGateStage()
        self.stage2 = ScheduleOverlapStage(self.config.schedule)
        self.stage3 = CompatibilityScoringStage(self.config)

        self._stats_lock = threading.Lock()
        self.stats = self._empty_stats()

    def score_match(self, candidate: MatchCandidate) -> CompatibilityResult:
        """
        Score a single candidate through the pipeline.

        Args:
            candidate: Scorer input, with caller-supplied defaults already applied

        Returns:
            CompatibilityResult with all stage outputs
        """
        start_time = time.time()
        result = _run_pipeline(candidate, self.stage1, self.stage2, self.stage3)
        self._record(result, (time.time() - start_time) * 1000)
        return result

    def score_batch(
        self,
        candidates: List[MatchCandidate],
        max_workers: int = SERVICE_CONFIG["batch_workers"],
    ) -> BatchScoreResult:
        """
        Score multiple candidates in parallel.

        Args:
            candidates: Candidates to score
            max_workers: Number of parallel workers

        Returns:
            BatchScoreResult with results in input order
        """
        start_time = time.time()

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(self.score_match, candidates))

        total_time = (time.time() - start_time) * 1000
        compatible = sum(1 for r in results if r.tier != MatchTier.INCOMPATIBLE)
        average = sum(r.score for r in results) / len(results) if results else 0.0

        logger.info(
            f"Scored batch of {len(results)} candidates "
            f"({compatible} compatible) in {total_time:.2f}ms"
        )

        return BatchScoreResult(
            processed=len(results),
            compatible=compatible,
            incompatible=len(results) - compatible,
            average_score=round(average, 2),
            processing_time_ms=round(total_time, 2),
            results=results,
        )

    def rank_candidates(
        self,
        requester: UserMatchProfile,
        targets: Iterable[UserMatchProfile],
        skill: str,
        exchange_skill: Optional[str] = None,
        min_score: float = 0,
        limit: Optional[int] = None,
        max_workers: int = SERVICE_CONFIG["batch_workers"],
    ) -> RankResult:
        """
        Rank target users for a requester who wants to learn `skill`.

        Targets that do not offer the skill are dropped, as is the requester's
        own profile. Unrated users are scored with the default rating.

        Args:
            requester: Profile of the user asking for a match
            targets: Candidate target profiles
            skill: The skill the requester wants
            exchange_skill: Skill the requester offers in return (barter), if any
            min_score: Minimum score for inclusion
            limit: Maximum number of candidates to return

        Returns:
            RankResult sorted by score (desc), then user id
        """
        start_time = time.time()
        pool = [t for t in targets if t.user_id != requester.user_id]
        candidates = [
            self.build_candidate(requester, target, skill, exchange_skill)
            for target in pool
        ]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(self.score_match, candidates))

        ranked = []
        for target, candidate, result in zip(pool, candidates, results):
            if result.tier == MatchTier.INCOMPATIBLE or result.score < min_score:
                continue
            schedule = result.schedule
            ranked.append(RankedCandidate(
                rank=0,
                user_id=target.user_id,
                display_name=target.display_name,
                score=result.score,
                tier=result.tier,
                is_skill_exchange=candidate.is_skill_exchange,
                exchange_skills_match=candidate.exchange_skills_match,
                common_days=schedule.common_days if schedule else [],
                common_times=schedule.common_times if schedule else [],
            ))

        ranked.sort(key=lambda c: (-c.score, c.user_id))
        if limit is not None:
            ranked = ranked[:limit]
        for position, entry in enumerate(ranked, start=1):
            entry.rank = position

        total_time = (time.time() - start_time) * 1000
        logger.info(
            f"Ranked {len(ranked)} of {len(pool)} candidates for "
            f"requester {requester.user_id} (skill={skill})"
        )

        return RankResult(
            requester_id=requester.user_id,
            skill=skill,
            exchange_skill=exchange_skill,
            considered=len(pool),
            returned=len(ranked),
            processing_time_ms=round(total_time, 2),
            candidates=ranked,
        )

    @staticmethod
    def build_candidate(
        requester: UserMatchProfile,
        target: UserMatchProfile,
        skill: str,
        exchange_skill: Optional[str] = None,
    ) -> MatchCandidate:
        """Turn two profiles into scorer input, applying caller defaults"""
        is_exchange = bool(exchange_skill and exchange_skill.strip())
        return MatchCandidate(
            skills_match=offers_skill(target.offered_skills, skill),
            requester_rating=_rating_or_default(requester.rating),
            target_user_rating=_rating_or_default(target.rating),
            requester_preferred_days=set(requester.preferred_days),
            target_user_preferred_days=set(target.preferred_days),
            requester_preferred_times=set(requester.preferred_times),
            target_user_preferred_times=set(target.preferred_times),
            is_skill_exchange=is_exchange,
            exchange_skills_match=(
                is_exchange and offers_skill(requester.offered_skills, exchange_skill)
            ),
        )

    def update_config(self, new_config: ScoringConfig):
        """Update the scoring configuration and reinitialize stages"""
        self.config = new_config
        self.stage2 = ScheduleOverlapStage(new_config.schedule)
        self.stage3 = CompatibilityScoringStage(new_config)

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        with self._stats_lock:
            stats = self.stats.copy()
        if stats["total_processed"] > 0:
            stats["incompatible_rate"] = round(
                stats["incompatible"] / stats["total_processed"] * 100, 1
            )
            stats["avg_score"] = round(
                stats["total_score"] / stats["total_processed"], 2
            )
            stats["avg_processing_time_ms"] = round(
                stats["total_processing_time_ms"] / stats["total_processed"], 2
            )
        return stats

    def reset_stats(self):
        """Reset engine statistics"""
        with self._stats_lock:
            self.stats = self._empty_stats()

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _record(self, result: CompatibilityResult, elapsed_ms: float):
        with self._stats_lock:
            self.stats["total_processed"] += 1
            self.stats["total_score"] += result.score
            self.stats["total_processing_time_ms"] += elapsed_ms
            if result.tier == MatchTier.INCOMPATIBLE:
                self.stats["incompatible"] += 1

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "total_processed": 0,
            "incompatible": 0,
            "total_score": 0.0,
            "total_processing_time_ms": 0.0,
        }


def _rating_or_default(rating: Optional[float]) -> float:
    return DEFAULT_UNRATED_RATING if rating is None else rating


# =============================================================================
# Convenience Functions
# =============================================================================

_default_stages = (
    SkillGateStage(),
    ScheduleOverlapStage(),
    CompatibilityScoringStage(),
)


def calculate_score(
    skills_match: bool,
    requester_rating: float,
    target_user_rating: float,
    requester_preferred_days: Iterable[str] = (),
    target_user_preferred_days: Iterable[str] = (),
    requester_preferred_times: Iterable[str] = (),
    target_user_preferred_times: Iterable[str] = (),
    is_skill_exchange: bool = False,
    exchange_skills_match: bool = False,
    config: Optional[ScoringConfig] = None,
) -> float:
    """
    Compute the compatibility score for one potential match.

    Stateless and deterministic. Returns a float in [0, 100].
    """
    candidate = MatchCandidate(
        skills_match=skills_match,
        requester_rating=requester_rating,
        target_user_rating=target_user_rating,
        requester_preferred_days=set(requester_preferred_days),
        target_user_preferred_days=set(target_user_preferred_days),
        requester_preferred_times=set(requester_preferred_times),
        target_user_preferred_times=set(target_user_preferred_times),
        is_skill_exchange=is_skill_exchange,
        exchange_skills_match=exchange_skills_match,
    )
    if config is None:
        stages = _default_stages
    else:
        stages = (
            SkillGateStage(),
            ScheduleOverlapStage(config.schedule),
            CompatibilityScoringStage(config),
        )
    return _run_pipeline(candidate, *stages).score


def create_engine(
    rating_weight: Optional[float] = None,
    schedule_weight: Optional[float] = None,
    overlap_mode: Optional[str] = None,
) -> MatchmakingEngine:
    """
    Factory function to create a MatchmakingEngine with common settings.
    """
    config = create_default_scoring_config(
        rating_weight=rating_weight,
        schedule_weight=schedule_weight,
        overlap_mode=overlap_mode,
    )
    return MatchmakingEngine(scoring_config=config)
