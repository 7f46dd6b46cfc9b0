"""
Skill Relevance Projection
==========================
Applies multiplicative relevance boosts to skills as domain events arrive.

Each event is applied at most once (keyed by event_id), and a skill's
relevance never exceeds RELEVANCE_MAX.
"""

import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from .models.schemas import (
    SkillRelevanceEvent,
    SkillRelevance,
    RelevanceUpdate,
    RelevanceTrigger,
)
from .config.settings import RELEVANCE_BOOSTS, RELEVANCE_INITIAL, RELEVANCE_MAX
from .logging_config import setup_logger

logger = setup_logger(__name__)


class SkillRelevanceProjector:
    """
    In-memory projection of skill relevance scores.
    """

    def __init__(
        self,
        boosts: Optional[Dict[str, float]] = None,
        max_relevance: float = RELEVANCE_MAX,
    ):
        self.boosts = RELEVANCE_BOOSTS if boosts is None else boosts
        self.max_relevance = max_relevance
        self._lock = threading.Lock()
        self._skills: Dict[str, SkillRelevance] = {}
        self._seen_events: Set[str] = set()

    def factor_for(self, trigger: RelevanceTrigger) -> float:
        return self.boosts.get(trigger.value, 1.0)

    def apply(self, event: SkillRelevanceEvent) -> RelevanceUpdate:
        """
        Apply one event. Duplicates leave the projection unchanged.
        """
        factor = self.factor_for(event.trigger)

        with self._lock:
            current = self._skills.get(event.skill_id) or SkillRelevance(
                skill_id=event.skill_id,
                relevance_score=RELEVANCE_INITIAL,
            )

            if event.event_id in self._seen_events:
                logger.debug(f"Event {event.event_id} already applied, skipping")
                return RelevanceUpdate(
                    event_id=event.event_id,
                    applied=False,
                    factor=factor,
                    relevance=current.model_copy(),
                )

            boosted = min(self.max_relevance, current.relevance_score * factor)
            updated = SkillRelevance(
                skill_id=event.skill_id,
                relevance_score=round(boosted, 6),
                applied_events=current.applied_events + 1,
                updated_at=datetime.utcnow(),
            )
            self._skills[event.skill_id] = updated
            self._seen_events.add(event.event_id)

        logger.info(
            f"Skill {event.skill_id} relevance {current.relevance_score:.4f} -> "
            f"{updated.relevance_score:.4f} ({event.trigger.value} x{factor})"
        )
        return RelevanceUpdate(
            event_id=event.event_id,
            applied=True,
            factor=factor,
            relevance=updated.model_copy(),
        )

    def apply_many(self, events: Iterable[SkillRelevanceEvent]) -> List[RelevanceUpdate]:
        return [self.apply(event) for event in events]

    def get(self, skill_id: str) -> SkillRelevance:
        """Current relevance, or the initial value for unseen skills"""
        with self._lock:
            current = self._skills.get(skill_id)
            if current is None:
                return SkillRelevance(skill_id=skill_id, relevance_score=RELEVANCE_INITIAL)
            return current.model_copy()

    def top(self, limit: int = 10) -> List[SkillRelevance]:
        """Most relevant skills first, ties broken by skill id"""
        with self._lock:
            ordered = sorted(
                self._skills.values(),
                key=lambda s: (-s.relevance_score, s.skill_id),
            )
            return [s.model_copy() for s in ordered[:limit]]

    def reset(self):
        with self._lock:
            self._skills.clear()
            self._seen_events.clear()
