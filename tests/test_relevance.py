"""
Tests for the skill relevance projection.
"""

import pytest
from concurrent.futures import ThreadPoolExecutor

from skillswap_match.relevance import SkillRelevanceProjector
from skillswap_match.models.schemas import SkillRelevanceEvent, RelevanceTrigger
from skillswap_match.config.settings import RELEVANCE_MAX, RELEVANCE_INITIAL


def _event(skill_id="skill-1", trigger=RelevanceTrigger.MATCH_ACCEPTED, event_id=None):
    data = {"skill_id": skill_id, "trigger": trigger}
    if event_id:
        data["event_id"] = event_id
    return SkillRelevanceEvent(**data)


class TestSkillRelevanceProjector:
    """Test boost application."""

    def test_unseen_skill_has_initial_relevance(self):
        projector = SkillRelevanceProjector()
        relevance = projector.get("unknown")
        assert relevance.relevance_score == RELEVANCE_INITIAL
        assert relevance.applied_events == 0

    def test_single_boost(self):
        projector = SkillRelevanceProjector()
        update = projector.apply(_event(trigger=RelevanceTrigger.POSITIVE_REVIEW))
        assert update.applied is True
        assert update.factor == 1.3
        assert update.relevance.relevance_score == pytest.approx(1.3)

    def test_boosts_compound(self):
        """Consecutive boosts multiply."""
        projector = SkillRelevanceProjector()
        projector.apply(_event(trigger=RelevanceTrigger.POSITIVE_REVIEW))
        projector.apply(_event(trigger=RelevanceTrigger.MATCH_ACCEPTED))
        relevance = projector.get("skill-1")
        assert relevance.relevance_score == pytest.approx(1.3 * 1.2)
        assert relevance.applied_events == 2

    def test_duplicate_event_applied_once(self):
        """Replaying an event id leaves the projection unchanged."""
        projector = SkillRelevanceProjector()
        first = projector.apply(_event(event_id="evt-1"))
        second = projector.apply(_event(event_id="evt-1"))
        assert first.applied is True
        assert second.applied is False
        assert projector.get("skill-1").relevance_score == pytest.approx(1.2)
        assert projector.get("skill-1").applied_events == 1

    def test_clamped_at_maximum(self):
        """Relevance never exceeds the cap, however many events arrive."""
        projector = SkillRelevanceProjector()
        for _ in range(20):
            projector.apply(_event(trigger=RelevanceTrigger.POSITIVE_REVIEW))
        assert projector.get("skill-1").relevance_score == RELEVANCE_MAX

    def test_skills_are_independent(self):
        projector = SkillRelevanceProjector()
        projector.apply(_event(skill_id="a"))
        assert projector.get("b").relevance_score == RELEVANCE_INITIAL

    def test_top_orders_by_relevance(self):
        projector = SkillRelevanceProjector()
        projector.apply(_event(skill_id="low", trigger=RelevanceTrigger.SKILL_VIEWED))
        projector.apply(_event(skill_id="high", trigger=RelevanceTrigger.POSITIVE_REVIEW))
        projector.apply(_event(skill_id="mid", trigger=RelevanceTrigger.MATCH_REQUESTED))
        assert [s.skill_id for s in projector.top(2)] == ["high", "mid"]

    def test_custom_boost_table(self):
        projector = SkillRelevanceProjector(boosts={"SKILL_VIEWED": 1.5}, max_relevance=3.0)
        projector.apply(_event(trigger=RelevanceTrigger.SKILL_VIEWED))
        projector.apply(_event(trigger=RelevanceTrigger.MATCH_ACCEPTED))
        # MATCH_ACCEPTED is missing from the table, so it is neutral
        assert projector.get("skill-1").relevance_score == pytest.approx(1.5)

    def test_empty_boost_table_is_neutral(self):
        """An explicitly empty table boosts nothing instead of using the defaults."""
        projector = SkillRelevanceProjector(boosts={})
        for trigger in RelevanceTrigger:
            assert projector.factor_for(trigger) == 1.0
        projector.apply(_event(trigger=RelevanceTrigger.POSITIVE_REVIEW))
        assert projector.get("skill-1").relevance_score == RELEVANCE_INITIAL

    def test_apply_many_and_reset(self):
        projector = SkillRelevanceProjector()
        updates = projector.apply_many([_event(event_id="x"), _event(event_id="x")])
        assert [u.applied for u in updates] == [True, False]
        projector.reset()
        assert projector.top() == []
        assert projector.apply(_event(event_id="x")).applied is True

    def test_concurrent_duplicates_applied_once(self):
        """The same event delivered from many threads counts once."""
        projector = SkillRelevanceProjector()
        event = _event(event_id="shared")
        with ThreadPoolExecutor(max_workers=8) as executor:
            updates = list(executor.map(projector.apply, [event] * 32))
        assert sum(1 for u in updates if u.applied) == 1
        assert projector.get("skill-1").relevance_score == pytest.approx(1.2)

    def test_returned_state_is_a_copy(self):
        projector = SkillRelevanceProjector()
        projector.apply(_event())
        snapshot = projector.get("skill-1")
        snapshot.relevance_score = 99
        assert projector.get("skill-1").relevance_score == pytest.approx(1.2)
