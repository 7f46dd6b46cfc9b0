"""
Stage 1: Skill Gate
===================
Hard gate on the offered/requested skill pairing.

An invalid pairing short-circuits the pipeline to the minimum score, so it
can never outrank a valid one.
"""

from typing import Iterable, Optional

from ..models.schemas import MatchCandidate, GateResult


class SkillGateStage:
    """
    Stage 1: Reject candidates whose skill pairing is invalid.
    """

    def process(self, candidate: MatchCandidate) -> GateResult:
        if not candidate.skills_match:
            return GateResult(
                passed=False,
                reason="Offered and requested skills do not match",
            )
        return GateResult(passed=True)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def offers_skill(offered_skills: Iterable[str], skill: Optional[str]) -> bool:
    """Case-insensitive check that a skill is among the offered ones"""
    wanted = _clean(skill)
    if not wanted:
        return False
    return any(_clean(s) == wanted for s in offered_skills)
