"""
SkillSwap Match Engine
======================
A three-stage pipeline for scoring skill-swap match compatibility:
  Stage 1: Skill Gate (invalid pairings score the minimum)
  Stage 2: Schedule Overlap (preferred days/times)
  Stage 3: Weighted Scoring (ratings, schedule, exchange alignment)

Also projects skill relevance boosts from domain events and prepares
match requests.
"""

__version__ = "1.0.0"
__author__ = "SkillSwap Matchmaking Team"
