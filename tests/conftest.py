"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from skillswap_match.models.schemas import MatchCandidate, UserMatchProfile


@pytest.fixture
def ideal_candidate_data() -> Dict[str, Any]:
    """Two 5-star users with identical schedules, one-way request."""
    return {
        "skills_match": True,
        "requester_rating": 5.0,
        "target_user_rating": 5.0,
        "requester_preferred_days": {"monday"},
        "target_user_preferred_days": {"monday"},
        "requester_preferred_times": {"evening"},
        "target_user_preferred_times": {"evening"},
        "is_skill_exchange": False,
        "exchange_skills_match": False,
    }


@pytest.fixture
def ideal_candidate(ideal_candidate_data) -> MatchCandidate:
    return MatchCandidate(**ideal_candidate_data)


@pytest.fixture
def partial_candidate_data() -> Dict[str, Any]:
    """Average ratings and a partial schedule overlap."""
    return {
        "skills_match": True,
        "requester_rating": 3.5,
        "target_user_rating": 4.0,
        "requester_preferred_days": {"monday", "tuesday", "friday"},
        "target_user_preferred_days": {"tuesday", "saturday"},
        "requester_preferred_times": {"morning", "evening"},
        "target_user_preferred_times": {"afternoon"},
        "is_skill_exchange": True,
        "exchange_skills_match": True,
    }


@pytest.fixture
def requester_profile() -> UserMatchProfile:
    return UserMatchProfile(
        user_id="user-requester",
        display_name="Rita",
        rating=4.5,
        offered_skills=["Guitar", "Spanish"],
        wanted_skills=["Python"],
        preferred_days=["Monday", "Wednesday"],
        preferred_times=["evening"],
    )


@pytest.fixture
def target_profiles() -> list:
    return [
        UserMatchProfile(
            user_id="user-a",
            display_name="Anna",
            rating=5.0,
            offered_skills=["python"],
            wanted_skills=["guitar"],
            preferred_days=["Montag"],
            preferred_times=["18:00-20:00"],
        ),
        UserMatchProfile(
            user_id="user-b",
            display_name="Ben",
            rating=None,
            offered_skills=["Python", "Go"],
            preferred_days=["saturday"],
            preferred_times=["morning"],
        ),
        UserMatchProfile(
            user_id="user-c",
            display_name="Cleo",
            rating=4.8,
            offered_skills=["Painting"],
        ),
    ]
