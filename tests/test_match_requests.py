"""
Tests for match request validation and thread ids.
"""

import uuid
import pytest
from datetime import datetime, timedelta

from skillswap_match.match_requests import MatchRequestValidator, derive_thread_id
from skillswap_match.models.schemas import MatchRequestDraft, MatchRequestStatus
from skillswap_match.errors import (
    RequiredFieldMissing,
    BusinessRuleViolation,
    DuplicateMatchRequest,
    MatchmakingError,
    get_error_message,
    DEFAULT_ERROR_MESSAGE,
)


@pytest.fixture
def draft() -> MatchRequestDraft:
    return MatchRequestDraft(
        requester_id="user-1",
        target_user_id="user-2",
        skill_id="skill-python",
        message="Would love to learn Python from you!",
        preferred_days=["Montag", "friday"],
        preferred_times=["18:00-20:00"],
    )


class TestDeriveThreadId:
    """Test thread id derivation."""

    def test_symmetric(self):
        """Either user initiating yields the same thread."""
        assert derive_thread_id("a", "b", "s") == derive_thread_id("b", "a", "s")

    def test_differs_by_skill(self):
        assert derive_thread_id("a", "b", "s1") != derive_thread_id("a", "b", "s2")

    def test_is_uuid(self):
        value = derive_thread_id("a", "b", "s")
        assert str(uuid.UUID(value)) == value

    def test_stable(self):
        assert derive_thread_id("a", "b", "s") == derive_thread_id("a", "b", "s")

    def test_guid_byte_order(self):
        """The first three fields are little-endian, matching stored thread ids."""
        expected = "ae87c686-e0e5-8f90-fbde-6050e6f2fc28"
        assert derive_thread_id("b", "a", "s1") == expected
        assert derive_thread_id("a", "b", "s1") == expected


class TestMatchRequestValidator:
    """Test the match request rules."""

    def test_prepare_defaults(self, draft):
        now = datetime(2026, 1, 1, 12, 0, 0)
        prepared = MatchRequestValidator().prepare(draft, now=now)
        assert prepared.status == MatchRequestStatus.PENDING
        assert prepared.description == draft.message
        assert prepared.currency == "EUR"
        assert prepared.session_duration_minutes == 60
        assert prepared.total_sessions == 1
        assert prepared.expires_at == now + timedelta(days=7)
        assert prepared.thread_id == derive_thread_id("user-1", "user-2", "skill-python")

    def test_prepare_normalizes_preferences(self, draft):
        prepared = MatchRequestValidator().prepare(draft)
        assert prepared.preferred_days == ["friday", "monday"]
        assert prepared.preferred_times == ["evening"]

    @pytest.mark.parametrize("field", ["requester_id", "target_user_id", "skill_id", "message"])
    def test_required_fields(self, draft, field):
        setattr(draft, field, "   ")
        with pytest.raises(RequiredFieldMissing) as exc_info:
            MatchRequestValidator().validate(draft)
        assert field in exc_info.value.detail

    def test_self_request_rejected(self, draft):
        draft.target_user_id = draft.requester_id
        with pytest.raises(BusinessRuleViolation):
            MatchRequestValidator().validate(draft)

    def test_exchange_needs_exchange_skill(self, draft):
        draft.is_skill_exchange = True
        with pytest.raises(RequiredFieldMissing):
            MatchRequestValidator().validate(draft)
        draft.exchange_skill_id = "skill-guitar"
        MatchRequestValidator().validate(draft)

    def test_monetary_needs_positive_amount(self, draft):
        draft.is_monetary = True
        draft.offered_amount = 0
        with pytest.raises(BusinessRuleViolation):
            MatchRequestValidator().validate(draft)

    def test_duplicate_pending_request(self, draft):
        validator = MatchRequestValidator()
        validator.prepare(draft)
        with pytest.raises(DuplicateMatchRequest) as exc_info:
            validator.prepare(draft)
        assert exc_info.value.status_code == 409

    def test_release_allows_new_request(self, draft):
        validator = MatchRequestValidator()
        validator.prepare(draft)
        assert validator.release("user-1", "user-2", "skill-python") is True
        assert validator.has_pending("user-1", "user-2", "skill-python") is False
        validator.prepare(draft)

    def test_expired_request_no_longer_pending(self, draft):
        """Once a pending request expires, the same request can be made again."""
        validator = MatchRequestValidator()
        t0 = datetime(2026, 1, 1, 12, 0, 0)
        first = validator.prepare(draft, now=t0)

        assert validator.has_pending("user-1", "user-2", "skill-python", now=t0) is True
        later = first.expires_at + timedelta(days=1)
        assert validator.has_pending("user-1", "user-2", "skill-python", now=later) is False

        second = validator.prepare(draft, now=later)
        assert second.expires_at == later + timedelta(days=7)
        with pytest.raises(DuplicateMatchRequest):
            validator.prepare(draft, now=later + timedelta(hours=1))

    def test_ensure_not_pending(self, draft):
        """The duplicate check can run on its own before anything is registered."""
        validator = MatchRequestValidator()
        validator.ensure_not_pending(draft)
        validator.prepare(draft)
        with pytest.raises(DuplicateMatchRequest):
            validator.ensure_not_pending(draft)

    def test_invalid_draft_not_registered(self, draft):
        validator = MatchRequestValidator()
        draft.message = ""
        with pytest.raises(RequiredFieldMissing):
            validator.prepare(draft)
        assert validator.has_pending("user-1", "user-2", "skill-python") is False


class TestErrors:
    """Test the error message lookup."""

    def test_known_code(self):
        assert get_error_message("RESOURCE_NOT_FOUND") == "The requested resource was not found"

    def test_unknown_code_falls_back(self):
        assert get_error_message("NOPE") == DEFAULT_ERROR_MESSAGE
        assert get_error_message(None) == DEFAULT_ERROR_MESSAGE

    def test_default_detail(self):
        error = RequiredFieldMissing()
        assert error.detail == get_error_message("REQUIRED_FIELD_MISSING")
        assert isinstance(error, MatchmakingError)
        assert error.to_dict()["error_code"] == "REQUIRED_FIELD_MISSING"
