"""
Match Request Preparation
=========================
Validates incoming match requests and derives their thread id.

Persistence stays with the caller; this module only keeps track of which
requests are pending so that duplicates can be refused.
"""

import hashlib
import threading
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from .models.schemas import (
    MatchRequestDraft,
    PreparedMatchRequest,
    CompatibilityResult,
)
from .stages.stage2_schedule import normalize_days, normalize_times
from .config.settings import MATCH_REQUEST_DEFAULTS
from .errors import RequiredFieldMissing, BusinessRuleViolation, DuplicateMatchRequest
from .logging_config import setup_logger

logger = setup_logger(__name__)

OPERATION = "CreateMatchRequest"


def derive_thread_id(user_a: str, user_b: str, skill_id: str) -> str:
    """
    Stable thread id for all requests between two users about one skill.

    The ids are sorted first so it does not matter who initiates. The first
    16 digest bytes are laid out little-endian, the way .NET builds a Guid from
    a byte array, so ids agree with threads stored by the existing backend.
    """
    first, second = sorted([user_a, user_b])
    digest = hashlib.sha256(f"{first}:{second}:{skill_id}".encode("utf-8")).digest()
    return str(uuid.UUID(bytes_le=digest[:16]))


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


class MatchRequestValidator:
    """
    Applies the match request rules and tracks pending requests.

    A request stops counting as pending once it is released or its
    expiry passes; expired entries are pruned on the next lookup.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Dict[Tuple[str, str, str], datetime] = {}

    def validate(self, draft: MatchRequestDraft):
        """Raise a MatchmakingError for the first rule the draft breaks"""
        missing = [
            name for name in ("requester_id", "target_user_id", "skill_id", "message")
            if _blank(getattr(draft, name))
        ]
        if missing:
            raise RequiredFieldMissing(
                f"Missing required fields for match request: {', '.join(missing)}",
                operation=OPERATION,
            )

        if draft.requester_id == draft.target_user_id:
            raise BusinessRuleViolation(
                "You cannot create a match request for your own skill",
                operation=OPERATION,
            )

        if draft.is_skill_exchange and _blank(draft.exchange_skill_id):
            raise RequiredFieldMissing(
                "A skill exchange needs an exchange skill",
                operation=OPERATION,
            )

        if draft.is_monetary and not (draft.offered_amount or 0) > 0:
            raise BusinessRuleViolation(
                "A monetary offer needs a positive amount",
                operation=OPERATION,
            )

    def ensure_not_pending(self, draft: MatchRequestDraft, now: Optional[datetime] = None):
        """Raise DuplicateMatchRequest if the same request is still pending"""
        key = (draft.requester_id, draft.target_user_id, draft.skill_id)
        with self._lock:
            self._check_duplicate(key, now or datetime.utcnow())

    def prepare(
        self,
        draft: MatchRequestDraft,
        compatibility: Optional[CompatibilityResult] = None,
        now: Optional[datetime] = None,
    ) -> PreparedMatchRequest:
        """
        Validate the draft, register it as pending and build the prepared request.
        """
        self.validate(draft)
        key = (draft.requester_id, draft.target_user_id, draft.skill_id)
        created_at = now or datetime.utcnow()
        expires_at = created_at + timedelta(days=MATCH_REQUEST_DEFAULTS["expires_after_days"])

        with self._lock:
            self._check_duplicate(key, created_at)
            self._pending[key] = expires_at

        prepared = PreparedMatchRequest(
            thread_id=derive_thread_id(draft.requester_id, draft.target_user_id, draft.skill_id),
            requester_id=draft.requester_id,
            target_user_id=draft.target_user_id,
            skill_id=draft.skill_id,
            message=draft.message,
            description=draft.description or draft.message,
            is_skill_exchange=draft.is_skill_exchange,
            exchange_skill_id=draft.exchange_skill_id,
            is_monetary=draft.is_monetary,
            offered_amount=draft.offered_amount,
            currency=draft.currency or MATCH_REQUEST_DEFAULTS["currency"],
            session_duration_minutes=(
                draft.session_duration_minutes
                or MATCH_REQUEST_DEFAULTS["session_duration_minutes"]
            ),
            total_sessions=draft.total_sessions or MATCH_REQUEST_DEFAULTS["total_sessions"],
            preferred_days=sorted(normalize_days(draft.preferred_days)),
            preferred_times=sorted(normalize_times(draft.preferred_times)),
            additional_notes=draft.additional_notes,
            compatibility=compatibility,
            created_at=created_at,
            expires_at=expires_at,
        )

        logger.info(
            f"Prepared match request {prepared.request_id} "
            f"({draft.requester_id} -> {draft.target_user_id}, thread {prepared.thread_id})"
        )
        return prepared

    def release(self, requester_id: str, target_user_id: str, skill_id: str) -> bool:
        """Forget a pending request once it is answered"""
        with self._lock:
            return self._pending.pop((requester_id, target_user_id, skill_id), None) is not None

    def has_pending(
        self,
        requester_id: str,
        target_user_id: str,
        skill_id: str,
        now: Optional[datetime] = None,
    ) -> bool:
        with self._lock:
            self._prune(now or datetime.utcnow())
            return (requester_id, target_user_id, skill_id) in self._pending

    def _check_duplicate(self, key: Tuple[str, str, str], now: datetime):
        # Caller holds the lock
        self._prune(now)
        if key in self._pending:
            logger.warning(
                f"User {key[0]} already has a pending request for skill {key[2]}"
            )
            raise DuplicateMatchRequest(
                "You already have a pending request for this skill",
                operation=OPERATION,
            )

    def _prune(self, now: datetime):
        expired = [key for key, expires_at in self._pending.items() if expires_at <= now]
        for key in expired:
            del self._pending[key]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired pending match requests")
