"""
Configuration settings for SkillSwap Match Engine
"""

from typing import Dict, List, Tuple
import os

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

SERVICE_CONFIG = {
    "name": os.getenv("SERVICE_NAME", "skillswap-match"),
    "version": "1.0.0",
    "environment": os.getenv("ENVIRONMENT", "production").lower(),
    "host": os.getenv("MATCH_HOST", "0.0.0.0"),
    "port": int(os.getenv("MATCH_PORT", "8000")),
    "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
    "use_json_logging": os.getenv("USE_JSON_LOGGING", "false").lower() == "true",
    "log_dir": os.getenv("LOG_DIR", "./logs"),
    "log_file": os.getenv("LOG_FILE") or None,
    "batch_workers": int(os.getenv("MATCH_BATCH_WORKERS", "4")),
}

# =============================================================================
# SCORE RANGE
# =============================================================================

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Callers substitute this for users without any reviews yet
DEFAULT_UNRATED_RATING = float(os.getenv("DEFAULT_UNRATED_RATING", "4.0"))

RATING_MIN = 0.0
RATING_MAX = 5.0

# =============================================================================
# DEFAULT SCORING WEIGHTS
# =============================================================================

DEFAULT_WEIGHTS = {
    "base": 0.50,
    "rating": 0.25,
    "schedule": 0.25,
    "exchange_bonus": 0.10,
    "exchange_penalty": 0.10,
}

DEFAULT_SCHEDULE_BLEND = {
    "day_weight": 0.5,
    "time_weight": 0.5,
    "overlap_mode": "smaller",  # smaller | union
}

# =============================================================================
# TIER MAPPING
# =============================================================================

DEFAULT_THRESHOLDS = {
    "excellent": 80,
    "good": 60,
    "fair": 40,
}

TIER_DESCRIPTIONS = {
    "EXCELLENT": "Strong match - suggest immediately",
    "GOOD": "Good match - show in results",
    "FAIR": "Possible match - show lower in results",
    "POOR": "Weak match - hide by default",
    "INCOMPATIBLE": "Skills do not match",
}

# =============================================================================
# SCHEDULE PREFERENCES
# =============================================================================

CANONICAL_DAYS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

DAY_ALIASES: Dict[str, str] = {
    # English abbreviations
    "mon": "monday",
    "tue": "tuesday",
    "tues": "tuesday",
    "wed": "wednesday",
    "thu": "thursday",
    "thur": "thursday",
    "thurs": "thursday",
    "fri": "friday",
    "sat": "saturday",
    "sun": "sunday",
    # German names
    "montag": "monday",
    "dienstag": "tuesday",
    "mittwoch": "wednesday",
    "donnerstag": "thursday",
    "freitag": "friday",
    "samstag": "saturday",
    "sonnabend": "saturday",
    "sonntag": "sunday",
}

# (start_minute, end_minute) within the day; night wraps past midnight
TIME_BUCKETS: Dict[str, List[Tuple[int, int]]] = {
    "morning": [(6 * 60, 12 * 60)],
    "afternoon": [(12 * 60, 17 * 60)],
    "evening": [(17 * 60, 22 * 60)],
    "night": [(22 * 60, 24 * 60), (0, 6 * 60)],
}

TIME_ALIASES: Dict[str, str] = {
    "morgens": "morning",
    "vormittag": "morning",
    "nachmittag": "afternoon",
    "nachmittags": "afternoon",
    "abend": "evening",
    "abends": "evening",
    "nacht": "night",
    "nachts": "night",
}

TIME_RANGE_PATTERN = r"^([01]?[0-9]|2[0-3]):([0-5][0-9])\s*-\s*([01]?[0-9]|2[0-3]):([0-5][0-9])$"

# =============================================================================
# SKILL RELEVANCE BOOSTS
# =============================================================================

RELEVANCE_BOOSTS = {
    "SKILL_VIEWED": 1.05,
    "SKILL_SEARCHED": 1.05,
    "MATCH_REQUESTED": 1.10,
    "SESSION_COMPLETED": 1.15,
    "MATCH_ACCEPTED": 1.20,
    "POSITIVE_REVIEW": 1.30,
}

RELEVANCE_INITIAL = 1.0
RELEVANCE_MAX = 2.0

# =============================================================================
# MATCH REQUESTS
# =============================================================================

MATCH_REQUEST_DEFAULTS = {
    "currency": "EUR",
    "session_duration_minutes": 60,
    "total_sessions": 1,
    "expires_after_days": 7,
}
