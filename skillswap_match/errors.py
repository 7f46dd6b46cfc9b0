"""
Domain errors for SkillSwap Match Engine
"""

from typing import Optional


ERROR_MESSAGES = {
    "REQUIRED_FIELD_MISSING": "A required field is missing",
    "BUSINESS_RULE_VIOLATION": "The request violates a business rule",
    "RESOURCE_ALREADY_EXISTS": "The resource already exists",
    "RESOURCE_NOT_FOUND": "The requested resource was not found",
}

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


def get_error_message(error_code: Optional[str]) -> str:
    """Look up the user-facing message for an error code"""
    return ERROR_MESSAGES.get(error_code or "", DEFAULT_ERROR_MESSAGE)


class MatchmakingError(Exception):
    """Base class for domain errors raised outside the scorer"""
    error_code = "UNKNOWN"
    status_code = 500

    def __init__(self, detail: Optional[str] = None, operation: Optional[str] = None):
        self.detail = detail or get_error_message(self.error_code)
        self.operation = operation
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": get_error_message(self.error_code),
            "error_code": self.error_code,
            "detail": self.detail,
            "operation": self.operation,
        }


class RequiredFieldMissing(MatchmakingError):
    error_code = "REQUIRED_FIELD_MISSING"
    status_code = 400


class BusinessRuleViolation(MatchmakingError):
    error_code = "BUSINESS_RULE_VIOLATION"
    status_code = 400


class DuplicateMatchRequest(MatchmakingError):
    error_code = "RESOURCE_ALREADY_EXISTS"
    status_code = 409


class ConfigNotFound(MatchmakingError):
    error_code = "RESOURCE_NOT_FOUND"
    status_code = 404
