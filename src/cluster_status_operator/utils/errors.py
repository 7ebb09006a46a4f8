"""Classification and sanitization of Kubernetes API errors."""

from __future__ import annotations

import re

from kubernetes.client.exceptions import ApiException

# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(authorization:\s*bearer)\s+[A-Za-z0-9\-\._~\+/]+=*",
    r"(token[:=\s]+)[A-Za-z0-9\-\._~\+/]+=*",
    r"(password[:=\s]+)[^\s,;\)]+",
]


def is_not_found(error: BaseException) -> bool:
    """Check whether an error is an API 404."""
    return isinstance(error, ApiException) and error.status == 404


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1 [REDACTED]", sanitized, flags=re.IGNORECASE)
    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    ApiException renders its HTTP headers into ``str()``; those are reduced to
    status and reason before sanitizing.
    """
    if isinstance(error, ApiException):
        error_msg = f"({error.status}) Reason: {error.reason}"
        if error.body:
            error_msg = f"{error_msg} Body: {error.body}"
        return sanitize_error_message(error_msg)
    return sanitize_error_message(str(error))
