"""Logging helpers with sensitive data redaction."""

import re

# Sensitive parameters to redact from URLs
SENSITIVE_PARAMS = [
    "code",
    "token",
    "refresh_token",
    "access_token",
    "client_secret",
    "api_key",
    "secret",
    "authorization",
    "bearer",
]


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    redacted = url
    for param in SENSITIVE_PARAMS:
        pattern = rf"([?&]){param}=([^&\s\"]+)"
        redacted = re.sub(pattern, rf"\g<1>{param}=***REDACTED***", redacted, flags=re.IGNORECASE)
    return redacted


def mask_secret(value: str | None, visible: int = 4) -> str | None:
    """Keep the first few characters of a secret for correlation."""
    if not value:
        return value
    return f"{value[:visible]}***REDACTED***"
