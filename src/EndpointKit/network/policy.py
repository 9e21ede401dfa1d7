"""Network policy constants and defaults.

Defines timeout budgets, the fixed-delay retry defaults, and transport
security settings used by the endpoint execution layer.  Values here are the
fallbacks for :mod:`EndpointKit.settings`; deployments override them through
``ENDPOINTKIT_*`` environment variables rather than by editing this module.
"""

# ============================================================================
# Timeout Budgets (seconds)
# ============================================================================

#: Default per-request timeout applied by endpoints
DEFAULT_REQUEST_TIMEOUT = 60.0

#: Connection establishment timeout used by the HTTPX client
HTTP_CONNECT_TIMEOUT = 10.0


# ============================================================================
# Retry Policy
# ============================================================================

#: Attempts made by a call when the caller does not ask for retries
DEFAULT_RETRY_ATTEMPTS = 1

#: Fixed delay between attempts (seconds); no exponential growth, no jitter
DEFAULT_RETRY_DELAY = 1.0


# ============================================================================
# Security & Compliance
# ============================================================================

#: Require TLS verification for all HTTPS connections
TLS_VERIFY_ENABLED = True

#: Redirect responses are classified, never followed automatically
FOLLOW_REDIRECTS = False

#: User-Agent sent when the caller does not supply one
DEFAULT_USER_AGENT = "endpointkit/0.1.0"


__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "HTTP_CONNECT_TIMEOUT",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY",
    "TLS_VERIFY_ENABLED",
    "FOLLOW_REDIRECTS",
    "DEFAULT_USER_AGENT",
]
