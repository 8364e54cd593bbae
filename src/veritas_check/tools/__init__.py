from veritas_check.tools.redirects import (
    DEFAULT_USER_AGENT,
    HttpxRedirectProbe,
    ProbeResponse,
    RedirectPolicy,
    RedirectProbe,
    RedirectResolver,
)

__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpxRedirectProbe",
    "ProbeResponse",
    "RedirectPolicy",
    "RedirectProbe",
    "RedirectResolver",
]
