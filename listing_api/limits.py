from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# Shared limiter for the credential endpoints; keyed by client address
limiter = Limiter(key_func=get_remote_address, headers_enabled=False)

__all__ = [
    "limiter",
    "RateLimitExceeded",
    "SlowAPIMiddleware",
]
