from slowapi import Limiter
from slowapi.util import get_remote_address
from storefront.config import settings

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_PER_MINUTE],
    enabled=settings.RATE_LIMIT_ENABLED,
)
