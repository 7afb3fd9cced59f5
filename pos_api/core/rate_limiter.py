# pos_api/core/rate_limiter.py

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client IP; storage is in-process memory
limiter = Limiter(key_func=get_remote_address)
