import time
import functools
from http import HTTPStatus

from flask import request, current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from common.cache import get_redis_client
from common.response import error_response
from models.user import User, UserRole

def rate_limit(limit=100, per=60, key_prefix='rl'):
    """
    Rate limiting decorator.

    Args:
        limit (int): Maximum number of requests allowed within time period
        per (int): Time period in seconds
        key_prefix (str): Redis key prefix for rate limit counters
    """
    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            redis_client = get_redis_client(current_app)
            if not redis_client:
                # If Redis is not available, skip rate limiting
                return f(*args, **kwargs)

            key = f"{key_prefix}:ip:{request.remote_addr}"
            current = time.time()
            p = redis_client.pipeline()
            p.get(key)
            p.get(f"{key}:ts")
            count, timestamp = p.execute()

            count = int(count) if count else 0
            timestamp = float(timestamp) if timestamp else current

            # Reset counter if outside time window
            time_passed = current - timestamp
            if time_passed > per:
                count = 0
                timestamp = current

            if count >= limit:
                return error_response("Rate limit exceeded", HTTPStatus.TOO_MANY_REQUESTS,
                                      {"retry_after": int(per - time_passed)})

            p = redis_client.pipeline()
            p.setex(key, per, count + 1)
            p.setex(f"{key}:ts", per, timestamp)
            p.execute()

            return f(*args, **kwargs)
        return wrapped
    return decorator

def role_required(required_roles):
    """Require a valid access token whose user is active and holds one of ``required_roles``."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            # Preflight requests carry no token
            if request.method == 'OPTIONS':
                return current_app.make_default_options_response()

            verify_jwt_in_request()
            user = User.get_by_id(get_jwt_identity())
            if not user or not user.is_active:
                return error_response("User not found or disabled", HTTPStatus.UNAUTHORIZED)
            if user.role.value not in required_roles:
                return error_response("Insufficient permissions", HTTPStatus.FORBIDDEN)

            request.current_user = user
            return fn(*args, **kwargs)
        return wrapper
    return decorator

def admin_required(fn):
    """Decorator for dashboard endpoints open to admins and editors."""
    return role_required([UserRole.ADMIN.value, UserRole.EDITOR.value])(fn)
