import json
import logging
from urllib.parse import urlencode

from flask import current_app, request
from flask_caching import Cache
import redis

from common.seo import request_origin
from common.validation import derive_locale

logger = logging.getLogger(__name__)

# Initialize Flask-Caching extension
cache = Cache()

def get_redis_client(app=None):
    """Get a Redis client when the app is configured for the Redis cache backend.

    Returns:
        redis.Redis: Redis client if connection successful, None otherwise
    """
    app = app or current_app
    if app.config.get('CACHE_TYPE') != 'RedisCache':
        return None
    try:
        client = redis.from_url(
            app.config.get('CACHE_REDIS_URL') or app.config.get('REDIS_URL'),
            socket_connect_timeout=1,
            socket_timeout=1,
            socket_keepalive=False,
            retry_on_timeout=False,
            health_check_interval=0
        )
        client.ping()
        return client
    except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
        app.logger.warning(f"Redis connection failed: {str(e)}. Rate limiting disabled.")
        return None

def cache_key_for_request(prefix='public'):
    """Build a cache key from the request origin, path, sorted query string and locale."""
    query = urlencode(sorted(request.args.items(multi=True)))
    locale = derive_locale(request) or ''
    return f"{prefix}:{request_origin(request)}{request.path}?{query}#{locale}"

def with_cache(key, producer, ttl_seconds=None):
    """Return the cached value under ``key`` or compute it with ``producer``.

    The produced value must be JSON serializable. Cache errors never fail the
    caller; the producer result is returned uncached instead.
    """
    if ttl_seconds is None:
        ttl_seconds = current_app.config.get('PUBLIC_CACHE_TTL', 60)

    try:
        cached_result = cache.get(key)
        if cached_result is not None:
            return json.loads(cached_result)
    except Exception as e:
        logger.warning("Cache read failed for %s: %s", key, e)

    result = producer()
    try:
        cache.set(key, json.dumps(result, default=str), timeout=ttl_seconds)
    except Exception as e:
        logger.warning("Cache write failed for %s: %s", key, e)
    return result

def invalidate_public_cache():
    """Drop every cached public payload after an admin write."""
    try:
        cache.clear()
    except Exception as e:
        logger.warning("Cache clear failed: %s", e)
