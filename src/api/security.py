"""
API key guard applied to every route of the quoting API.

Keys come from API_KEYS (comma-separated). Health and docs routes stay public.
"""

import hmac
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Header, HTTPException, Request, status

load_dotenv()

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/", "/health", "/docs", "/docs/oauth2-redirect", "/openapi.json", "/redoc"})


def get_api_keys() -> List[str]:
    return [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]


def _debug_enabled() -> bool:
    return os.getenv("API_KEY_DEBUG", "").lower() in ("1", "true", "yes")


def is_valid_key(candidate: Optional[str], keys: List[str]) -> bool:
    candidate = (candidate or "").strip()
    if not candidate:
        return False
    return any(hmac.compare_digest(candidate, key) for key in keys)


async def api_key_protection(
    request: Request = None,  # default None for direct calls in tests
    x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY"),
):
    path = request.url.path if request is not None else None
    if path in PUBLIC_PATHS:
        return

    keys = get_api_keys()
    ok = is_valid_key(x_api_key, keys)
    if _debug_enabled():
        logger.info("[ApiKey] path=%s header_present=%s ok=%s configured_keys=%d", path, bool(x_api_key), ok, len(keys))

    if not ok:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API Key")
