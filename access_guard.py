"""
Client credential check applied to every client and admin route
"""

import hmac
import logging
from typing import Optional
from fastapi import Depends, Header

from config.settings import Settings, settings
from services.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def is_authorized(api_key: Optional[str], user_agent: Optional[str], config: Settings = settings) -> bool:
    """
    True iff the API key equals the configured key and the user agent
    contains the configured client identity.
    """
    if not api_key or not user_agent:
        return False
    if not hmac.compare_digest(api_key.encode(), config.api_key.encode()):
        return False
    return config.user_agent in user_agent


def get_settings() -> Settings:
    """Dependency returning the process settings (overridable in tests)."""
    return settings


async def verify_client(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    user_agent: Optional[str] = Header(None, alias="User-Agent"),
    config: Settings = Depends(get_settings),
) -> None:
    """
    Dependency for protected routes.
    Raises UnauthorizedError without saying which credential was wrong.
    """
    if not is_authorized(authorization, user_agent, config):
        logger.warning("Rejected request with invalid credentials")
        raise UnauthorizedError()
