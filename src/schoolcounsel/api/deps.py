"""
Shared API dependencies.

``get_current_principal`` reads ``Authorization: Bearer <token>`` and returns
the decoded :class:`~schoolcounsel.access.Principal`; every route except
registration, login and health depends on it.
"""

from fastapi import Header

from schoolcounsel.access import Principal
from schoolcounsel.core.errors import Unauthenticated
from schoolcounsel.core.security import decode_access_token

BEARER_PREFIX = "Bearer "


async def get_current_principal(authorization: str | None = Header(None)) -> Principal:
    """Decode the caller's bearer token.

    Raises:
        Unauthenticated: header missing, not a bearer token, or token invalid/expired
    """
    if not authorization:
        raise Unauthenticated("Access denied. No token provided.")
    if not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("Access denied. Invalid token format.")

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthenticated("Access denied. No token provided.")

    return decode_access_token(token)
