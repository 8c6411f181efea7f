"""
Noteshelf — Session Resolver
==============================

What:  Turns an incoming request into the id of the user it acts for.
Why:   Every notes endpoint is owner-scoped, and the owner must come from a
       verified session, never from the request body.
How:   Sessions are HS256 JWTs issued by the identity provider with a secret
       shared through SESSION_SECRET. The token is read from the
       `Authorization: Bearer <token>` header, falling back to the session
       cookie so browser clients sending credentials work unchanged. The
       `sub` claim is the owner id.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt

from noteshelf.config import settings
from noteshelf.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class SessionResolver:
    """
    Resolves the authenticated owner id for a request.

    `resolve()` returns None for anonymous or invalid sessions; the
    `require_owner` dependency turns that into a 401.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        cookie_name: Optional[str] = None,
    ):
        self.secret = secret or settings.session_secret
        self.algorithm = algorithm or settings.session_algorithm
        self.cookie_name = cookie_name or settings.session_cookie_name

    def _extract_token(self, request: Request) -> Optional[str]:
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        if scheme.lower() == "bearer" and token:
            return token
        return request.cookies.get(self.cookie_name) or None

    def resolve(self, request: Request) -> Optional[str]:
        token = self._extract_token(request)
        if not token:
            return None

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
            return None

        owner_id = payload.get("sub")
        if not isinstance(owner_id, str) or not owner_id.strip():
            logger.info("Rejected session token without a usable 'sub' claim")
            return None
        return owner_id

    def issue(self, owner_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Mint a session token for `owner_id`.

        Tokens normally come from the identity provider; this exists for
        development tooling and the test suite.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.session_ttl_minutes)
        claims = {
            "sub": owner_id,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)


session_resolver = SessionResolver()


async def require_owner(request: Request) -> str:
    """FastAPI dependency: the authenticated owner id, or UnauthorizedError (401)."""
    owner_id = session_resolver.resolve(request)
    if owner_id is None:
        raise UnauthorizedError(context={"path": request.url.path})
    return owner_id
