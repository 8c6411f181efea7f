"""
Noteshelf — Session Resolver Tests
====================================

What:  Which tokens resolve to an owner and which are treated as anonymous.
How:   Builds bare Starlette requests, no app or database involved.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from starlette.requests import Request

from noteshelf.auth import SessionResolver, require_owner, session_resolver
from noteshelf.exceptions import UnauthorizedError


def _request(headers=None) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {"type": "http", "method": "GET", "path": "/api/notes", "query_string": b"", "headers": raw}
    )


class TestSessionResolver:

    def setup_method(self):
        self.resolver = SessionResolver(secret="s3cret", algorithm="HS256", cookie_name="sid")

    def test_bearer_token(self):
        token = self.resolver.issue("user-1")
        assert self.resolver.resolve(_request({"Authorization": f"Bearer {token}"})) == "user-1"

    def test_cookie_token(self):
        token = self.resolver.issue("user-1")
        assert self.resolver.resolve(_request({"Cookie": f"sid={token}"})) == "user-1"

    def test_bearer_takes_precedence_over_cookie(self):
        bearer = self.resolver.issue("from-header")
        cookie = self.resolver.issue("from-cookie")
        request = _request({"Authorization": f"Bearer {bearer}", "Cookie": f"sid={cookie}"})
        assert self.resolver.resolve(request) == "from-header"

    def test_anonymous(self):
        assert self.resolver.resolve(_request()) is None

    def test_non_bearer_scheme(self):
        token = self.resolver.issue("user-1")
        assert self.resolver.resolve(_request({"Authorization": f"Basic {token}"})) is None

    def test_wrong_secret(self):
        token = SessionResolver(secret="other", algorithm="HS256").issue("user-1")
        assert self.resolver.resolve(_request({"Authorization": f"Bearer {token}"})) is None

    def test_expired(self):
        token = self.resolver.issue("user-1", expires_delta=timedelta(seconds=-10))
        assert self.resolver.resolve(_request({"Authorization": f"Bearer {token}"})) is None

    @pytest.mark.parametrize("claims", [{}, {"sub": ""}, {"sub": "   "}, {"sub": 42}])
    def test_unusable_subject(self, claims):
        claims["exp"] = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode(claims, "s3cret", algorithm="HS256")
        assert self.resolver.resolve(_request({"Authorization": f"Bearer {token}"})) is None


class TestRequireOwner:

    @pytest.mark.asyncio
    async def test_returns_owner(self):
        token = session_resolver.issue("user-9")
        owner = await require_owner(_request({"Authorization": f"Bearer {token}"}))
        assert owner == "user-9"

    @pytest.mark.asyncio
    async def test_raises_unauthorized(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await require_owner(_request())
        assert exc_info.value.message == "Unauthorized"
