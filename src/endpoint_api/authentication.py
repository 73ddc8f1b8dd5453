"""Bearer token authentication.

Tokens are signed JWT's, checked against the key set of the ``AUTH_JWKS`` setting.
The ``AUTH_OWNER_CLAIM`` claim (``sub`` by default) names the owner,
which scopes all endpoints and documents that the request can access.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from jwcrypto.common import JWException
from jwcrypto.jwk import JWKSet
from jwcrypto.jwt import JWT
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)


class TokenOwner:
    """The authenticated owner, exposed as ``request.user``."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, owner_id: str, claims: dict):
        self.owner_id = owner_id
        self.claims = claims

    def __str__(self):
        return self.owner_id

    def __repr__(self):
        return f"<TokenOwner: {self.owner_id}>"


@lru_cache
def _parse_keyset(jwks_json: str) -> JWKSet:
    return JWKSet.from_json(jwks_json)


def get_keyset() -> JWKSet:
    """Return the keys that tokens can be signed with."""
    jwks_json = settings.AUTH_JWKS
    if not jwks_json and settings.AUTH_JWKS_FILE:
        jwks_json = Path(settings.AUTH_JWKS_FILE).read_text()
    if not jwks_json:
        raise ImproperlyConfigured("Either AUTH_JWKS or AUTH_JWKS_FILE needs to be set.")

    try:
        return _parse_keyset(jwks_json)
    except (JWException, ValueError) as e:
        raise ImproperlyConfigured(f"Invalid key set in AUTH_JWKS: {e}") from e


def decode_token(raw_token: str) -> dict:
    """Check the signature and expiry of the token, and return its claims."""
    try:
        token = JWT(
            jwt=raw_token,
            key=get_keyset(),
            algs=settings.AUTH_ALLOWED_ALGORITHMS,
            check_claims={"exp": None},
            expected_type="JWS",
        )
        claims = json.loads(token.claims)
    except (JWException, ValueError) as e:
        logger.debug("Rejected bearer token: %s", e)
        raise AuthenticationFailed("Invalid or expired token.") from e

    if not isinstance(claims, dict):
        raise AuthenticationFailed("Invalid or expired token.")
    return claims


class BearerTokenAuthentication(BaseAuthentication):
    """Authenticate requests that have an ``Authorization: Bearer ...`` header."""

    keyword = "Bearer"

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise AuthenticationFailed("Invalid Authorization header, expected a single token.")

        try:
            raw_token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed("Invalid Authorization header.") from None

        claims = decode_token(raw_token)
        owner_id = claims.get(settings.AUTH_OWNER_CLAIM)
        if not owner_id or not isinstance(owner_id, str):
            raise AuthenticationFailed(f"Token has no '{settings.AUTH_OWNER_CLAIM}' claim.")

        return TokenOwner(owner_id, claims), raw_token

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
