"""
Token service: mints and verifies access/refresh JWTs (PyJWT, HS256 by default)
and owns the refresh-token lifecycle.

- Access tokens are never stored; they are valid while signature and expiry hold.
- Refresh tokens are persisted (models.refresh_token.RefreshToken) and are
  single-use: rotation consumes the stored row with one conditional DELETE and
  only issues a replacement when exactly that DELETE removed a row. Two
  concurrent rotations of the same token cannot both succeed.
- A token whose `exp` equals the current second is already expired.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Callable, Dict, NamedTuple, Optional

import jwt

from models.refresh_token import RefreshToken
from utils.security import generate_jti

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class TokenError(Exception):
    """Base class for token failures."""


class MissingToken(TokenError):
    """No credential supplied (absent header, wrong scheme, empty token)."""


class InvalidToken(TokenError):
    """Credential supplied but rejected (signature, expiry, unknown refresh token)."""


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(hours=1)
    refresh_ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_config(cls, config) -> "TokenSettings":
        return cls(
            access_secret=config["JWT_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_ttl=config.get("JWT_ACCESS_EXPIRES", timedelta(hours=1)),
            refresh_ttl=config.get("JWT_REFRESH_EXPIRES", timedelta(days=7)),
        )


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(self, settings: TokenSettings, storage, clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self.storage = storage
        self.clock = clock or _utcnow

    # -- primitives -------------------------------------------------------

    def _encode(self, user_id: str, secret: str, ttl: timedelta, **extra) -> tuple[str, datetime]:
        now = self.clock()
        expires_at = now + ttl
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            **extra,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm), expires_at

    def _decode(self, token: str, secret: str, message: str) -> Dict[str, Any]:
        """
        Verify signature and expiry. Time checks are done against self.clock
        (not PyJWT's wall clock) so that expiry is a plain epoch-seconds
        comparison: valid only while now < exp.
        """
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                options={"require": ["sub", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidToken(message) from exc

        try:
            exp = int(claims["exp"])
        except (TypeError, ValueError) as exc:
            raise InvalidToken(message) from exc
        if int(self.clock().timestamp()) >= exp:
            raise InvalidToken(message)
        if not claims.get("sub"):
            raise InvalidToken(message)
        return claims

    # -- public operations ------------------------------------------------

    @staticmethod
    def extract_bearer(header: Optional[str]) -> str:
        """Return the token carried by an `Authorization: Bearer <token>` header."""
        if not header or not header.startswith(BEARER_PREFIX):
            raise MissingToken("Authorization header missing or malformed")
        token = header[len(BEARER_PREFIX):].strip()
        if not token:
            raise MissingToken("Access token required")
        return token

    def issue_token_pair(self, user_id: str) -> TokenPair:
        """Mint an access/refresh pair and persist the refresh token."""
        access_token, _ = self._encode(user_id, self.settings.access_secret, self.settings.access_ttl)
        jti = generate_jti()
        refresh_token, expires_at = self._encode(
            user_id, self.settings.refresh_secret, self.settings.refresh_ttl, jti=jti
        )
        self.storage.new(
            RefreshToken(token=refresh_token, jti=jti, user_id=str(user_id), expires_at=expires_at)
        )
        self.storage.save()
        return TokenPair(access_token, refresh_token)

    def verify_access_token(self, token: Optional[str]) -> str:
        """Return the user id carried by a valid access token."""
        if not token:
            raise MissingToken("Access token required")
        claims = self._decode(token, self.settings.access_secret, "Invalid or expired token")
        return str(claims["sub"])

    def rotate_refresh_token(self, token: Optional[str]) -> TokenPair:
        """
        Exchange a refresh token for a new pair. The presented token is
        consumed before the replacement is created; if nothing was consumed
        (already used, logged out, or never issued) the call fails.
        """
        if not token:
            raise MissingToken("Refresh token required")
        claims = self._decode(token, self.settings.refresh_secret, "Invalid or expired refresh token")
        user_id = str(claims["sub"])

        consumed = self.storage.delete_where(
            RefreshToken,
            RefreshToken.token == token,
            RefreshToken.user_id == user_id,
        )
        if consumed == 0:
            logger.warning("Refresh token for user %s rejected: not on record", user_id)
            raise InvalidToken("Invalid refresh token")

        logger.info("Refresh token rotated for user %s", user_id)
        return self.issue_token_pair(user_id)

    def invalidate_refresh_token(self, token: str) -> None:
        """Logout. Unknown or already-consumed tokens are ignored."""
        removed = self.storage.delete_where(RefreshToken, RefreshToken.token == token)
        if removed:
            logger.info("Refresh token invalidated")

    def invalidate_all_for_user(self, user_id: str) -> int:
        return self.storage.delete_where(RefreshToken, RefreshToken.user_id == str(user_id))

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Drop stored refresh tokens whose expiry has passed."""
        now = now or self.clock()
        removed = self.storage.delete_where(RefreshToken, RefreshToken.expires_at <= now)
        logger.info("Purged %d expired refresh token(s)", removed)
        return removed
