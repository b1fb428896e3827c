"""Caller tokens for the health endpoint, configured once at startup."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar

from jose import JWTError, jwt

DEFAULT_AUDIENCE = "svc-health"


class JWTManager:
    """Issue and verify bearer tokens identifying a calling service.

    A token names its caller in ``sub`` and is scoped to health checks by
    ``aud``. Tokens without an audience are refused even when signed with
    the right key, so tokens minted for other APIs sharing the secret do not
    open the health endpoint.
    """

    _secret_key: ClassVar[str] = ""
    _algorithm: ClassVar[str] = "HS256"
    _expire_minutes: ClassVar[int] = 60
    _audience: ClassVar[str] = DEFAULT_AUDIENCE

    @classmethod
    def configure(
        cls,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        audience: str = DEFAULT_AUDIENCE,
    ) -> None:
        """Set signing config. Call once at startup."""
        cls._secret_key = secret_key
        cls._algorithm = algorithm
        cls._expire_minutes = expire_minutes
        cls._audience = audience

    @classmethod
    def issue(cls, caller: str, **claims: Any) -> str:
        """Mint a token for ``caller``, valid for the configured lifetime."""
        to_encode = {
            **claims,
            "sub": caller,
            "aud": cls._audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=cls._expire_minutes),
        }
        return jwt.encode(to_encode, cls._secret_key, algorithm=cls._algorithm)

    @classmethod
    def verify_caller(cls, token: str) -> str:
        """Verify ``token`` and return the calling service's name.

        Raises:
            ValueError: If the token is invalid, expired, meant for another
                audience, or names no caller.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token, cls._secret_key,
                algorithms=[cls._algorithm],
                audience=cls._audience,
            )
        except JWTError as error:
            raise ValueError(f"Invalid token: {error}") from error
        if "aud" not in payload:
            raise ValueError(f"Invalid token: not scoped to audience {cls._audience!r}")
        caller = payload.get("sub")
        if not isinstance(caller, str) or not caller:
            raise ValueError("Invalid token payload: missing sub claim")
        return caller
