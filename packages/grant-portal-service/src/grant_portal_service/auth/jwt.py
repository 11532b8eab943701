"""Session token verification."""

from __future__ import annotations

from typing import Any

import jwt

from grant_portal_service.settings import settings


def decode_session_token(
    token: str,
    key: str | None = None,
    algorithm: str | None = None,
    issuer: str | None = None,
) -> dict[str, Any]:
    """Decode and verify an identity-provider session JWT.

    Raises jwt.PyJWTError on any failure, including a missing ``sub`` claim.
    """
    options: dict[str, Any] = {"require": ["exp", "sub"]}
    kwargs: dict[str, Any] = {}
    issuer = issuer if issuer is not None else settings.identity_jwt_issuer
    if issuer:
        kwargs["issuer"] = issuer
        options["require"].append("iss")
    return jwt.decode(
        token,
        key if key is not None else settings.identity_jwt_key,
        algorithms=[algorithm or settings.identity_jwt_algorithm],
        options=options,
        **kwargs,
    )
