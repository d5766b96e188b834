"""Bearer-token access control for the gateway API.

Provides:
- create_access_token(): sign a token carrying a ``role`` claim
- verify_jwt(): dependency returning the caller's claims
- require_role(): dependency factory gating a route on a role
- require_admin / require_viewer: the two gates the routers use

Tokens are checked against the settings the app was built with
(``app.state.settings``), so an app created with test settings verifies
tokens signed with the test secret. Source configuration, forced refreshes,
error logs and settings writes need ADMIN; the status view needs VIEWER;
``GET /data/{source}`` is public. With DEBUG=true every caller is treated as
``dev-user`` with the ADMIN role.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)

DEV_CLAIMS = {"sub": "dev-user", "role": "ADMIN"}


class Role(str, Enum):
    """Gateway roles. ADMIN implies VIEWER."""

    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


_GRANTS: dict[Role, frozenset[Role]] = {
    Role.ADMIN: frozenset({Role.ADMIN, Role.VIEWER}),
    Role.VIEWER: frozenset({Role.VIEWER}),
}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    subject: str,
    role: Role | str = Role.VIEWER,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Sign a token for *subject* with the given role.

    Args:
        subject: Caller identity stored in ``sub``.
        role: ADMIN or VIEWER.
        expires_delta: Lifetime; defaults to ``settings.jwt_expiry_minutes``.
        settings: Signing settings; defaults to the module-level settings.
    """
    settings = settings or default_settings
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expiry_minutes)
    claims = {
        "sub": subject,
        "role": Role(role).value,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


async def verify_jwt(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """Decode the bearer token and return its claims.

    Claims without a role are treated as VIEWER.
    """
    settings = _app_settings(request)
    if settings.debug:
        return dict(DEV_CLAIMS)
    if credentials is None:
        raise _unauthorized("Missing authentication token")

    try:
        claims = jwt.decode(
            credentials.credentials,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid bearer token")
        raise _unauthorized("Invalid authentication token")

    claims.setdefault("role", Role.VIEWER.value)
    return claims


CurrentUser = Annotated[dict, Depends(verify_jwt)]


def require_role(required: Role):
    """Dependency factory: reject callers whose role does not grant *required*.

    Usage::

        @router.put("/settings/rate-limit", dependencies=[Depends(require_admin)])
    """

    async def _check(user: CurrentUser) -> dict:
        try:
            role = Role(user.get("role", Role.VIEWER.value))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Unknown role: {user.get('role')}",
            )
        if required not in _GRANTS[role]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{required.value} role required (have {role.value}).",
            )
        return user

    return _check


require_admin = require_role(Role.ADMIN)
require_viewer = require_role(Role.VIEWER)
