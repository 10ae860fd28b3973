"""FastAPI dependencies for authentication and authorization.

Dependencies:
  get_permissions          → decode JWT, return the caller's PermissionSet
  require_permission(...)  → same, but 403 unless ALL listed perms are held
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from church_onboarding.auth.jwt import decode_token
from church_onboarding.auth.permissions import PermissionSet
from church_onboarding.errors import PermissionDeniedError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_permissions(token: str = Depends(oauth2_scheme)) -> PermissionSet:
    payload = decode_token(token)
    if not payload.get("sub") or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return PermissionSet.from_claims(payload)


def require_permission(*perms: str):
    """Dependency factory: restrict to callers who hold ALL listed permissions.

    Usage:
        @router.post("/")
        async def open_wizard(
            caller: PermissionSet = Depends(require_permission("organizations.create")),
        ):
            ...
    """
    async def _check(caller: PermissionSet = Depends(get_permissions)) -> PermissionSet:
        missing = caller.missing(*perms)
        if missing:
            raise PermissionDeniedError(f"Missing permissions: {', '.join(missing)}")
        return caller

    return _check
