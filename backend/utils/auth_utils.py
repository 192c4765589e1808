import logging
import os
from typing import Any, Callable, Dict

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from utils.permissions import Capability, has_capability
from utils.tenancy import get_tenant_id

load_dotenv()

logger = logging.getLogger(__name__)

# Tokens are issued by the auth service that owns login; this backend only
# verifies them with the shared secret.
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to validate the bearer JWT from the Authorization header.

    The decoded claims are returned as-is. Claims used by this service:
    ``sub`` / ``email`` (who), ``role``, ``vendor_id`` and, for society
    admins, ``society_id``.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    token = parts[1]
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )


def get_user_identifier(user: Dict[str, Any]) -> str:
    return str(user.get("email") or user.get("sub") or "unknown")


def require_permission(*capabilities: Capability) -> Callable[..., Dict[str, Any]]:
    """Dependency factory: the caller must hold one of ``capabilities`` and belong to the tenant."""

    def dependency(
        user: Dict[str, Any] = Depends(get_current_user),
        tenant_id: str = Depends(get_tenant_id),
    ) -> Dict[str, Any]:
        role = user.get("role")
        if not has_capability(role, *capabilities):
            logger.warning(f"User {get_user_identifier(user)} with role '{role}' denied {[c.value for c in capabilities]}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

        vendor_id = user.get("vendor_id")
        if vendor_id is not None and str(vendor_id) != tenant_id:
            logger.warning(f"User {get_user_identifier(user)} of vendor {vendor_id} tried to access tenant {tenant_id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied for this tenant")
        return user

    return dependency
