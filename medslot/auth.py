import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .enums import UserRole
from .models import Doctor, User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller: the user row, its role and, for doctors, their profile"""

    user: User
    role: UserRole
    doctor: Optional[Doctor] = None

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def doctor_id(self) -> Optional[int]:
        return self.doctor.id if self.doctor else None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer token"""

    if not credentials:
        logger.warning("⚠️ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = verify_jwt_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from None

    user = (
        db.query(User)
        .filter(User.id == user_id)
        .options(joinedload(User.doctor_profile))
        .first()
    )
    if not user:
        logger.warning(f"⚠️ Token subject {user_id} does not match any user")
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """Resolve the caller's role; doctors also get their doctor profile attached"""
    role = UserRole(user.role)
    doctor = user.doctor_profile if role == UserRole.DOCTOR else None
    return Actor(user=user, role=role, doctor=doctor)


def require_roles(*roles: UserRole):
    """
    Create a dependency that only lets the given roles through

    Example usage:
        @router.post("", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """

    async def role_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            logger.warning(
                f"🚫 User {actor.user_id} with role {actor.role.value} denied, requires {[r.value for r in roles]}"
            )
            raise HTTPException(status_code=403, detail="Access denied")
        return actor

    return role_checker
