"""User router - FastAPI endpoints for admin account management"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Actor, require_roles
from ...database import get_db
from ...enums import UserRole
from ...models import User
from .schemas import UserCreate, UserResponse, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

admin_only = [Depends(require_roles(UserRole.ADMIN))]


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        avatar=user.avatar,
        doctorId=user.doctor_profile.id if user.doctor_profile else None,
        created_at=user.created_at,
    )


@router.get("", response_model=list[UserResponse], dependencies=admin_only)
async def get_users(service: UserService = Depends(get_user_service)):
    """Get all users, newest first (admin only)"""
    return [to_response(u) for u in service.get_users()]


@router.get("/{user_id}", response_model=UserResponse, dependencies=admin_only)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return to_response(service.get_user(user_id))


@router.post("", response_model=UserResponse, status_code=201, dependencies=admin_only)
async def create_user(data: UserCreate, service: UserService = Depends(get_user_service)):
    """Create a user (admin only)"""
    return to_response(service.create_user(data))


@router.put("/{user_id}", response_model=UserResponse, dependencies=admin_only)
async def update_user(
    user_id: int, data: UserUpdate, service: UserService = Depends(get_user_service)
):
    """Update a user (admin only)"""
    return to_response(service.update_user(user_id, data))


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    """Delete a user (admin only)"""
    return service.delete_user(actor, user_id)
