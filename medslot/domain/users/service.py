"""User service - Business logic for admin-managed user accounts"""

import logging

from sqlalchemy.orm import Session

from ...auth import Actor
from ...enums import UserRole
from ...exceptions import NotFoundError, ValidationError
from ...models import User
from ..doctors.repository import DoctorRepository
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()
        self.doctors = DoctorRepository()

    def get_users(self) -> list[User]:
        return self.repo.get_users(self.db)

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        """Create a patient, doctor or admin account"""
        logger.info(f"📥 Creating {data.role.value} user {data.email}")

        if self.repo.email_in_use(self.db, data.email):
            logger.warning(f"⚠️ Email already registered: {data.email}")
            raise ValidationError("Email already exists")

        user = self.repo.create_user(
            self.db, name=data.name, email=data.email, role=data.role, avatar=data.avatar
        )
        logger.info(f"✅ User {user.id} created")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Update a user. A user with a doctor profile keeps the doctor role;
        the profile is removed through the doctors endpoints.
        """
        user = self.get_user(user_id)

        if data.email is not None and self.repo.email_in_use(self.db, data.email, exclude_user_id=user.id):
            raise ValidationError("Email already exists")

        if (
            data.role is not None
            and data.role != UserRole.DOCTOR
            and user.doctor_profile is not None
        ):
            raise ValidationError("User has a doctor profile and must keep the doctor role")

        return self.repo.update_user(
            self.db,
            user,
            name=data.name,
            email=data.email,
            role=data.role,
            avatar=data.avatar,
        )

    def delete_user(self, actor: Actor, user_id: int) -> dict:
        """Delete a user; a doctor's profile goes with it, appointment history stays"""
        user = self.get_user(user_id)
        if user.id == actor.user_id:
            raise ValidationError("You cannot delete your own account")

        if user.doctor_profile is not None:
            self.doctors.delete_doctor(self.db, user.doctor_profile)
        else:
            self.repo.delete_user(self.db, user)

        logger.info(f"🗑️ User {user_id} deleted by admin {actor.user_id}")
        return {"message": "User deleted successfully"}
