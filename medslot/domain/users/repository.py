"""User repository - Database operations for user accounts"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_users(db: Session) -> list[User]:
        """Get all users, newest first"""
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def email_in_use(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
        query = db.query(User.id).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields, keeping a linked doctor profile in step"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        doctor = user.doctor_profile
        if doctor is not None:
            for key in ("name", "email", "avatar"):
                if updates.get(key) is not None:
                    setattr(doctor, key, updates[key])

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """
        Delete a user account.
        Their appointments stay, keeping the patient name snapshot.
        """
        db.query(Appointment).filter(Appointment.patient_id == user.id).update(
            {Appointment.patient_id: None}, synchronize_session=False
        )
        db.delete(user)
        db.commit()
