"""Doctor repository - Database operations for doctors"""

from typing import Optional

from sqlalchemy.orm import Session

from ...enums import Specialization, UserRole
from ...models import Appointment, Doctor, User


class DoctorRepository:
    """Repository for doctor database operations"""

    @staticmethod
    def get_doctors(db: Session, specialization: Optional[Specialization] = None) -> list[Doctor]:
        """Get all doctors sorted by name"""
        query = db.query(Doctor)

        if specialization:
            query = query.filter(Doctor.specialization == specialization)

        return query.order_by(Doctor.name.asc()).all()

    @staticmethod
    def get_doctor_by_id(db: Session, doctor_id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.id == doctor_id).first()

    @staticmethod
    def get_doctor_for_update(db: Session, doctor_id: int) -> Optional[Doctor]:
        """Get a doctor and hold a row lock on it until the transaction ends"""
        return (
            db.query(Doctor)
            .filter(Doctor.id == doctor_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    @staticmethod
    def get_doctor_by_user_id(db: Session, user_id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.user_id == user_id).first()

    @staticmethod
    def email_in_use(db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email).first() is not None

    @staticmethod
    def create_doctor(db: Session, *, name: str, email: str, avatar: Optional[str], **doctor_data) -> Doctor:
        """Create the doctor's user account and profile in one transaction"""
        user = User(name=name, email=email, role=UserRole.DOCTOR, avatar=avatar)
        db.add(user)
        db.flush()

        doctor = Doctor(user_id=user.id, name=name, email=email, avatar=avatar, **doctor_data)
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def update_doctor(db: Session, doctor: Doctor, **updates) -> Doctor:
        """Update a doctor with provided fields, keeping the linked user's name in step"""
        for key, value in updates.items():
            if value is not None and hasattr(doctor, key):
                setattr(doctor, key, value)

        if doctor.user is not None:
            if updates.get("name") is not None:
                doctor.user.name = updates["name"]
            if "avatar" in updates:
                doctor.user.avatar = updates["avatar"]

        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def delete_doctor(db: Session, doctor: Doctor) -> None:
        """
        Delete a doctor and their user account.
        Appointments stay, keeping their name/specialization snapshots.
        """
        db.query(Appointment).filter(Appointment.doctor_id == doctor.id).update(
            {Appointment.doctor_id: None}, synchronize_session=False
        )
        user = doctor.user
        db.delete(doctor)
        if user is not None:
            db.delete(user)
        db.commit()
