from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from .models import Appointment, Consultation, Doctor, Patient

T = TypeVar("T", Patient, Doctor, Appointment, Consultation)


class Repository(Generic[T]):
    """
    Contratto di persistenza per entità, su una Session già aperta.
    Non fa commit: la transazione appartiene a chi ha aperto la sessione.
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def _ordering(self) -> Any:
        return self.model.id.asc()

    def save(self, entity: T) -> T:
        self.session.add(entity)
        # flush: popola l'id assegnato dal DB
        self.session.flush()
        return entity

    def find_by_id(self, entity_id: Any) -> T | None:
        if entity_id is None:
            return None
        return self.session.get(self.model, entity_id)

    def find_all(self) -> list[T]:
        return list(self.session.scalars(select(self.model).order_by(self._ordering())).unique())

    def exists_by_id(self, entity_id: Any) -> bool:
        if entity_id is None:
            return False
        return bool(self.session.scalar(select(exists().where(self.model.id == entity_id))))

    def delete_by_id(self, entity_id: Any) -> None:
        entity = self.find_by_id(entity_id)
        if entity is not None:
            self.session.delete(entity)
            self.session.flush()


class PatientRepository(Repository[Patient]):
    model = Patient

    def find_by_name(self, name: str) -> Patient | None:
        # più omonimi: vince l'id più basso
        q = select(Patient).where(Patient.name == name).order_by(Patient.id.asc()).limit(1)
        return self.session.scalars(q).first()


class DoctorRepository(Repository[Doctor]):
    model = Doctor

    def find_by_name(self, name: str) -> Doctor | None:
        q = select(Doctor).where(Doctor.name == name).order_by(Doctor.id.asc()).limit(1)
        return self.session.scalars(q).first()


class AppointmentRepository(Repository[Appointment]):
    model = Appointment

    def _ordering(self) -> Any:
        return Appointment.appointment_date.asc()

    def find_by_patient(self, patient_id: int) -> list[Appointment]:
        q = (
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_date.asc())
        )
        return list(self.session.scalars(q).unique())

    def exists_for_patient(self, patient_id: int) -> bool:
        return bool(self.session.scalar(select(exists().where(Appointment.patient_id == patient_id))))

    def exists_for_doctor(self, doctor_id: int) -> bool:
        return bool(self.session.scalar(select(exists().where(Appointment.doctor_id == doctor_id))))


class ConsultationRepository(Repository[Consultation]):
    model = Consultation

    def find_by_appointment(self, appointment_id: str) -> Consultation | None:
        q = select(Consultation).where(Consultation.appointment_id == appointment_id)
        return self.session.scalars(q).first()
