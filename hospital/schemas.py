from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import Appointment, Consultation, Doctor, Patient
from .status import AppointmentStatus

# Rappresentazione esterna, separata dai modelli ORM.
# I riferimenti "write-only" (Doctor.appointments, Appointment.patient,
# Consultation.appointment) entrano come id in input e non escono mai in output.


class _OrmOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# =========================
# Pazienti
# =========================
class PatientIn(BaseModel):
    name: str = Field(..., min_length=1)
    birth_date: date | None = None
    sick: bool = False
    score: int = 0

    def to_entity(self, patient_id: int | None = None) -> Patient:
        return Patient(id=patient_id, **self.model_dump())


class PatientOut(_OrmOut):
    id: int
    name: str
    birth_date: date | None = None
    sick: bool
    score: int


# =========================
# Medici
# =========================
class DoctorIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: str | None = None
    specialty: str | None = None

    def to_entity(self, doctor_id: int | None = None) -> Doctor:
        return Doctor(id=doctor_id, **self.model_dump())


class DoctorOut(_OrmOut):
    id: int
    name: str
    email: str | None = None
    specialty: str | None = None


# =========================
# Consultazioni
# =========================
class ConsultationIn(BaseModel):
    appointment_id: str
    consultation_date: date | None = None
    report: str | None = None

    def to_entity(self) -> Consultation:
        return Consultation(**self.model_dump())


class ConsultationOut(_OrmOut):
    id: int
    consultation_date: date | None = None
    report: str | None = None


# =========================
# Appuntamenti
# =========================
class AppointmentIn(BaseModel):
    patient_id: int
    doctor_id: int
    appointment_date: datetime | None = None
    # stringa libera: la validazione è del servizio (InvalidStatus, non 422)
    status: str | None = None

    def to_entity(self) -> Appointment:
        return Appointment(**self.model_dump())


class AppointmentStatusIn(BaseModel):
    status: str


class AppointmentOut(_OrmOut):
    id: str
    appointment_date: datetime | None = None
    status: AppointmentStatus
    doctor: DoctorOut
    consultation: ConsultationOut | None = None
