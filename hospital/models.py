from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .status import INITIAL_STATUS, AppointmentStatus

# Gli id interi vengono dalla sequenza del DB (AUTOINCREMENT su SQLite: mai riutilizzati).
# L'id dell'appuntamento è invece un UUID generato dal servizio (vedi identity.py).


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sick: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # lazy: caricati solo se attraversati esplicitamente
    appointments: Mapped[list["Appointment"]] = relationship(
        back_populates="patient", cascade="all", lazy="select"
    )

    def __repr__(self) -> str:
        return f"Patient({self.id}, {self.name})"


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(120), nullable=True)
    specialty: Mapped[str | None] = mapped_column(String(120), nullable=True)

    appointments: Mapped[list["Appointment"]] = relationship(
        back_populates="doctor", cascade="all", lazy="select"
    )

    def __repr__(self) -> str:
        return f"Doctor({self.id}, {self.name}, {self.specialty})"


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    appointment_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus), default=INITIAL_STATUS, nullable=False
    )

    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id"), nullable=False, index=True)

    patient: Mapped["Patient"] = relationship(back_populates="appointments")
    doctor: Mapped["Doctor"] = relationship(back_populates="appointments", lazy="joined")
    consultation: Mapped[Optional["Consultation"]] = relationship(
        back_populates="appointment", uselist=False, cascade="all", lazy="joined"
    )

    def __repr__(self) -> str:
        return f"Appointment({self.id}, {self.status.value if self.status else None})"


class Consultation(Base):
    __tablename__ = "consultations"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consultation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    report: Mapped[str | None] = mapped_column(Text, nullable=True)

    # lato proprietario dell'uno-a-uno: al massimo una consultazione per appuntamento
    appointment_id: Mapped[str] = mapped_column(
        ForeignKey("appointments.id"), nullable=False, unique=True
    )

    appointment: Mapped["Appointment"] = relationship(back_populates="consultation")

    def __repr__(self) -> str:
        return f"Consultation({self.id}, appointment={self.appointment_id})"
