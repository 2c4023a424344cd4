from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from . import config
from .db import Base, SessionLocal, db_session, engine
from .exceptions import Conflict, DuplicateLink, InvalidStatus, NotFound, ReferenceNotFound
from .identity import assign_appointment_id
from .models import Appointment, Consultation, Doctor, Patient
from .repositories import (
    AppointmentRepository,
    ConsultationRepository,
    DoctorRepository,
    PatientRepository,
)
from .status import INITIAL_STATUS, AppointmentStatus, check_transition, parse_status

logger = logging.getLogger(__name__)

PATIENT_FIELDS = ("name", "birth_date", "sick", "score")
DOCTOR_FIELDS = ("name", "email", "specialty")


# =========================
# Bootstrap DB
# =========================
def init_db(bind: Engine | None = None, reset: bool = False) -> None:
    """Crea le tabelle se non esistono. Con reset=True le ricrea da zero (distruttivo)."""
    bind = bind or engine
    if reset:
        logger.warning("Reset dello schema: drop di tutte le tabelle su %s", bind.url)
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)


# =========================
# Helper
# =========================
def _column_default(model: type[Base], name: str) -> Any:
    default = model.__table__.c[name].default
    if default is not None and default.is_scalar:
        return default.arg
    return None


def _overwrite(target: Base, source: Base, fields: tuple[str, ...]) -> None:
    """Sovrascrittura completa: i campi mancanti tornano al default di colonna."""
    for name in fields:
        value = getattr(source, name)
        if value is None:
            value = _column_default(type(target), name)
        setattr(target, name, value)


def _reference_id(entity: Base, fk_attr: str, rel_attr: str) -> Any:
    value = getattr(entity, fk_attr)
    if value is None:
        related = getattr(entity, rel_attr)
        if related is not None:
            value = related.id
    return value


# =========================
# Servizio di dominio
# =========================
class HospitalService:
    """
    Facciata usata dal layer HTTP e dalla CLI.
    Ogni operazione gira in una sola unità di lavoro (db_session): tutto o niente.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        delete_policy: str | None = None,
    ):
        policy = (delete_policy or config.DELETE_POLICY).strip().lower()
        if policy not in config.DELETE_POLICIES:
            raise ValueError(f"Delete policy non valida: {policy!r} (ammesse: {config.DELETE_POLICIES})")
        self.session_factory = session_factory or SessionLocal
        self.delete_policy = policy

    def _session(self) -> AbstractContextManager[Session]:
        return db_session(self.session_factory)

    def save(self, entity: Patient | Doctor | Appointment | Consultation):
        handlers: dict[type, Callable[[Any], Any]] = {
            Patient: self.save_patient,
            Doctor: self.save_doctor,
            Appointment: self.save_appointment,
            Consultation: self.save_consultation,
        }
        handler = handlers.get(type(entity))
        if handler is None:
            raise TypeError(f"Entità non supportata: {type(entity).__name__}")
        return handler(entity)

    # -------------------------
    # Pazienti
    # -------------------------
    def save_patient(self, patient: Patient) -> Patient:
        """
        Inserisce (id assente) o sovrascrive un paziente esistente.
        Un id sconosciuto non crea un nuovo record: gli id li assegna solo il DB (NotFound).
        """
        if patient.id is not None:
            return self.update_patient(patient)
        with self._session() as s:
            stored = Patient()
            _overwrite(stored, patient, PATIENT_FIELDS)
            PatientRepository(s).save(stored)
            logger.info("Paziente creato: id=%s name=%s", stored.id, stored.name)
            return stored

    def list_patients(self) -> list[Patient]:
        with self._session() as s:
            return PatientRepository(s).find_all()

    def get_patient(self, patient_id: int) -> Patient | None:
        with self._session() as s:
            return PatientRepository(s).find_by_id(patient_id)

    def find_patient_by_name(self, name: str) -> Patient | None:
        with self._session() as s:
            return PatientRepository(s).find_by_name(name)

    def update_patient(self, patient: Patient) -> Patient:
        if patient.id is None:
            raise NotFound("Paziente senza id: impossibile aggiornare")
        with self._session() as s:
            stored = PatientRepository(s).find_by_id(patient.id)
            if stored is None:
                raise NotFound(f"Paziente non trovato: {patient.id}")
            _overwrite(stored, patient, PATIENT_FIELDS)
            s.flush()
            return stored

    def delete_patient(self, patient_id: int) -> None:
        with self._session() as s:
            patients = PatientRepository(s)
            if not patients.exists_by_id(patient_id):
                raise NotFound(f"Paziente non trovato: {patient_id}")
            if self.delete_policy == "conflict" and AppointmentRepository(s).exists_for_patient(patient_id):
                logger.warning("Cancellazione paziente %s rifiutata: appuntamenti collegati", patient_id)
                raise Conflict(f"Il paziente {patient_id} ha appuntamenti collegati")
            # policy cascade: appuntamenti e consultazioni vanno via con il paziente
            patients.delete_by_id(patient_id)
            logger.info("Paziente cancellato: id=%s (policy=%s)", patient_id, self.delete_policy)

    def list_patient_appointments(self, patient_id: int) -> list[Appointment]:
        with self._session() as s:
            if not PatientRepository(s).exists_by_id(patient_id):
                raise NotFound(f"Paziente non trovato: {patient_id}")
            return AppointmentRepository(s).find_by_patient(patient_id)

    # -------------------------
    # Medici
    # -------------------------
    def save_doctor(self, doctor: Doctor) -> Doctor:
        """Come save_patient: id sconosciuto -> NotFound, mai inserito con id scelto dal chiamante."""
        if doctor.id is not None:
            return self.update_doctor(doctor)
        with self._session() as s:
            stored = Doctor()
            _overwrite(stored, doctor, DOCTOR_FIELDS)
            DoctorRepository(s).save(stored)
            logger.info("Medico creato: id=%s name=%s", stored.id, stored.name)
            return stored

    def list_doctors(self) -> list[Doctor]:
        with self._session() as s:
            return DoctorRepository(s).find_all()

    def get_doctor(self, doctor_id: int) -> Doctor | None:
        with self._session() as s:
            return DoctorRepository(s).find_by_id(doctor_id)

    def find_doctor_by_name(self, name: str) -> Doctor | None:
        with self._session() as s:
            return DoctorRepository(s).find_by_name(name)

    def update_doctor(self, doctor: Doctor) -> Doctor:
        if doctor.id is None:
            raise NotFound("Medico senza id: impossibile aggiornare")
        with self._session() as s:
            stored = DoctorRepository(s).find_by_id(doctor.id)
            if stored is None:
                raise NotFound(f"Medico non trovato: {doctor.id}")
            _overwrite(stored, doctor, DOCTOR_FIELDS)
            s.flush()
            return stored

    def delete_doctor(self, doctor_id: int) -> None:
        with self._session() as s:
            doctors = DoctorRepository(s)
            if not doctors.exists_by_id(doctor_id):
                raise NotFound(f"Medico non trovato: {doctor_id}")
            if self.delete_policy == "conflict" and AppointmentRepository(s).exists_for_doctor(doctor_id):
                logger.warning("Cancellazione medico %s rifiutata: appuntamenti collegati", doctor_id)
                raise Conflict(f"Il medico {doctor_id} ha appuntamenti collegati")
            doctors.delete_by_id(doctor_id)
            logger.info("Medico cancellato: id=%s (policy=%s)", doctor_id, self.delete_policy)

    # -------------------------
    # Appuntamenti
    # -------------------------
    def _resolve_references(
        self, s: Session, appointment: Appointment, current: Appointment | None = None
    ) -> tuple[Patient, Doctor]:
        """
        Il paziente e il medico devono esistere già.
        In aggiornamento un riferimento mancante lascia quello attuale.
        """
        patient_id = _reference_id(appointment, "patient_id", "patient")
        doctor_id = _reference_id(appointment, "doctor_id", "doctor")
        if current is not None:
            patient_id = current.patient_id if patient_id is None else patient_id
            doctor_id = current.doctor_id if doctor_id is None else doctor_id

        patient = PatientRepository(s).find_by_id(patient_id)
        if patient is None:
            raise ReferenceNotFound(f"Paziente inesistente: {patient_id}")
        doctor = DoctorRepository(s).find_by_id(doctor_id)
        if doctor is None:
            raise ReferenceNotFound(f"Medico inesistente: {doctor_id}")
        return patient, doctor

    def save_appointment(self, appointment: Appointment) -> Appointment:
        """
        Creazione (id assente): nuovo id UUID, riferimenti validati, stato PENDING.
        Aggiornamento (id presente): l'id non viene mai rigenerato, lo stato segue
        la tabella delle transizioni.
        """
        if appointment.id is not None:
            return self._update_appointment(appointment)

        with self._session() as s:
            patient, doctor = self._resolve_references(s, appointment)

            status = INITIAL_STATUS if appointment.status is None else parse_status(appointment.status)
            if status is not INITIAL_STATUS:
                raise InvalidStatus(f"Un appuntamento nasce {INITIAL_STATUS.value}, non {status.value}")

            stored = assign_appointment_id(
                Appointment(
                    appointment_date=appointment.appointment_date,
                    status=status,
                    patient=patient,
                    doctor=doctor,
                    consultation=None,
                )
            )
            AppointmentRepository(s).save(stored)
            logger.info(
                "Appuntamento creato: id=%s patient=%s doctor=%s", stored.id, patient.id, doctor.id
            )
            return stored

    def _update_appointment(self, appointment: Appointment) -> Appointment:
        with self._session() as s:
            stored = AppointmentRepository(s).find_by_id(appointment.id)
            if stored is None:
                raise NotFound(f"Appuntamento non trovato: {appointment.id}")

            patient, doctor = self._resolve_references(s, appointment, current=stored)
            if appointment.status is not None:
                stored.status = check_transition(stored.status, appointment.status)
            if appointment.appointment_date is not None:
                stored.appointment_date = appointment.appointment_date
            stored.patient = patient
            stored.doctor = doctor
            s.flush()
            return stored

    def list_appointments(self) -> list[Appointment]:
        with self._session() as s:
            return AppointmentRepository(s).find_all()

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        with self._session() as s:
            return AppointmentRepository(s).find_by_id(appointment_id)

    def change_appointment_status(self, appointment_id: str, status: AppointmentStatus | str) -> Appointment:
        with self._session() as s:
            stored = AppointmentRepository(s).find_by_id(appointment_id)
            if stored is None:
                raise NotFound(f"Appuntamento non trovato: {appointment_id}")
            previous = stored.status
            stored.status = check_transition(previous, status)
            s.flush()
            logger.info("Appuntamento %s: %s -> %s", stored.id, previous.value, stored.status.value)
            return stored

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        return self.change_appointment_status(appointment_id, AppointmentStatus.CANCELED)

    def complete_appointment(self, appointment_id: str) -> Appointment:
        return self.change_appointment_status(appointment_id, AppointmentStatus.COMPLETED)

    # -------------------------
    # Consultazioni
    # -------------------------
    def save_consultation(self, consultation: Consultation) -> Consultation:
        with self._session() as s:
            consultations = ConsultationRepository(s)
            appointment_id = _reference_id(consultation, "appointment_id", "appointment")

            if consultation.id is not None:
                stored = consultations.find_by_id(consultation.id)
                if stored is None:
                    raise NotFound(f"Consultazione non trovata: {consultation.id}")
                if appointment_id is None:
                    appointment_id = stored.appointment_id
            else:
                stored = None

            appointment = AppointmentRepository(s).find_by_id(appointment_id)
            if appointment is None:
                raise ReferenceNotFound(f"Appuntamento inesistente: {appointment_id}")
            appointment_id = appointment.id

            linked = consultations.find_by_appointment(appointment_id)
            if linked is not None and (stored is None or linked.id != stored.id):
                logger.warning("Consultazione duplicata rifiutata per appuntamento %s", appointment_id)
                raise DuplicateLink(f"L'appuntamento {appointment_id} ha già una consultazione")

            if stored is None:
                stored = Consultation(appointment=appointment)
            else:
                stored.appointment = appointment
            stored.consultation_date = consultation.consultation_date
            stored.report = consultation.report

            try:
                consultations.save(stored)
            except IntegrityError as exc:
                # vincolo unique violato da una scrittura concorrente: sessione in rollback,
                # niente accessi ad attributi ORM qui
                raise DuplicateLink(f"L'appuntamento {appointment_id} ha già una consultazione") from exc
            logger.info("Consultazione salvata: id=%s appointment=%s", stored.id, appointment_id)
            return stored

    def list_consultations(self) -> list[Consultation]:
        with self._session() as s:
            return ConsultationRepository(s).find_all()

    def get_consultation(self, consultation_id: int) -> Consultation | None:
        with self._session() as s:
            return ConsultationRepository(s).find_by_id(consultation_id)
