import os

# DB in memoria prima di qualsiasi import del pacchetto
os.environ["HOSPITAL_DATABASE_URL"] = "sqlite://"
os.environ["HOSPITAL_DELETE_POLICY"] = "conflict"

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from hospital.api_main import app, get_service
from hospital.db import create_db_engine, create_session_factory
from hospital.models import Appointment, Doctor, Patient
from hospital.services import HospitalService, init_db


@pytest.fixture
def engine():
    eng = create_db_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def service(session_factory):
    return HospitalService(session_factory=session_factory, delete_policy="conflict")


@pytest.fixture
def cascade_service(session_factory):
    return HospitalService(session_factory=session_factory, delete_policy="cascade")


@pytest.fixture
def patient(service):
    return service.save_patient(Patient(name="Mohamed", birth_date=date(1990, 3, 14), sick=False, score=100))


@pytest.fixture
def doctor(service):
    return service.save_doctor(Doctor(name="Yassmine", email="yassmine@hospital.local", specialty="Cardio"))


@pytest.fixture
def appointment(service, patient, doctor):
    return service.save_appointment(
        Appointment(appointment_date=datetime(2026, 1, 14, 10, 30), patient_id=patient.id, doctor_id=doctor.id)
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
