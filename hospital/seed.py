from __future__ import annotations

from datetime import date, datetime, timedelta

from .models import Appointment, Consultation, Doctor, Patient
from .services import HospitalService


def seed_base(service: HospitalService | None = None) -> None:
    """
    Popola dati minimi (idempotente, controllo per nome):
    - pazienti
    - medici (un appuntamento PENDING per paziente, a rotazione)
    - una consultazione per appuntamento
    """
    service = service or HospitalService()

    pazienti = [
        ("Mohamed", date(1990, 3, 14)),
        ("Hassan", date(1985, 7, 2)),
        ("Najat", date(1998, 11, 23)),
    ]
    medici = [
        ("Aymane", "aymane@hospital.local", "Cardio"),
        ("Hanane", "hanane@hospital.local", "Dentiste"),
        ("Yassmine", "yassmine@hospital.local", "Cardio"),
    ]

    patients: list[Patient] = []
    for nome, nascita in pazienti:
        p = service.find_patient_by_name(nome)
        if p is None:
            p = service.save_patient(Patient(name=nome, birth_date=nascita, sick=False, score=100))
            patients.append(p)

    doctors: list[Doctor] = []
    for nome, email, spec in medici:
        d = service.find_doctor_by_name(nome)
        if d is None:
            d = service.save_doctor(Doctor(name=nome, email=email, specialty=spec))
        doctors.append(d)

    # appuntamenti solo per i pazienti appena creati
    start = datetime.combine(date.today() + timedelta(days=1), datetime.min.time()).replace(hour=9)
    for i, p in enumerate(patients):
        app = service.save_appointment(
            Appointment(
                appointment_date=start + timedelta(hours=i),
                patient_id=p.id,
                doctor_id=doctors[i % len(doctors)].id,
            )
        )
        service.save_consultation(
            Consultation(
                appointment_id=app.id,
                consultation_date=app.appointment_date.date(),
                report="Rapport de la consultation ...",
            )
        )
