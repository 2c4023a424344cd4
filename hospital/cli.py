from __future__ import annotations

import argparse
import sys
from datetime import date, datetime

from hospital import config
from hospital.exceptions import HospitalError
from hospital.models import Appointment, Consultation, Doctor, Patient
from hospital.seed import seed_base
from hospital.services import HospitalService, init_db


def cmd_init(args: argparse.Namespace, service: HospitalService) -> None:
    init_db(reset=args.reset)
    if args.seed:
        seed_base(service)
    print("DB inizializzato" + (" e seed completato." if args.seed else "."))


def cmd_list(args: argparse.Namespace, service: HospitalService) -> None:
    if args.entity == "patients":
        for p in service.list_patients():
            nascita = p.birth_date.isoformat() if p.birth_date else "-"
            print(f"{p.id} | {p.name} | {nascita} | malato={p.sick} | score={p.score}")
    elif args.entity == "doctors":
        for d in service.list_doctors():
            print(f"{d.id} | {d.name} | {d.email or '-'} | {d.specialty or '-'}")
    elif args.entity == "appointments":
        for a in service.list_appointments():
            quando = a.appointment_date.isoformat() if a.appointment_date else "-"
            print(f"{a.id} | {quando} | {a.status.value} | medico={a.doctor.name}")
    elif args.entity == "consultations":
        for c in service.list_consultations():
            print(f"{c.id} | {c.consultation_date or '-'} | {c.report or ''}")


def cmd_add_patient(args: argparse.Namespace, service: HospitalService) -> None:
    birth = date.fromisoformat(args.birth_date) if args.birth_date else None
    p = service.save_patient(Patient(name=args.name, birth_date=birth, sick=args.sick, score=args.score))
    print(f"Paziente creato: {p.id}")


def cmd_add_doctor(args: argparse.Namespace, service: HospitalService) -> None:
    d = service.save_doctor(Doctor(name=args.name, email=args.email, specialty=args.specialty))
    print(f"Medico creato: {d.id}")


def cmd_book(args: argparse.Namespace, service: HospitalService) -> None:
    when = datetime.fromisoformat(args.date) if args.date else None  # formato: 2026-01-14T10:30
    a = service.save_appointment(
        Appointment(appointment_date=when, patient_id=args.patient_id, doctor_id=args.doctor_id)
    )
    print(f"Appuntamento ID: {a.id} ({a.status.value})")


def cmd_set_status(args: argparse.Namespace, service: HospitalService) -> None:
    a = service.change_appointment_status(args.appointment_id, args.status)
    print(f"Appuntamento {a.id}: {a.status.value}")


def cmd_consult(args: argparse.Namespace, service: HospitalService) -> None:
    day = date.fromisoformat(args.date) if args.date else date.today()
    c = service.save_consultation(
        Consultation(appointment_id=args.appointment_id, consultation_date=day, report=args.report)
    )
    print(f"Consultazione creata: {c.id}")


def cmd_delete_patient(args: argparse.Namespace, service: HospitalService) -> None:
    service.delete_patient(args.patient_id)
    print("Paziente cancellato.")


def cmd_serve(args: argparse.Namespace, service: HospitalService) -> None:
    import uvicorn

    uvicorn.run("hospital.api_main:app", host=args.host, port=args.port, reload=False)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hospital", description="CLI gestione ospedale")
    p.add_argument(
        "--delete-policy", choices=config.DELETE_POLICIES, default=None,
        help="Sovrascrive HOSPITAL_DELETE_POLICY",
    )
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Crea DB (ed eventualmente carica seed)")
    p_init.add_argument("--seed", action="store_true", help="Carica dati di esempio")
    p_init.add_argument("--reset", action="store_true", help="Ricrea lo schema: CANCELLA tutti i dati")
    p_init.set_defaults(func=cmd_init)

    p_list = sub.add_parser("list", help="Lista entità")
    p_list.add_argument("entity", choices=["patients", "doctors", "appointments", "consultations"])
    p_list.set_defaults(func=cmd_list)

    p_addp = sub.add_parser("add-patient", help="Crea paziente")
    p_addp.add_argument("--name", required=True)
    p_addp.add_argument("--birth-date", default=None, help="ISO date es: 1990-03-14")
    p_addp.add_argument("--sick", action="store_true")
    p_addp.add_argument("--score", type=int, default=0)
    p_addp.set_defaults(func=cmd_add_patient)

    p_addd = sub.add_parser("add-doctor", help="Crea medico")
    p_addd.add_argument("--name", required=True)
    p_addd.add_argument("--email", default=None)
    p_addd.add_argument("--specialty", default=None)
    p_addd.set_defaults(func=cmd_add_doctor)

    p_book = sub.add_parser("book", help="Crea appuntamento (PENDING)")
    p_book.add_argument("--patient-id", type=int, required=True)
    p_book.add_argument("--doctor-id", type=int, required=True)
    p_book.add_argument("--date", default=None, help="ISO datetime es: 2026-01-14T10:30")
    p_book.set_defaults(func=cmd_book)

    p_status = sub.add_parser("set-status", help="Cambia stato appuntamento")
    p_status.add_argument("--appointment-id", required=True)
    p_status.add_argument("--status", required=True, help="CANCELED | COMPLETED")
    p_status.set_defaults(func=cmd_set_status)

    p_cons = sub.add_parser("consult", help="Registra consultazione per un appuntamento")
    p_cons.add_argument("--appointment-id", required=True)
    p_cons.add_argument("--report", required=True)
    p_cons.add_argument("--date", default=None, help="ISO date, default oggi")
    p_cons.set_defaults(func=cmd_consult)

    p_del = sub.add_parser("delete-patient", help="Cancella paziente")
    p_del.add_argument("--patient-id", type=int, required=True)
    p_del.set_defaults(func=cmd_delete_patient)

    p_serve = sub.add_parser("serve", help="Avvia l'API HTTP")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.configure_logging()
    init_db()  # garantisce tabelle
    service = HospitalService(delete_policy=args.delete_policy)
    try:
        args.func(args, service)
    except HospitalError as e:
        print(f"Errore: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
