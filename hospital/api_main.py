from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from hospital import config
from hospital.exceptions import HospitalError, NotFound
from hospital.schemas import (
    AppointmentIn,
    AppointmentOut,
    AppointmentStatusIn,
    ConsultationIn,
    ConsultationOut,
    DoctorIn,
    DoctorOut,
    PatientIn,
    PatientOut,
)
from hospital.seed import seed_base
from hospital.services import HospitalService, init_db

logger = logging.getLogger(__name__)

app = FastAPI(title="Hospital API", version="1.0.0")


@lru_cache()
def get_service() -> HospitalService:
    # creato al primo uso: la delete policy viene validata dopo configure_logging()
    return HospitalService()


# Startup

@app.on_event("startup")
def startup() -> None:
    config.configure_logging()
    service = get_service()
    if config.RESET_SCHEMA:
        logger.warning("HOSPITAL_RESET_SCHEMA attivo: lo schema viene ricreato e i dati persi")
    init_db(reset=config.RESET_SCHEMA)
    if config.SEED_ON_STARTUP:
        seed_base(service)


# Errori di dominio -> HTTP

@app.exception_handler(HospitalError)
async def hospital_error_handler(request: Request, exc: HospitalError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.kind, "detail": exc.message},
    )


def _require(entity: Any, message: str) -> Any:
    if entity is None:
        raise NotFound(message)
    return entity


@app.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True}


# PAZIENTI

@app.get("/patients", response_model=list[PatientOut])
def api_patients(service: HospitalService = Depends(get_service)) -> list[PatientOut]:
    return [PatientOut.model_validate(p) for p in service.list_patients()]


@app.get("/patient/{patient_id}", response_model=PatientOut)
def api_patient(patient_id: int, service: HospitalService = Depends(get_service)) -> PatientOut:
    p = _require(service.get_patient(patient_id), f"Paziente non trovato: {patient_id}")
    return PatientOut.model_validate(p)


@app.post("/addPatient", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
def api_add_patient(payload: PatientIn, service: HospitalService = Depends(get_service)) -> PatientOut:
    return PatientOut.model_validate(service.save_patient(payload.to_entity()))


@app.get("/searchPatient", response_model=PatientOut | None)
def api_search_patient(
    nom: str = Query(..., min_length=1),
    service: HospitalService = Depends(get_service),
) -> PatientOut | None:
    p = service.find_patient_by_name(nom)
    return PatientOut.model_validate(p) if p else None


@app.put("/updatePatient/{patient_id}", response_model=PatientOut)
def api_update_patient(
    patient_id: int, payload: PatientIn, service: HospitalService = Depends(get_service)
) -> PatientOut:
    return PatientOut.model_validate(service.update_patient(payload.to_entity(patient_id)))


@app.delete("/delete/{patient_id}")
def api_delete_patient(patient_id: int, service: HospitalService = Depends(get_service)) -> dict[str, Any]:
    service.delete_patient(patient_id)
    return {"ok": True, "patient_id": patient_id}


@app.get("/patient/{patient_id}/appointments", response_model=list[AppointmentOut])
def api_patient_appointments(
    patient_id: int, service: HospitalService = Depends(get_service)
) -> list[AppointmentOut]:
    return [AppointmentOut.model_validate(a) for a in service.list_patient_appointments(patient_id)]


# MEDICI

@app.get("/doctors", response_model=list[DoctorOut])
def api_doctors(service: HospitalService = Depends(get_service)) -> list[DoctorOut]:
    return [DoctorOut.model_validate(d) for d in service.list_doctors()]


@app.get("/doctor/{doctor_id}", response_model=DoctorOut)
def api_doctor(doctor_id: int, service: HospitalService = Depends(get_service)) -> DoctorOut:
    d = _require(service.get_doctor(doctor_id), f"Medico non trovato: {doctor_id}")
    return DoctorOut.model_validate(d)


@app.post("/addDoctor", response_model=DoctorOut, status_code=status.HTTP_201_CREATED)
def api_add_doctor(payload: DoctorIn, service: HospitalService = Depends(get_service)) -> DoctorOut:
    return DoctorOut.model_validate(service.save_doctor(payload.to_entity()))


@app.delete("/deleteDoctor/{doctor_id}")
def api_delete_doctor(doctor_id: int, service: HospitalService = Depends(get_service)) -> dict[str, Any]:
    service.delete_doctor(doctor_id)
    return {"ok": True, "doctor_id": doctor_id}


# APPUNTAMENTI

@app.get("/appointments", response_model=list[AppointmentOut])
def api_appointments(service: HospitalService = Depends(get_service)) -> list[AppointmentOut]:
    return [AppointmentOut.model_validate(a) for a in service.list_appointments()]


@app.get("/appointment/{appointment_id}", response_model=AppointmentOut)
def api_appointment(appointment_id: str, service: HospitalService = Depends(get_service)) -> AppointmentOut:
    a = _require(service.get_appointment(appointment_id), f"Appuntamento non trovato: {appointment_id}")
    return AppointmentOut.model_validate(a)


@app.post("/addAppointment", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def api_add_appointment(payload: AppointmentIn, service: HospitalService = Depends(get_service)) -> AppointmentOut:
    return AppointmentOut.model_validate(service.save_appointment(payload.to_entity()))


@app.put("/appointment/{appointment_id}/status", response_model=AppointmentOut)
def api_appointment_status(
    appointment_id: str, payload: AppointmentStatusIn, service: HospitalService = Depends(get_service)
) -> AppointmentOut:
    return AppointmentOut.model_validate(service.change_appointment_status(appointment_id, payload.status))


# CONSULTAZIONI

@app.get("/consultations", response_model=list[ConsultationOut])
def api_consultations(service: HospitalService = Depends(get_service)) -> list[ConsultationOut]:
    return [ConsultationOut.model_validate(c) for c in service.list_consultations()]


@app.post("/addConsultation", response_model=ConsultationOut, status_code=status.HTTP_201_CREATED)
def api_add_consultation(
    payload: ConsultationIn, service: HospitalService = Depends(get_service)
) -> ConsultationOut:
    return ConsultationOut.model_validate(service.save_consultation(payload.to_entity()))
