from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Appointment


def new_uuid() -> str:
    return str(uuid.uuid4())


def assign_appointment_id(appointment: "Appointment") -> "Appointment":
    """
    Assegna all'appuntamento un token UUID4 generato localmente.
    Nessun contatore condiviso: sicuro anche con creazioni concorrenti.
    Gli id di Patient/Doctor/Consultation invece arrivano dalla sequenza del DB.
    """
    appointment.id = new_uuid()
    return appointment
