from __future__ import annotations

import enum

from .exceptions import InvalidStatus


class AppointmentStatus(enum.Enum):
    PENDING = "PENDING"
    CANCELED = "CANCELED"
    COMPLETED = "COMPLETED"


# stati terminali: nessuna transizione in uscita
TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CANCELED, AppointmentStatus.COMPLETED}),
    AppointmentStatus.CANCELED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
}

INITIAL_STATUS = AppointmentStatus.PENDING


def is_terminal(status: AppointmentStatus) -> bool:
    return not TRANSITIONS[status]


def parse_status(value: AppointmentStatus | str) -> AppointmentStatus:
    if isinstance(value, AppointmentStatus):
        return value
    if isinstance(value, str):
        try:
            return AppointmentStatus[value.strip().upper()]
        except KeyError:
            pass
    allowed = ", ".join(s.value for s in AppointmentStatus)
    raise InvalidStatus(f"Stato non valido: {value!r}. Valori ammessi: {allowed}")


def check_transition(current: AppointmentStatus, target: AppointmentStatus | str) -> AppointmentStatus:
    """
    Valida current -> target e ritorna lo stato di destinazione.
    Riaffermare lo stato corrente non è una transizione ed è sempre ammesso.
    """
    target = parse_status(target)
    if target is current or target in TRANSITIONS[current]:
        return target
    raise InvalidStatus(f"Transizione non ammessa: {current.value} -> {target.value}")
