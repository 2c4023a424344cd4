from __future__ import annotations


class HospitalError(Exception):
    """Errore di dominio tipizzato; status_code è usato dal layer HTTP."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(HospitalError):
    status_code = 404
    kind = "not_found"


class ReferenceNotFound(HospitalError):
    """Paziente/medico/appuntamento referenziato inesistente."""

    status_code = 400
    kind = "reference_not_found"


class DuplicateLink(HospitalError):
    """Seconda consultazione per lo stesso appuntamento."""

    status_code = 409
    kind = "duplicate_link"


class InvalidStatus(HospitalError):
    status_code = 400
    kind = "invalid_status"


class Conflict(HospitalError):
    """Cancellazione rifiutata: esistono record dipendenti."""

    status_code = 409
    kind = "conflict"
