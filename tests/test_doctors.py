import pytest

from hospital.exceptions import NotFound
from hospital.models import Doctor


def test_save_and_find_doctor(service, doctor):
    assert service.get_doctor(doctor.id).email == "yassmine@hospital.local"
    assert service.find_doctor_by_name("Yassmine").id == doctor.id
    assert service.find_doctor_by_name("Aymane") is None


def test_update_doctor_overwrites(service, doctor):
    updated = service.save_doctor(Doctor(id=doctor.id, name="Yassmine", specialty="Dentiste"))
    assert updated.specialty == "Dentiste"
    assert updated.email is None
    assert [d.id for d in service.list_doctors()] == [doctor.id]


def test_update_unknown_doctor(service):
    with pytest.raises(NotFound):
        service.update_doctor(Doctor(id=31, name="Ghost"))


def test_delete_doctor_without_appointments(service, doctor):
    service.delete_doctor(doctor.id)
    assert service.get_doctor(doctor.id) is None
