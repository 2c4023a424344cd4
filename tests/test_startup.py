import pytest

from hospital import api_main, config
from hospital.services import init_db


def test_init_db_keeps_existing_data(engine, service, patient):
    init_db(bind=engine)
    assert service.get_patient(patient.id) is not None


def test_init_db_reset_drops_existing_data(engine, service, patient, appointment):
    init_db(bind=engine, reset=True)
    assert service.list_patients() == []
    assert service.list_appointments() == []


def test_startup_applies_reset_schema_flag(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "RESET_SCHEMA", True)
    monkeypatch.setattr(config, "SEED_ON_STARTUP", False)
    monkeypatch.setattr(api_main, "init_db", lambda reset=False: calls.append(reset))

    api_main.startup()

    assert calls == [True]


def test_service_is_built_on_first_use(monkeypatch):
    api_main.get_service.cache_clear()
    monkeypatch.setattr(config, "DELETE_POLICY", "orphan")
    try:
        with pytest.raises(ValueError):
            api_main.get_service()
    finally:
        api_main.get_service.cache_clear()
