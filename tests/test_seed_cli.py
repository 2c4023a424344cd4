import pytest

from hospital import cli
from hospital.seed import seed_base


def test_seed_is_idempotent(service):
    seed_base(service)
    seed_base(service)

    assert [p.name for p in service.list_patients()] == ["Mohamed", "Hassan", "Najat"]
    assert len(service.list_doctors()) == 3
    assert len(service.list_appointments()) == 3
    assert len(service.list_consultations()) == 3


@pytest.fixture
def run_cli(service, monkeypatch, capsys):
    monkeypatch.setattr(cli, "init_db", lambda reset=False: None)
    monkeypatch.setattr(cli, "HospitalService", lambda delete_policy=None: service)

    def run(*argv):
        code = cli.main(list(argv))
        out = capsys.readouterr()
        return code, out.out, out.err

    return run


def test_cli_book_and_complete(run_cli, service):
    code, out, _ = run_cli("add-patient", "--name", "Mohamed", "--score", "5")
    assert code == 0 and "Paziente creato" in out
    run_cli("add-doctor", "--name", "Yassmine")

    p = service.find_patient_by_name("Mohamed")
    d = service.find_doctor_by_name("Yassmine")
    code, out, _ = run_cli("book", "--patient-id", str(p.id), "--doctor-id", str(d.id))
    assert code == 0 and "PENDING" in out

    a = service.list_appointments()[0]
    code, out, _ = run_cli("set-status", "--appointment-id", a.id, "--status", "completed")
    assert code == 0 and "COMPLETED" in out

    code, _, err = run_cli("set-status", "--appointment-id", a.id, "--status", "PENDING")
    assert code == 1
    assert "Transizione non ammessa" in err


def test_cli_reports_domain_errors(run_cli):
    code, _, err = run_cli("delete-patient", "--patient-id", "42")
    assert code == 1
    assert "Paziente non trovato" in err


def test_cli_list(run_cli, service):
    seed_base(service)
    code, out, _ = run_cli("list", "appointments")
    assert code == 0
    assert out.count("PENDING") == 3
