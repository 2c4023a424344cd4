def _add_patient(client, name="Mohamed", **extra):
    r = client.post("/addPatient", json={"name": name, **extra})
    assert r.status_code == 201
    return r.json()


def _add_doctor(client, name="Yassmine"):
    r = client.post("/addDoctor", json={"name": name, "email": "y@hospital.local", "specialty": "Cardio"})
    assert r.status_code == 201
    return r.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_patient_crud_flow(client):
    p = _add_patient(client, sick=True, score=12, birth_date="1990-03-14")
    assert p == {"id": p["id"], "name": "Mohamed", "birth_date": "1990-03-14", "sick": True, "score": 12}

    assert client.get("/patients").json() == [p]
    assert client.get(f"/patient/{p['id']}").json() == p

    r = client.put(f"/updatePatient/{p['id']}", json={"name": "Mohamed", "score": 99})
    assert r.status_code == 200
    assert r.json()["score"] == 99
    assert r.json()["birth_date"] is None

    r = client.delete(f"/delete/{p['id']}")
    assert r.status_code == 200
    assert client.get(f"/patient/{p['id']}").status_code == 404


def test_missing_patient_is_404(client):
    r = client.get("/patient/404")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
    assert client.delete("/delete/404").status_code == 404
    assert client.put("/updatePatient/404", json={"name": "x"}).status_code == 404


def test_search_patient(client):
    p = _add_patient(client, "Najat")
    assert client.get("/searchPatient", params={"nom": "Najat"}).json() == p
    r = client.get("/searchPatient", params={"nom": "Nobody"})
    assert r.status_code == 200
    assert r.json() is None


def test_appointment_view_omits_write_only_references(client):
    p = _add_patient(client)
    d = _add_doctor(client)

    r = client.post("/addAppointment", json={"patient_id": p["id"], "doctor_id": d["id"]})
    assert r.status_code == 201
    a = r.json()
    assert a["status"] == "PENDING"
    assert a["doctor"] == d
    assert a["consultation"] is None
    assert "patient" not in a and "patient_id" not in a
    assert "appointments" not in a["doctor"]

    r = client.post("/addConsultation", json={"appointment_id": a["id"], "report": "RAS"})
    assert r.status_code == 201
    assert "appointment" not in r.json() and "appointment_id" not in r.json()

    again = client.post("/addConsultation", json={"appointment_id": a["id"], "report": "RAS"})
    assert again.status_code == 409
    assert again.json()["error"] == "duplicate_link"

    linked = client.get(f"/appointment/{a['id']}").json()
    assert linked["consultation"]["report"] == "RAS"
    assert client.get(f"/patient/{p['id']}/appointments").json()[0]["id"] == a["id"]


def test_appointment_errors_are_4xx(client):
    p = _add_patient(client)
    d = _add_doctor(client)

    r = client.post("/addAppointment", json={"patient_id": 999, "doctor_id": d["id"]})
    assert r.status_code == 400
    assert r.json()["error"] == "reference_not_found"

    a = client.post("/addAppointment", json={"patient_id": p["id"], "doctor_id": d["id"]}).json()
    r = client.put(f"/appointment/{a['id']}/status", json={"status": "COMPLETED"})
    assert r.json()["status"] == "COMPLETED"

    r = client.put(f"/appointment/{a['id']}/status", json={"status": "PENDING"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_status"

    r = client.put(f"/appointment/{a['id']}/status", json={"status": "LOST"})
    assert r.status_code == 400

    assert client.get("/appointment/unknown").status_code == 404


def test_delete_patient_with_appointments_conflicts(client):
    p = _add_patient(client)
    d = _add_doctor(client)
    client.post("/addAppointment", json={"patient_id": p["id"], "doctor_id": d["id"]})

    r = client.delete(f"/delete/{p['id']}")
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"

    assert client.delete(f"/deleteDoctor/{d['id']}").status_code == 409
    assert client.get("/doctors").json() == [d]
