import io
import zipfile

import pandas as pd
from fastapi.testclient import TestClient

from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData
from equilibro.main import create_app


def _process(client, **body):
    r = client.post("/api/process", json=body)
    assert r.status_code == 200, r.text
    return r.json()["unique_id"]


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "catalog_rows": 4, "schools": 3, "sessions": 0}


def test_process_returns_archive_name(client, sessions):
    r = client.post("/api/process", json={"schools": ["S1"]})
    assert r.status_code == 200
    data = r.json()
    assert data["zipFile"] == f"equilibro_files_{data['unique_id']}.zip"
    assert len(data["unique_id"]) == 8
    assert sessions.get(data["unique_id"]) is not None


def test_download_zip(client):
    session_id = _process(client, schools=["S1"])
    r = client.get(f"/api/download-zip/{session_id}.zip")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/zip"
    assert f'filename="equilibro_files_{session_id}.zip"' in r.headers["content-disposition"]

    with zipfile.ZipFile(io.BytesIO(r.content)) as zf:
        assert zf.namelist() == [
            f"CercaListe_{session_id}.csv",
            f"ListeLibri_{session_id}.csv",
            f"ScuoleTerritorio_{session_id}.csv",
        ]
        territory = zf.read(f"ScuoleTerritorio_{session_id}.csv").decode()
    assert territory.splitlines() == ["NomeScuola,CodiceMeccanografico", "Liceo Uno - S1,S1"]


def test_download_zip_twice(client):
    session_id = _process(client)
    assert client.get(f"/api/download-zip/{session_id}").status_code == 200
    assert client.get(f"/api/download-zip/{session_id}").status_code == 200


def test_download_single_files(client):
    session_id = _process(client)

    r = client.get(f"/api/download/CercaListe_{session_id}.csv")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    lines = r.text.splitlines()
    assert lines[0] == "CODICEISBN,CODICESCUOLA_ANNOCORSO_SEZIONEANNO"
    assert lines[1] == '111,"S1_1A, S2_3C"'

    r = client.get(f"/api/download/listelibri_{session_id}.csv")
    assert r.status_code == 200
    assert r.text.splitlines()[1] == "111,Book,Math,10.00,Pub,,"

    r = client.get(f"/api/download/ScuoleTerritorio_{session_id}.csv")
    assert r.status_code == 200
    assert len(r.text.splitlines()) == 4


def test_posted_rows_replace_default_catalog(client):
    rows = [{
        "CODICEISBN": "999", "CODICESCUOLA": "S3", "ANNOCORSO": "5", "SEZIONEANNO": "D",
        "TITOLO": "Atlante", "SOTTOTITOLO": "Mondo", "PREZZO": "15,20",
        "DISCIPLINA": "Geo", "EDITORE": "Ed",
    }]
    session_id = _process(client, rows=rows)
    r = client.get(f"/api/download/ListeLibri_{session_id}.csv")
    assert r.text.splitlines()[1] == "999,Atlante - Mondo,Geo,15.20,Ed,,"


def test_process_upload(client):
    csv_text = (
        "CODICESCUOLA,ANNOCORSO,SEZIONEANNO,CODICEISBN,DISCIPLINA,TITOLO,SOTTOTITOLO,EDITORE,PREZZO\n"
        'S1,1,A,111,Math,Book,ND,Pub,"10,00"\n'
        'S2,2,B,222,Art,Arte,ND,Pub,"5,00"\n'
    )
    files = {"file": ("adozioni.csv", csv_text.encode("utf-8"), "text/csv")}
    r = client.post("/api/process/upload", files=files, data={"schools": "S2"})
    assert r.status_code == 200, r.text
    session_id = r.json()["unique_id"]

    r = client.get(f"/api/download/CercaListe_{session_id}.csv")
    assert r.text.splitlines()[1:] == ["222,S2_2B"]


def test_process_upload_rejects_non_csv(client):
    files = {"file": ("adozioni.xlsx", b"nope", "application/octet-stream")}
    r = client.post("/api/process/upload", files=files)
    assert r.status_code == 400


def test_unknown_session_is_not_found(client):
    assert client.get("/api/download-zip/zzzzzzzz").status_code == 404
    assert client.get("/api/download/CercaListe_zzzzzzzz.csv").status_code == 404


def test_bad_filename_is_not_found(client):
    assert client.get("/api/download/Other_abcd1234.csv").status_code == 404
    assert client.get("/api/download/CercaListe_short.csv").status_code == 404


def test_expired_session_is_not_found(client, clock):
    session_id = _process(client)
    clock.advance(301)
    assert client.get(f"/api/download-zip/{session_id}").status_code == 404
    assert client.get(f"/api/download/CercaListe_{session_id}.csv").status_code == 404


def test_processing_failure_is_server_error(catalog, sessions, monkeypatch):
    from equilibro.api import router_process

    def boom(*args, **kwargs):
        raise RuntimeError("broken")

    monkeypatch.setattr(router_process, "build_bundle", boom)
    client = TestClient(create_app(ReferenceData.from_frames(catalog, pd.DataFrame()), sessions))
    r = client.post("/api/process", json={})
    assert r.status_code == 500
    assert len(sessions) == 0


def test_missing_reference_files_degrade_to_empty(tmp_path):
    ref = ReferenceData(input_paths=[tmp_path / "input.csv"], schools_path=tmp_path / "schools.csv")
    client = TestClient(create_app(reference=ref, sessions=SessionStore()))
    session_id = _process(client)

    r = client.get(f"/api/download/CercaListe_{session_id}.csv")
    assert r.text.splitlines() == ["CODICEISBN,CODICESCUOLA_ANNOCORSO_SEZIONEANNO"]
    assert client.get("/api/schools").json() == []


def test_schools_filters(client):
    r = client.get("/api/schools")
    assert len(r.json()) == 3

    r = client.get("/api/schools", params={"PROVINCIA": "roma"})
    assert [s["CODICESCUOLA"] for s in r.json()] == ["S1", "S3"]

    r = client.get("/api/schools", params={"PROVINCIA": " latina | roma "})
    assert len(r.json()) == 3

    r = client.get("/api/schools", params={"PROVINCIA": "roma", "CODICESCUOLA": "s3"})
    assert [s["DENOMINAZIONESCUOLA"] for s in r.json()] == ["Scuola Tre"]

    r = client.get("/api/schools", params={"PROVINCIA": ""})
    assert len(r.json()) == 3

    r = client.get("/api/schools", params={"UNKNOWN": "x"})
    assert r.json() == []


def test_school_book_data(client):
    r = client.get("/api/school-book-data")
    assert r.status_code == 200
    assert r.json() == {"S1": 2, "S2": 2}


def test_lifespan_starts_and_stops_sessions(catalog, schools):
    store = SessionStore(ttl=300, sweep_interval=60)
    app = create_app(ReferenceData.from_frames(catalog, schools), store)
    with TestClient(app) as client:
        assert store.is_running
        assert client.get("/api/health").status_code == 200
    assert not store.is_running


def test_posted_numeric_values_are_kept_as_text(client):
    rows = [
        {"CODICEISBN": 9788808123456, "CODICESCUOLA": "S1", "ANNOCORSO": 1, "SEZIONEANNO": "A",
         "TITOLO": "Libro", "SOTTOTITOLO": "ND", "PREZZO": 12, "DISCIPLINA": "Math", "EDITORE": "Pub"},
        {"CODICEISBN": 9788808123456, "CODICESCUOLA": "S2", "SEZIONEANNO": "B"},
    ]
    session_id = _process(client, rows=rows)
    r = client.get(f"/api/download/CercaListe_{session_id}.csv")
    assert r.text.splitlines()[1] == '9788808123456,"S1_1A, S2_B"'
