import pandas as pd
import pytest
from fastapi.testclient import TestClient

from equilibro.data.sessions import SessionStore
from equilibro.data.store import ReferenceData
from equilibro.main import create_app


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def adoption(isbn, school, year="1", section="A", title="Book", subtitle="ND",
             price="10,00", subject="Math", publisher="Pub"):
    return {
        "CODICESCUOLA": school,
        "ANNOCORSO": year,
        "SEZIONEANNO": section,
        "CODICEISBN": isbn,
        "DISCIPLINA": subject,
        "TITOLO": title,
        "SOTTOTITOLO": subtitle,
        "EDITORE": publisher,
        "PREZZO": price,
    }


@pytest.fixture
def catalog():
    return pd.DataFrame([
        adoption("111", "S1", "1", "A"),
        adoption("222", "S1", "2", "B", title="Storia, antica", subtitle="Vol 1", price='"22,50"', subject="History"),
        adoption("111", "S2", "3", "C", title="Different", price="99,99"),
        adoption("333", "S2", "1", "A", title="Chimica", subject="Science", publisher="Zan"),
    ])


@pytest.fixture
def schools():
    return pd.DataFrame([
        {"CODICESCUOLA": "S1", "DENOMINAZIONESCUOLA": "Liceo Uno", "PROVINCIA": "ROMA"},
        {"CODICESCUOLA": "S2", "DENOMINAZIONESCUOLA": "Istituto Due", "PROVINCIA": "LATINA"},
        {"CODICESCUOLA": "S3", "DENOMINAZIONESCUOLA": "Scuola Tre", "PROVINCIA": "Roma"},
    ])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sessions(clock):
    return SessionStore(ttl=300, sweep_interval=60, clock=clock)


@pytest.fixture
def client(catalog, schools, sessions):
    app = create_app(reference=ReferenceData.from_frames(catalog, schools), sessions=sessions)
    return TestClient(app)
