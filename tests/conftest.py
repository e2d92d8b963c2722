"""
Shared fixtures.

Environment is set before the application modules are imported, because
config.config reads it at import time.
"""
import os

os.environ.setdefault("SOCKETIO_ASYNC_MODE", "threading")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GROQ_API_KEY", "test-key")

import json

import pytest

from app import create_app
from config.config import config
from models import db
from services import extraction_service, report_service, well_service
from dao import report_dao


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "test-key")
    monkeypatch.setattr(config, "STRICT_DEPTH_UNITS", False)
    monkeypatch.setattr(config, "CLOSURE_TOLERANCE", 0.0)
    monkeypatch.setattr(
        report_service,
        "upload_report_object",
        lambda file_obj, well_id, file_name: f"s3://test-bucket/reports/{well_id}/{file_name}",
    )
    monkeypatch.setattr(report_dao, "delete_report_object", lambda s3_url: True)
    monkeypatch.setattr(well_service, "delete_report_object", lambda s3_url: True)
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SOCKETIO_ASYNC_MODE": "threading",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class FakeOracle:
    """Stands in for the Groq call: answers are picked by a marker found in the block text."""

    def __init__(self, answers: dict, default: dict | None = None):
        self.answers = answers
        self.default = default or {"resumen": "Sin eventos."}
        self.calls = []

    def __call__(self, messages):
        block = messages[-1]["content"].split("TEXTO:\n", 1)[-1]
        self.calls.append(block)
        for marker, answer in self.answers.items():
            if marker in block:
                return answer if isinstance(answer, str) else json.dumps(answer)
        return json.dumps(self.default)


@pytest.fixture
def fake_oracle(monkeypatch):
    def install(answers: dict, default: dict | None = None) -> FakeOracle:
        oracle = FakeOracle(answers, default)
        monkeypatch.setattr(extraction_service, "_call_groq", oracle)
        return oracle
    return install


REPORT_TEXT = """Poço RJS-0123
Dados gerais do poço.

HISTÓRICO DO POÇO
12/05/1982 Canhoneado o intervalo 561,0/568,0 m com 4 tiros/pé.
Recuperado 2 m3 de óleo.
20/06/1982 Squeeze de cimento no intervalo 561/568 m.
03/01/1983 Assentado BPP a 639 m isolando CPS-01.
"""


@pytest.fixture
def report_text():
    return REPORT_TEXT


@pytest.fixture
def scenario_answers():
    """Oracle answers for the three interventions of REPORT_TEXT."""
    return {
        "Canhoneado": {
            "resumen": "Se punzó 561-568 m.",
            "punzados": [{"desde": "561,0", "hasta": "568,0", "unidad": "m"}],
        },
        "Squeeze": {
            "resumen": "Squeeze sobre 561-568 m.",
            "cementaciones": [{"tipo": "squeeze", "intervalo": {"desde": 561, "hasta": 568, "unidad": "m"}}],
        },
        "BPP": {
            "resumen": "Se aisló con BPP a 639 m.",
            "cementaciones": [{"tipo": "bpp", "profundidad": 639, "zona": "CPS-01"}],
        },
    }
