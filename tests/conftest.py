import dataclasses
import sys

import pytest

# Ensure project root is importable (so `import main` / `import cli` work without installing)
import os as _os
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from swarmsvc import db


class FakeEngine:
    """In-memory EngineClient that records the calls it receives."""

    def __init__(self, service_id="svc-0001", error=None):
        self.service_id = service_id
        self.error = error
        self.created = []
        self.removed = []

    def service_create(self, spec):
        self.created.append(spec)
        if self.error is not None:
            raise self.error
        return self.service_id

    def service_remove(self, ident):
        self.removed.append(ident)
        if self.error is not None:
            raise self.error


@pytest.fixture(autouse=True)
def events_db(tmp_path, monkeypatch):
    """Point the event log at an isolated sqlite file."""
    monkeypatch.setattr(db, "settings", dataclasses.replace(db.settings, db_path=str(tmp_path / "events.db")))
    db.init_db()
    return db


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def web_description():
    return {
        "name": "web",
        "image": "nginx:latest",
        "mode": {"kind": "replicated", "replicas": 3},
        "publish_specs": [{"name": "http", "protocol": "tcp", "internal_port": 80, "publish_port": 8080}],
    }
